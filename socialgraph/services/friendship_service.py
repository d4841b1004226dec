# socialgraph/services/friendship_service.py

import logging
from typing import Dict, Iterable, List, Optional

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from socialgraph.core.errors import AlreadyExists, Forbidden, InvalidState, NotFound
from socialgraph.db.base_class import utcnow
from socialgraph.models.profile import Profile, PublicProfile
from socialgraph.models.friendship import (
    Friendship,
    FriendEntry,
    RelationshipStatus,
    canonical_pair,
    PENDING,
    ACCEPTED,
)
from socialgraph.models import notification as notification_types
from socialgraph.services.notification_service import NotificationDispatcher

logger = logging.getLogger(__name__)


class FriendshipService:
    """
    Friend graph state machine. One row per unordered pair:

        none --send--> pending --accept--> accepted
        pending --reject/remove--> none, accepted --remove--> none

    The unique (pair_low, pair_high) index is what serializes concurrent
    writers; every method takes the caller id explicitly.
    """

    def __init__(self, db: Session, dispatcher: NotificationDispatcher):
        self.db = db
        self.dispatcher = dispatcher

    # --- transitions ---

    def send_request(self, requester_id: str, target_id: str) -> Friendship:
        if requester_id == target_id:
            raise AlreadyExists("You cannot send a friend request to yourself")
        if self.db.get(Profile, target_id) is None:
            raise NotFound("Profile not found")

        existing = self.find_pair(requester_id, target_id)
        if existing is not None:
            raise self._already_exists(existing, requester_id)

        friendship = Friendship.request(requester_id, target_id)
        self.db.add(friendship)
        notification = self.dispatcher.record(
            notification_types.FRIEND_REQUEST,
            actor_id=requester_id,
            recipient_id=target_id,
            friendship_id=friendship.id,
        )
        try:
            self.db.commit()
        except IntegrityError:
            # Lost the race against a request for the same pair
            self.db.rollback()
            existing = self.find_pair(requester_id, target_id)
            if existing is None:
                raise AlreadyExists()
            raise self._already_exists(existing, requester_id)

        logger.info("Friend request %s: %s -> %s", friendship.id, requester_id, target_id)
        self.dispatcher.push(notification)
        return friendship

    def accept_request(self, friendship_id: str, caller_id: str) -> Friendship:
        friendship = self._get(friendship_id)
        if friendship.friend_id != caller_id:
            raise Forbidden("Only the recipient can accept this friend request")
        if friendship.status != PENDING:
            raise InvalidState("Friend request is no longer pending", details={"status": friendship.status})

        updated = (
            self.db.query(Friendship)
            .filter(Friendship.id == friendship_id, Friendship.status == PENDING)
            .update({"status": ACCEPTED, "updated_at": utcnow()}, synchronize_session=False)
        )
        if updated == 0:
            self.db.rollback()
            self._raise_changed(friendship_id)

        notification = self.dispatcher.record(
            notification_types.ACCEPTED,
            actor_id=caller_id,
            recipient_id=friendship.user_id,
            friendship_id=friendship_id,
        )
        self.db.commit()
        self.db.refresh(friendship)

        logger.info("Friend request %s accepted by %s", friendship_id, caller_id)
        self.dispatcher.push(notification)
        return friendship

    def reject_request(self, friendship_id: str, caller_id: str) -> None:
        friendship = self._get(friendship_id)
        if friendship.friend_id != caller_id:
            raise Forbidden("Only the recipient can reject this friend request")
        if friendship.status != PENDING:
            raise InvalidState("Friend request is no longer pending", details={"status": friendship.status})

        deleted = (
            self.db.query(Friendship)
            .filter(Friendship.id == friendship_id, Friendship.status == PENDING)
            .delete(synchronize_session=False)
        )
        if deleted == 0:
            self.db.rollback()
            self._raise_changed(friendship_id)
        self.db.commit()
        # No notification: rejection is silent
        logger.info("Friend request %s rejected by %s", friendship_id, caller_id)

    def remove_friend(self, friendship_id: str, caller_id: str) -> None:
        friendship = self._get(friendship_id)
        if not friendship.involves(caller_id):
            raise Forbidden("Only a participant can remove this relationship")

        deleted = (
            self.db.query(Friendship)
            .filter(Friendship.id == friendship_id)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        if deleted == 0:
            raise NotFound("Friendship not found")
        logger.info("Friendship %s removed by %s", friendship_id, caller_id)

    # --- queries ---

    def find_pair(self, a: str, b: str) -> Optional[Friendship]:
        low, high = canonical_pair(a, b)
        return (
            self.db.query(Friendship)
            .filter(Friendship.pair_low == low, Friendship.pair_high == high)
            .first()
        )

    def list_friends(self, caller_id: str) -> List[FriendEntry]:
        rows = (
            self.db.query(Friendship)
            .filter(
                or_(Friendship.user_id == caller_id, Friendship.friend_id == caller_id),
                Friendship.status == ACCEPTED,
            )
            .order_by(Friendship.updated_at.desc())
            .all()
        )
        return self._entries(rows, caller_id)

    def list_incoming(self, caller_id: str) -> List[FriendEntry]:
        rows = (
            self.db.query(Friendship)
            .filter(Friendship.friend_id == caller_id, Friendship.status == PENDING)
            .order_by(Friendship.created_at.desc())
            .all()
        )
        return self._entries(rows, caller_id)

    def list_sent(self, caller_id: str) -> List[FriendEntry]:
        rows = (
            self.db.query(Friendship)
            .filter(Friendship.user_id == caller_id, Friendship.status == PENDING)
            .order_by(Friendship.created_at.desc())
            .all()
        )
        return self._entries(rows, caller_id)

    def relationship_with(self, caller_id: str, other_id: str) -> RelationshipStatus:
        friendship = self.find_pair(caller_id, other_id) if caller_id != other_id else None
        if friendship is None:
            return RelationshipStatus(status="none")
        if friendship.status == ACCEPTED:
            status = "accepted"
        elif friendship.user_id == caller_id:
            status = "pending_outgoing"
        else:
            status = "pending_incoming"
        return RelationshipStatus(status=status, friendship_id=friendship.id)

    # --- helpers ---

    def _get(self, friendship_id: str) -> Friendship:
        friendship = self.db.get(Friendship, friendship_id)
        if friendship is None:
            raise NotFound("Friend request not found")
        return friendship

    def _raise_changed(self, friendship_id: str):
        # A concurrent writer got there first
        self.db.expire_all()
        current = self.db.get(Friendship, friendship_id)
        if current is None:
            raise NotFound("Friend request not found")
        raise InvalidState("Friend request is no longer pending", details={"status": current.status})

    def _already_exists(self, existing: Friendship, caller_id: str) -> AlreadyExists:
        details = {"status": existing.status, "friendship_id": existing.id}
        if existing.status == ACCEPTED:
            return AlreadyExists("You are already friends", details=details)
        if existing.user_id == caller_id:
            return AlreadyExists("Friend request already sent", details=details)
        return AlreadyExists("This user already sent you a friend request", details=details)

    def _entries(self, rows: Iterable[Friendship], caller_id: str) -> List[FriendEntry]:
        rows = list(rows)
        profiles = self._profiles([row.other_party(caller_id) for row in rows])
        entries = []
        for row in rows:
            entry = FriendEntry.model_validate(row)
            other = profiles.get(row.other_party(caller_id))
            entry.profile = PublicProfile.model_validate(other) if other else None
            entries.append(entry)
        return entries

    def _profiles(self, ids: List[str]) -> Dict[str, Profile]:
        if not ids:
            return {}
        rows = self.db.query(Profile).filter(Profile.id.in_(set(ids))).all()
        return {p.id: p for p in rows}
