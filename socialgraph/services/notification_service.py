# socialgraph/services/notification_service.py

"""Notification fan-out: persist a recipient-addressed record, then push.

The record is the source of truth for the in-app feed. Push delivery is
best effort: a missing token is a normal outcome and vendor failures are
logged and reported as ``sent=False``, never raised.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Optional, Tuple

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from socialgraph.core.config import settings
from socialgraph.core.errors import Forbidden, NotFound, PersistenceError, PushDeliveryError
from socialgraph.db.base_class import utcnow
from socialgraph.models.profile import Profile
from socialgraph.models.notification import (
    Notification,
    NotificationFeed,
    NotificationRead,
    SocialEventCreate,
    FRIEND_REQUEST,
    ACCEPTED,
    LIKE,
    COMMENT,
)
from socialgraph.services.push_vendor import PushClient

logger = logging.getLogger(__name__)

NO_PUSH_TOKEN = "no_push_token"
PUSH_FAILED = "push_failed"

COMMENT_PREVIEW_LENGTH = 100


@dataclass
class PushResult:
    sent: bool
    reason: Optional[str] = None
    ticket: Optional[dict] = None


@dataclass
class PushMessage:
    token: Optional[str]
    title: str
    body: str
    data: dict = field(default_factory=dict)


def compose_message(notification: Notification, actor_name: str) -> Tuple[str, str]:
    if notification.type == FRIEND_REQUEST:
        return "New Friend Request", f"{actor_name} sent you a friend request"
    if notification.type == ACCEPTED:
        return "Friend Request Accepted", f"{actor_name} accepted your friend request"
    if notification.type == LIKE:
        return "New Like", f"{actor_name} liked your post"
    if notification.type == COMMENT:
        preview = (notification.comment_content or "")[:COMMENT_PREVIEW_LENGTH]
        return "New Comment", f"{actor_name} commented: {preview}"
    raise ValueError(f"unknown notification type {notification.type!r}")


class NotificationDispatcher:
    """
    `record` stages a notification in the caller's transaction, `dispatch`
    commits one on its own, and `push` delivers an already committed one.
    Pass `defer` (e.g. BackgroundTasks.add_task) to push after the response.
    """

    def __init__(
        self,
        db: Session,
        push_client: Optional[PushClient],
        defer: Optional[Callable[..., Any]] = None,
    ):
        self.db = db
        self.push_client = push_client
        self.defer = defer

    def record(self, type_: str, actor_id: str, recipient_id: str, **fields) -> Notification:
        notification = Notification(type=type_, actor_id=actor_id, recipient_id=recipient_id, **fields)
        self.db.add(notification)
        return notification

    def dispatch(self, notification: Notification) -> Optional[PushResult]:
        self.db.add(notification)
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Could not save %s notification: %s", notification.type, e)
            raise PersistenceError("Could not save notification. Try again.") from e
        return self.push(notification)

    def push(self, notification: Notification) -> Optional[PushResult]:
        """Returns None when delivery was handed to `defer`."""
        message = self._build_message(notification)
        if not message.token:
            logger.info("No push token for recipient %s", notification.recipient_id)
            return PushResult(sent=False, reason=NO_PUSH_TOKEN)

        if self.defer is not None:
            self.defer(self.deliver, message)
            return None
        return self.deliver(message)

    def deliver(self, message: PushMessage) -> PushResult:
        if not message.token:
            return PushResult(sent=False, reason=NO_PUSH_TOKEN)
        if self.push_client is None:
            logger.warning("Push client not configured; dropping %r", message.title)
            return PushResult(sent=False, reason=PUSH_FAILED)
        try:
            ticket = self.push_client.send(message.token, message.title, message.body, message.data)
        except PushDeliveryError as e:
            logger.warning("Push delivery failed: %s", e.message)
            return PushResult(sent=False, reason=PUSH_FAILED)
        return PushResult(sent=True, ticket=ticket)

    def _build_message(self, notification: Notification) -> PushMessage:
        # Resolve everything while the session is still open; `deliver` may run later
        actor = self.db.get(Profile, notification.actor_id)
        recipient = self.db.get(Profile, notification.recipient_id)
        actor_name = actor.name_for_display if actor else "Someone"
        title, body = compose_message(notification, actor_name)

        data = {"screen": "notifications", "type": notification.type, "notification_id": notification.id}
        if notification.post_id:
            data["post_id"] = notification.post_id
        return PushMessage(
            token=recipient.push_token if recipient else None,
            title=title,
            body=body,
            data=data,
        )

    # --- social interactions reported by the feed service ---

    def record_social_event(self, actor_id: str, event: SocialEventCreate) -> Optional[Notification]:
        # Liking or commenting on your own post notifies nobody
        if event.recipient_id == actor_id:
            return None
        if self.db.get(Profile, event.recipient_id) is None:
            raise NotFound("Profile not found")

        notification = Notification(
            type=event.type,
            actor_id=actor_id,
            recipient_id=event.recipient_id,
            post_id=event.post_id,
            comment_content=event.comment_content if event.type == COMMENT else None,
        )
        self.dispatch(notification)
        return notification


class NotificationFeedService:
    """Per-recipient feed and read state."""

    def __init__(self, db: Session):
        self.db = db

    def feed(
        self,
        recipient_id: str,
        limit: Optional[int] = None,
        before: Optional[datetime] = None,
        before_id: Optional[str] = None,
    ) -> NotificationFeed:
        limit = limit or settings.NOTIFICATION_PAGE_SIZE
        query = self.db.query(Notification).filter(Notification.recipient_id == recipient_id)
        if before is not None and before_id is not None:
            # Keyset on (created_at, id) so rows sharing a timestamp are not skipped
            query = query.filter(
                or_(
                    Notification.created_at < before,
                    and_(Notification.created_at == before, Notification.id < before_id),
                )
            )
        elif before is not None:
            query = query.filter(Notification.created_at < before)

        rows = query.order_by(Notification.created_at.desc(), Notification.id.desc()).limit(limit + 1).all()
        has_more = len(rows) > limit
        rows = rows[:limit]

        return NotificationFeed(
            items=[NotificationRead.from_row(row) for row in rows],
            unread_count=self.unread_count(recipient_id),
            next_before=rows[-1].created_at if has_more else None,
            next_before_id=rows[-1].id if has_more else None,
        )

    def unread_count(self, recipient_id: str) -> int:
        return (
            self.db.query(Notification)
            .filter(Notification.recipient_id == recipient_id, Notification.read_at.is_(None))
            .count()
        )

    def mark_read(self, notification_id: str, caller_id: str) -> Notification:
        notification = self.db.get(Notification, notification_id)
        if notification is None:
            raise NotFound("Notification not found")
        if notification.recipient_id != caller_id:
            raise Forbidden("Only the recipient can mark a notification as read")

        if notification.read_at is None:
            notification.read_at = utcnow()
            self.db.commit()
            self.db.refresh(notification)
        return notification

    def mark_all_read(self, caller_id: str) -> int:
        updated = (
            self.db.query(Notification)
            .filter(Notification.recipient_id == caller_id, Notification.read_at.is_(None))
            .update({"read_at": utcnow()}, synchronize_session=False)
        )
        self.db.commit()
        return updated

