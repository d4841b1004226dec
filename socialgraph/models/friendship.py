# socialgraph/models/friendship.py

from datetime import datetime
from typing import Optional

from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint, CheckConstraint
from pydantic import BaseModel, ConfigDict

from socialgraph.db.base_class import Base, new_id, utcnow
from socialgraph.models.profile import PublicProfile

PENDING = "pending"
ACCEPTED = "accepted"


def canonical_pair(a: str, b: str):
    return (a, b) if a <= b else (b, a)


class Friendship(Base):
    __tablename__ = "friendships"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("profiles.id", ondelete="CASCADE"), index=True, nullable=False)    # requester
    friend_id = Column(String(36), ForeignKey("profiles.id", ondelete="CASCADE"), index=True, nullable=False)  # recipient

    # min/max of the two ids; one row per unordered pair
    pair_low = Column(String(36), nullable=False)
    pair_high = Column(String(36), nullable=False)

    status = Column(String(20), default=PENDING, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("pair_low", "pair_high", name="uq_friendship_pair"),
        CheckConstraint("user_id <> friend_id", name="ck_friendship_not_self"),
    )

    @classmethod
    def request(cls, requester_id: str, target_id: str) -> "Friendship":
        low, high = canonical_pair(requester_id, target_id)
        return cls(
            id=new_id(),
            user_id=requester_id,
            friend_id=target_id,
            pair_low=low,
            pair_high=high,
            status=PENDING,
        )

    def involves(self, profile_id: str) -> bool:
        return profile_id in (self.user_id, self.friend_id)

    def other_party(self, profile_id: str) -> str:
        return self.friend_id if self.user_id == profile_id else self.user_id


class FriendshipRead(BaseModel):
    id: str
    user_id: str
    friend_id: str
    status: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class FriendEntry(FriendshipRead):
    """A friendship seen from one participant, with the other one's profile."""

    profile: Optional[PublicProfile] = None


class FriendRequestCreate(BaseModel):
    target_id: str


class RelationshipStatus(BaseModel):
    """none | pending_outgoing | pending_incoming | accepted"""

    status: str
    friendship_id: Optional[str] = None
