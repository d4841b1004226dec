# socialgraph/models/notification.py

from datetime import datetime
from typing import List, Literal, Optional

from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from pydantic import BaseModel, ConfigDict, Field, model_validator

from socialgraph.db.base_class import Base, new_id, utcnow
from socialgraph.models.profile import PublicProfile

FRIEND_REQUEST = "friend_request"
ACCEPTED = "accepted"
LIKE = "like"
COMMENT = "comment"


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True, default=new_id)
    type = Column(String(20), nullable=False)
    actor_id = Column(String(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    recipient_id = Column(String(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)

    # Plain reference: the friendship row may be deleted later
    friendship_id = Column(String(36), nullable=True)
    post_id = Column(String(36), nullable=True)
    comment_content = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    read_at = Column(DateTime(timezone=True), nullable=True)

    actor = relationship("Profile", foreign_keys=[actor_id])

    __table_args__ = (
        Index("ix_notifications_recipient_created", "recipient_id", "created_at"),
    )


class NotificationRead(BaseModel):
    id: str
    type: str
    actor_id: str
    recipient_id: str
    friendship_id: Optional[str] = None
    post_id: Optional[str] = None
    comment_content: Optional[str] = None
    created_at: datetime
    read: bool = False
    actor: Optional[PublicProfile] = None

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_row(cls, row: Notification) -> "NotificationRead":
        item = cls.model_validate(row)
        item.read = row.read_at is not None
        return item


class NotificationFeed(BaseModel):
    items: List[NotificationRead]
    unread_count: int
    next_before: Optional[datetime] = None
    next_before_id: Optional[str] = None


class SocialEventCreate(BaseModel):
    """Like/comment events reported by the feed service on the actor's behalf."""

    type: Literal["like", "comment"]
    recipient_id: str
    post_id: str
    comment_content: Optional[str] = Field(default=None, max_length=2000)

    @model_validator(mode="after")
    def _comment_needs_content(self):
        if self.type == COMMENT and not self.comment_content:
            raise ValueError("comment events need comment_content")
        return self
