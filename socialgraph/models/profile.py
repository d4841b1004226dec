# socialgraph/models/profile.py

from datetime import datetime
from typing import Optional

from sqlalchemy import Column, String, DateTime
from pydantic import BaseModel, ConfigDict, Field

from socialgraph.db.base_class import Base, new_id, utcnow


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(String(36), primary_key=True, default=new_id)
    email = Column(String(255), unique=True, index=True, nullable=False)
    display_name = Column(String(100), nullable=True)
    username = Column(String(50), unique=True, index=True, nullable=True)
    avatar_url = Column(String(500), nullable=True)

    # Written only by VerificationService after the OTP vendor confirms the code
    phone_hash = Column(String(64), index=True, nullable=True)

    push_token = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    @property
    def name_for_display(self) -> str:
        return self.display_name or self.username or "Someone"


class PublicProfile(BaseModel):
    """What other users get to see: no email, no phone hash, no push token."""

    id: str
    username: Optional[str] = None
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ProfileRead(PublicProfile):
    email: str
    phone_verified: bool = False
    has_push_token: bool = False
    created_at: datetime

    @classmethod
    def from_profile(cls, profile: Profile) -> "ProfileRead":
        return cls(
            id=profile.id,
            username=profile.username,
            display_name=profile.display_name,
            avatar_url=profile.avatar_url,
            email=profile.email,
            phone_verified=profile.phone_hash is not None,
            has_push_token=bool(profile.push_token),
            created_at=profile.created_at,
        )


class PushTokenUpdate(BaseModel):
    token: str = Field(min_length=1, max_length=255)


class ContactMatchRead(PublicProfile):
    # Echoes one of the hashes the caller sent, so it can find the contact name
    phone_hash: str
