# socialgraph/models/verification.py

from sqlalchemy import Column, String, DateTime, ForeignKey
from pydantic import BaseModel, Field

from socialgraph.db.base_class import Base, utcnow

# pending  -> code sent, not yet checked
# verified -> vendor accepted the code, profile not updated yet
# bound    -> phone_hash written to the profile
PENDING = "pending"
VERIFIED = "verified"
BOUND = "bound"


class PhoneVerification(Base):
    __tablename__ = "phone_verifications"

    # Vendor request id
    id = Column(String(64), primary_key=True)
    profile_id = Column(String(36), ForeignKey("profiles.id", ondelete="CASCADE"), index=True, nullable=False)
    phone_hash = Column(String(64), nullable=False)
    status = Column(String(20), default=PENDING, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    verified_at = Column(DateTime(timezone=True), nullable=True)


class VerificationStart(BaseModel):
    phone: str = Field(min_length=1, max_length=32)


class VerificationStarted(BaseModel):
    request_id: str


class VerificationCheck(BaseModel):
    request_id: str = Field(min_length=1, max_length=64)
    code: str = Field(min_length=1, max_length=16)
    phone: str = Field(min_length=1, max_length=32)


class VerificationResult(BaseModel):
    success: bool
