# socialgraph/services/verification_service.py

import logging

from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from socialgraph.core.errors import InvalidCode, PersistenceError
from socialgraph.core.phone import hash_phone
from socialgraph.db.base_class import utcnow
from socialgraph.models.profile import Profile
from socialgraph.models.verification import PhoneVerification, PENDING, VERIFIED, BOUND
from socialgraph.services.otp_vendor import OtpVendor

logger = logging.getLogger(__name__)


class VerificationService:
    """
    Binds a phone hash to the caller's profile once the OTP vendor confirms
    the caller holds the phone.

    The check runs in two writes. The vendor result is saved first
    (status=verified); then the hash is copied onto the profile
    (status=bound). If the second write fails the client repeats the same
    check request and only that write is re-driven, because the vendor will
    not accept the same code twice.
    """

    def __init__(self, db: Session, vendor: OtpVendor):
        self.db = db
        self.vendor = vendor

    def start_verification(self, caller_id: str, phone: str) -> str:
        phone_hash = hash_phone(phone)
        request_id = self.vendor.start(phone)

        self.db.add(PhoneVerification(
            id=request_id,
            profile_id=caller_id,
            phone_hash=phone_hash,
            status=PENDING,
        ))
        self._commit("Could not start verification. Try again.")
        logger.info("Verification %s started for profile %s", request_id, caller_id)
        return request_id

    def check_verification(self, caller_id: str, request_id: str, code: str, phone: str) -> bool:
        record = self.db.get(PhoneVerification, request_id)
        if record is None or record.profile_id != caller_id:
            raise InvalidCode()

        # Hash computed here, never taken from the client
        if hash_phone(phone) != record.phone_hash:
            raise InvalidCode("Phone number does not match the verification request")

        if record.status == BOUND:
            return True

        if record.status == PENDING:
            self.vendor.check(request_id, code)
            record.status = VERIFIED
            record.verified_at = utcnow()
            self._commit("Verified but failed to save. Try again.")

        self._bind(record)
        return True

    def _bind(self, record: PhoneVerification):
        profile = self.db.get(Profile, record.profile_id)
        if profile is None:
            raise PersistenceError("Profile not found. Try again.")

        # Re-verification simply replaces the previous hash
        profile.phone_hash = record.phone_hash
        record.status = BOUND
        self._commit("Verified but failed to save. Try again.")
        logger.info("Phone hash bound to profile %s", profile.id)

    def _commit(self, message: str):
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Verification write failed: %s", e)
            raise PersistenceError(message) from e
