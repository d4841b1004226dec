# socialgraph/routers/verification.py

from fastapi import APIRouter, Depends

from socialgraph.common.deps import get_current_user, get_verification_service
from socialgraph.models.profile import Profile
from socialgraph.models.verification import (
    VerificationCheck,
    VerificationResult,
    VerificationStart,
    VerificationStarted,
)
from socialgraph.services.verification_service import VerificationService

router = APIRouter()


@router.post("/start", response_model=VerificationStarted)
def start_verification(
    data: VerificationStart,
    current_user: Profile = Depends(get_current_user),
    service: VerificationService = Depends(get_verification_service),
):
    request_id = service.start_verification(current_user.id, data.phone)
    return VerificationStarted(request_id=request_id)


@router.post("/check", response_model=VerificationResult)
def check_verification(
    data: VerificationCheck,
    current_user: Profile = Depends(get_current_user),
    service: VerificationService = Depends(get_verification_service),
):
    # The profile comes from the session, never from the body
    service.check_verification(current_user.id, data.request_id, data.code, data.phone)
    return VerificationResult(success=True)
