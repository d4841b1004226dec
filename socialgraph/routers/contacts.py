# socialgraph/routers/contacts.py

from typing import Annotated, List

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field, StringConstraints

from socialgraph.common.deps import get_current_user, get_contact_service
from socialgraph.core.config import settings
from socialgraph.core.phone import PHONE_HASH_PATTERN
from socialgraph.models.profile import ContactMatchRead, Profile
from socialgraph.services.contact_service import ContactService

router = APIRouter()

PhoneHashStr = Annotated[str, StringConstraints(pattern=PHONE_HASH_PATTERN)]


class LookupRequest(BaseModel):
    hashes: List[PhoneHashStr] = Field(max_length=settings.LOOKUP_MAX_HASHES)


@router.post("/lookup", response_model=List[ContactMatchRead])
def lookup_by_hashes(
    data: LookupRequest,
    current_user: Profile = Depends(get_current_user),
    service: ContactService = Depends(get_contact_service),
):
    # Read-only; the caller filters out itself and its existing graph
    return service.lookup_by_hashes(data.hashes)
