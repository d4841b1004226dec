# socialgraph/common/deps.py

from functools import lru_cache

from fastapi import BackgroundTasks, Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from socialgraph.core.errors import Unauthorized
from socialgraph.core.security import decode_subject
from socialgraph.db.session import get_db
from socialgraph.models.profile import Profile
from socialgraph.services.contact_service import ContactService
from socialgraph.services.friendship_service import FriendshipService
from socialgraph.services.notification_service import NotificationDispatcher, NotificationFeedService
from socialgraph.services.otp_vendor import OtpVendor, VonageVerifyClient
from socialgraph.services.push_vendor import ExpoPushClient, PushClient
from socialgraph.services.verification_service import VerificationService

# Tokens come from the external auth provider
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/token", auto_error=False)


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> Profile:
    if not token:
        raise Unauthorized("Not authenticated")

    profile_id = decode_subject(token)
    if profile_id is None:
        raise Unauthorized()

    user = db.get(Profile, profile_id)
    if user is None:
        raise Unauthorized()
    return user


@lru_cache
def get_otp_vendor() -> OtpVendor:
    return VonageVerifyClient.from_settings()


@lru_cache
def get_push_client() -> PushClient:
    return ExpoPushClient.from_settings()


def get_notification_dispatcher(
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    push_client: PushClient = Depends(get_push_client),
) -> NotificationDispatcher:
    # Push runs after the response is sent
    return NotificationDispatcher(db=db, push_client=push_client, defer=background_tasks.add_task)


def get_feed_service(db: Session = Depends(get_db)) -> NotificationFeedService:
    return NotificationFeedService(db=db)


def get_friendship_service(
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
) -> FriendshipService:
    return FriendshipService(db=db, dispatcher=dispatcher)


def get_contact_service(db: Session = Depends(get_db)) -> ContactService:
    return ContactService(db=db)


def get_verification_service(
    db: Session = Depends(get_db),
    vendor: OtpVendor = Depends(get_otp_vendor),
) -> VerificationService:
    return VerificationService(db=db, vendor=vendor)
