# socialgraph/routers/notifications.py

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status

from socialgraph.common.deps import get_current_user, get_feed_service, get_notification_dispatcher
from socialgraph.models.profile import Profile
from socialgraph.models.notification import NotificationFeed, NotificationRead, SocialEventCreate
from socialgraph.services.notification_service import NotificationDispatcher, NotificationFeedService

router = APIRouter()


@router.get("/", response_model=NotificationFeed)
def get_feed(
    limit: Optional[int] = Query(default=None, ge=1, le=200),
    before: Optional[datetime] = None,
    before_id: Optional[str] = None,
    current_user: Profile = Depends(get_current_user),
    service: NotificationFeedService = Depends(get_feed_service),
):
    return service.feed(current_user.id, limit=limit, before=before, before_id=before_id)


@router.post("/read-all")
def mark_all_read(
    current_user: Profile = Depends(get_current_user),
    service: NotificationFeedService = Depends(get_feed_service),
):
    return {"updated": service.mark_all_read(current_user.id)}


@router.post("/{notification_id}/read", response_model=NotificationRead)
def mark_read(
    notification_id: str,
    current_user: Profile = Depends(get_current_user),
    service: NotificationFeedService = Depends(get_feed_service),
):
    return NotificationRead.from_row(service.mark_read(notification_id, current_user.id))


@router.post("/events", response_model=NotificationRead, status_code=status.HTTP_201_CREATED)
def report_social_event(
    data: SocialEventCreate,
    current_user: Profile = Depends(get_current_user),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
):
    notification = dispatcher.record_social_event(current_user.id, data)
    if notification is None:
        # Self-interaction, nothing to notify
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return NotificationRead.from_row(notification)
