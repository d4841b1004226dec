# socialgraph/routers/friends.py

from typing import List

from fastapi import APIRouter, Depends, status

from socialgraph.common.deps import get_current_user, get_friendship_service
from socialgraph.models.profile import Profile
from socialgraph.models.friendship import (
    FriendEntry,
    FriendRequestCreate,
    FriendshipRead,
    RelationshipStatus,
)
from socialgraph.services.friendship_service import FriendshipService

router = APIRouter()


@router.get("/", response_model=List[FriendEntry])
def list_friends(
    current_user: Profile = Depends(get_current_user),
    service: FriendshipService = Depends(get_friendship_service),
):
    # Accepted rows in either direction
    return service.list_friends(current_user.id)


@router.get("/requests", response_model=List[FriendEntry])
def list_incoming_requests(
    current_user: Profile = Depends(get_current_user),
    service: FriendshipService = Depends(get_friendship_service),
):
    return service.list_incoming(current_user.id)


@router.get("/sent", response_model=List[FriendEntry])
def list_sent_requests(
    current_user: Profile = Depends(get_current_user),
    service: FriendshipService = Depends(get_friendship_service),
):
    return service.list_sent(current_user.id)


@router.get("/status/{profile_id}", response_model=RelationshipStatus)
def relationship_status(
    profile_id: str,
    current_user: Profile = Depends(get_current_user),
    service: FriendshipService = Depends(get_friendship_service),
):
    return service.relationship_with(current_user.id, profile_id)


@router.post("/requests", response_model=FriendshipRead, status_code=status.HTTP_201_CREATED)
def send_request(
    data: FriendRequestCreate,
    current_user: Profile = Depends(get_current_user),
    service: FriendshipService = Depends(get_friendship_service),
):
    return service.send_request(current_user.id, data.target_id)


@router.post("/requests/{friendship_id}/accept", response_model=FriendshipRead)
def accept_request(
    friendship_id: str,
    current_user: Profile = Depends(get_current_user),
    service: FriendshipService = Depends(get_friendship_service),
):
    return service.accept_request(friendship_id, current_user.id)


@router.post("/requests/{friendship_id}/reject", status_code=status.HTTP_204_NO_CONTENT)
def reject_request(
    friendship_id: str,
    current_user: Profile = Depends(get_current_user),
    service: FriendshipService = Depends(get_friendship_service),
):
    service.reject_request(friendship_id, current_user.id)


@router.delete("/{friendship_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_friend(
    friendship_id: str,
    current_user: Profile = Depends(get_current_user),
    service: FriendshipService = Depends(get_friendship_service),
):
    # Cancels a pending request or ends a friendship
    service.remove_friend(friendship_id, current_user.id)
