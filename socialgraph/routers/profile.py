# socialgraph/routers/profile.py

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from socialgraph.common.deps import get_current_user
from socialgraph.db.session import get_db
from socialgraph.models.profile import Profile, ProfileRead, PushTokenUpdate

router = APIRouter()


@router.get("/me", response_model=ProfileRead)
def read_me(current_user: Profile = Depends(get_current_user)):
    return ProfileRead.from_profile(current_user)


@router.put("/me/push-token", response_model=ProfileRead)
def save_push_token(
    data: PushTokenUpdate,
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    current_user.push_token = data.token
    db.commit()
    db.refresh(current_user)
    return ProfileRead.from_profile(current_user)


@router.delete("/me/push-token", status_code=status.HTTP_204_NO_CONTENT)
def clear_push_token(
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    # Called on sign-out so the device stops receiving pushes
    current_user.push_token = None
    db.commit()
