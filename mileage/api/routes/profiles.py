from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.orm import Session

from mileage.api.deps import get_db
from mileage.core.auth import get_current_user
from mileage.models.profile import Profile
from mileage.models.user import User
from mileage.schemas.profile import ProfilePublic, ProfileUpdateRequest

router = APIRouter(prefix="/users/{user_id}/profile", tags=["profiles"])


def _own_profile(db: Session, user_id: int, current_user: User) -> Profile:
    # only the owner may read or edit a profile
    if user_id != current_user.id:
        raise HTTPException(status_code=401, detail="Unauthorized")

    profile = db.execute(select(Profile).where(Profile.user_id == user_id)).scalar_one_or_none()
    if profile is None:
        profile = Profile(user_id=user_id, bio="")
        db.add(profile)
        db.commit()
        db.refresh(profile)
    return profile


@router.get("", response_model=ProfilePublic)
def get_profile(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return _own_profile(db, user_id, current_user)


@router.patch("", response_model=ProfilePublic)
def update_profile(
    user_id: int,
    payload: ProfileUpdateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    profile = _own_profile(db, user_id, current_user)

    profile.bio = payload.profile.bio
    db.commit()
    db.refresh(profile)

    return profile
