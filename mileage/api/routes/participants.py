from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from mileage.api.deps import get_db
from mileage.api.routes.meetups import get_meetup_or_404
from mileage.core.auth import get_current_user
from mileage.crud import meetup_crud
from mileage.models.meetup_participant import MeetupParticipant
from mileage.models.user import User
from mileage.schemas.participant import ParticipantPublic

router = APIRouter(prefix="/meetups", tags=["participants"])

ALREADY_JOINED = "User has already joined this meetup"


@router.post("/{meetup_id}/join", response_model=ParticipantPublic, status_code=201)
def join_meetup(
    meetup_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    meetup = get_meetup_or_404(db, meetup_id)

    existing = db.execute(
        select(MeetupParticipant).where(
            MeetupParticipant.meetup_id == meetup.id,
            MeetupParticipant.user_id == current_user.id,
        )
    ).scalar_one_or_none()
    if existing:
        raise HTTPException(status_code=422, detail=ALREADY_JOINED)

    participant = MeetupParticipant(meetup_id=meetup.id, user_id=current_user.id)
    try:
        db.add(participant)
        db.commit()
    except IntegrityError:
        # a concurrent join for the same pair hit the unique constraint first
        db.rollback()
        raise HTTPException(status_code=422, detail=ALREADY_JOINED)
    db.refresh(participant)

    return meetup_crud.participant_public(db, participant)


@router.delete("/{meetup_id}/leave")
def leave_meetup(
    meetup_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    meetup = get_meetup_or_404(db, meetup_id)

    participation = db.execute(
        select(MeetupParticipant).where(
            MeetupParticipant.meetup_id == meetup.id,
            MeetupParticipant.user_id == current_user.id,
        )
    ).scalar_one_or_none()
    if not participation:
        raise HTTPException(status_code=404, detail="You have not joined this meetup")

    db.delete(participation)
    db.commit()

    return {"message": "Successfully left the meetup"}
