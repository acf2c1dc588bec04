import structlog
from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import TypeAdapter
from sqlalchemy import select
from sqlalchemy.orm import Session

from mileage.api.deps import get_db
from mileage.core.auth import get_current_user
from mileage.core.config import settings
from mileage.crud import meetup_crud
from mileage.crud.pagination import paginate
from mileage.models.location import LocationableKind
from mileage.models.meetup import Meetup
from mileage.models.user import User
from mileage.schemas.meetup import (
    MeetupCreateRequest,
    MeetupExtended,
    MeetupPage,
    MeetupPublic,
    MeetupUpdateRequest,
)

logger = structlog.get_logger()

router = APIRouter(prefix="/meetups", tags=["meetups"])

_meetup_list = TypeAdapter(list[MeetupPublic])


def get_meetup_or_404(db: Session, meetup_id: int) -> Meetup:
    meetup = db.get(Meetup, meetup_id)
    if not meetup:
        raise HTTPException(status_code=404, detail="Meetup not found")
    return meetup


def _require_owner(meetup: Meetup, current_user: User) -> None:
    if meetup.user_id != current_user.id:
        raise HTTPException(status_code=401, detail="Unauthorized")


@router.get("", response_model=MeetupPage)
def list_meetups(
    page: int = Query(1),
    db: Session = Depends(get_db),
):
    stmt = select(Meetup).order_by(Meetup.start_date_time.asc(), Meetup.id.asc())
    meetups, total_pages, current_page = paginate(db, stmt, page, settings.MEETUPS_PER_PAGE)

    items = [meetup_crud.meetup_public(db, m) for m in meetups]
    return MeetupPage(
        meetups=_meetup_list.dump_json(items).decode(),
        total_pages=total_pages,
        current_page=current_page,
    )


@router.get("/{meetup_id}", response_model=MeetupExtended)
def get_meetup(meetup_id: int, db: Session = Depends(get_db)):
    meetup = get_meetup_or_404(db, meetup_id)
    return meetup_crud.meetup_extended(db, meetup)


@router.post("", response_model=MeetupPublic, status_code=201)
def create_meetup(
    payload: MeetupCreateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    data = payload.meetup

    meetup = Meetup(user_id=current_user.id)
    meetup_crud.apply_payload(meetup, data)
    db.add(meetup)
    db.flush()

    meetup_crud.save_location(db, LocationableKind.MEETUP, meetup.id, data.location_attributes)
    db.commit()
    db.refresh(meetup)

    logger.info("meetup_created", meetup_id=meetup.id, user_id=current_user.id)
    return meetup_crud.meetup_public(db, meetup)


@router.put("/{meetup_id}", response_model=MeetupPublic)
def update_meetup(
    meetup_id: int,
    payload: MeetupUpdateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    meetup = get_meetup_or_404(db, meetup_id)
    _require_owner(meetup, current_user)

    data = payload.meetup
    meetup_crud.apply_payload(meetup, data)
    meetup_crud.save_location(db, LocationableKind.MEETUP, meetup.id, data.location_attributes)
    db.commit()
    db.refresh(meetup)

    logger.info("meetup_updated", meetup_id=meetup.id, user_id=current_user.id)
    return meetup_crud.meetup_public(db, meetup)


@router.delete("/{meetup_id}", status_code=204)
def delete_meetup(
    meetup_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    meetup = get_meetup_or_404(db, meetup_id)
    _require_owner(meetup, current_user)

    meetup_crud.delete_meetup(db, meetup)
    db.commit()

    logger.info("meetup_deleted", meetup_id=meetup_id, user_id=current_user.id)
