# Meetup reads/writes shared by the meetup, participant and comment routes

from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from mileage.models.comment import Comment, CommentableKind
from mileage.models.location import Location, LocationableKind
from mileage.models.meetup import Meetup
from mileage.models.meetup_participant import MeetupParticipant
from mileage.models.user import User
from mileage.schemas.comment import CommentPublic
from mileage.schemas.location import LocationAttributes, LocationPublic
from mileage.schemas.meetup import MeetupExtended, MeetupPayload, MeetupPublic
from mileage.schemas.participant import ParticipantPublic
from mileage.schemas.user import UserPublic


def _user_public(db: Session, user_id: int) -> Optional[UserPublic]:
    user = db.get(User, user_id)
    return UserPublic.model_validate(user) if user else None


def get_location(db: Session, kind: LocationableKind, owner_id: int) -> Optional[Location]:
    return db.execute(
        select(Location).where(
            Location.locationable_type == kind.value,
            Location.locationable_id == owner_id,
        )
    ).scalar_one_or_none()


def save_location(db: Session, kind: LocationableKind, owner_id: int, attrs: LocationAttributes) -> Location:
    """Create the owner's location or overwrite it in place. Does not commit."""
    location = get_location(db, kind, owner_id)
    if location is None:
        location = Location(locationable_type=kind.value, locationable_id=owner_id)
        db.add(location)
    for field, value in attrs.model_dump().items():
        setattr(location, field, value)
    return location


def apply_payload(meetup: Meetup, payload: MeetupPayload) -> None:
    meetup.title = payload.title
    meetup.activity = payload.activity
    meetup.start_date_time = payload.start_date_time
    meetup.end_date_time = payload.end_date_time
    meetup.guests = payload.guests


def participant_public(db: Session, participant: MeetupParticipant) -> ParticipantPublic:
    return ParticipantPublic(
        id=participant.id,
        user_id=participant.user_id,
        meetup_id=participant.meetup_id,
        user=_user_public(db, participant.user_id),
    )


def list_participants(db: Session, meetup_id: int) -> List[ParticipantPublic]:
    rows = db.execute(
        select(MeetupParticipant, User)
        .join(User, User.id == MeetupParticipant.user_id)
        .where(MeetupParticipant.meetup_id == meetup_id)
        .order_by(MeetupParticipant.id.asc())
    ).all()
    return [
        ParticipantPublic(id=p.id, user_id=p.user_id, meetup_id=p.meetup_id, user=UserPublic.model_validate(u))
        for (p, u) in rows
    ]


def comments_stmt(meetup_id: int):
    return (
        select(Comment)
        .where(
            Comment.commentable_type == CommentableKind.MEETUP.value,
            Comment.commentable_id == meetup_id,
        )
        .order_by(Comment.created_at.asc(), Comment.id.asc())
    )


def comment_public(db: Session, comment: Comment) -> CommentPublic:
    return CommentPublic(
        id=comment.id,
        content=comment.content,
        created_at=comment.created_at,
        updated_at=comment.updated_at,
        user=_user_public(db, comment.user_id),
    )


def meetup_public(db: Session, meetup: Meetup) -> MeetupPublic:
    location = get_location(db, LocationableKind.MEETUP, meetup.id)
    return MeetupPublic(
        id=meetup.id,
        title=meetup.title,
        activity=meetup.activity,
        start_date_time=meetup.start_date_time,
        end_date_time=meetup.end_date_time,
        guests=meetup.guests,
        created_at=meetup.created_at,
        updated_at=meetup.updated_at,
        user=_user_public(db, meetup.user_id),
        location=LocationPublic.model_validate(location) if location else None,
        meetup_participants=list_participants(db, meetup.id),
    )


def meetup_extended(db: Session, meetup: Meetup) -> MeetupExtended:
    comments = db.execute(comments_stmt(meetup.id)).scalars().all()
    return MeetupExtended(
        **dict(meetup_public(db, meetup)),
        comments=[comment_public(db, c) for c in comments],
    )


def delete_meetup(db: Session, meetup: Meetup) -> None:
    """Remove a meetup with its participants, comments and location. Does not commit."""
    db.execute(delete(MeetupParticipant).where(MeetupParticipant.meetup_id == meetup.id))
    db.execute(
        delete(Comment).where(
            Comment.commentable_type == CommentableKind.MEETUP.value,
            Comment.commentable_id == meetup.id,
        )
    )
    db.execute(
        delete(Location).where(
            Location.locationable_type == LocationableKind.MEETUP.value,
            Location.locationable_id == meetup.id,
        )
    )
    db.delete(meetup)
