from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from mileage.models.meetup import Activity
from mileage.schemas.comment import CommentPublic
from mileage.schemas.common import UtcDatetime, require_text, to_utc_naive
from mileage.schemas.location import LocationAttributes, LocationPublic
from mileage.schemas.participant import ParticipantPublic
from mileage.schemas.user import UserPublic


class MeetupPayload(BaseModel):
    model_config = ConfigDict(validate_default=True)

    title: str | None = None
    activity: str
    start_date_time: datetime
    end_date_time: datetime
    guests: int = 1
    location_attributes: LocationAttributes

    @field_validator("title", mode="before")
    @classmethod
    def title_present(cls, v):
        return require_text(v)

    @field_validator("activity")
    @classmethod
    def known_activity(cls, v):
        if v not in {a.value for a in Activity}:
            raise ValueError("is not included in the list")
        return v

    @field_validator("start_date_time", "end_date_time")
    @classmethod
    def store_as_utc(cls, v):
        return to_utc_naive(v)

    @field_validator("end_date_time")
    @classmethod
    def ends_after_start(cls, v, info):
        start = info.data.get("start_date_time")
        if start is not None and v <= start:
            raise ValueError("must be after the start date and time")
        return v

    @field_validator("guests")
    @classmethod
    def at_least_one_guest(cls, v):
        if v < 1:
            raise ValueError("must be greater than or equal to 1")
        return v


class MeetupCreate(MeetupPayload):
    @field_validator("start_date_time")
    @classmethod
    def starts_in_future(cls, v):
        if to_utc_naive(v) <= datetime.now(timezone.utc).replace(tzinfo=None):
            raise ValueError("must be in the future")
        return v


class MeetupCreateRequest(BaseModel):
    meetup: MeetupCreate


class MeetupUpdateRequest(BaseModel):
    meetup: MeetupPayload


class MeetupPublic(BaseModel):
    id: int
    title: str
    activity: str
    start_date_time: UtcDatetime
    end_date_time: UtcDatetime
    guests: int
    created_at: UtcDatetime
    updated_at: UtcDatetime

    user: Optional[UserPublic] = None
    location: Optional[LocationPublic] = None
    meetup_participants: List[ParticipantPublic] = []


class MeetupExtended(MeetupPublic):
    comments: List[CommentPublic] = []


class MeetupPage(BaseModel):
    meetups: str  # JSON-encoded list of MeetupPublic
    total_pages: int
    current_page: int
