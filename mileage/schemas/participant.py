from pydantic import BaseModel

from mileage.schemas.user import UserPublic


class ParticipantPublic(BaseModel):
    id: int
    user_id: int
    meetup_id: int
    user: UserPublic | None = None
