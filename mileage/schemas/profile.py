from pydantic import BaseModel, ConfigDict, field_validator

from mileage.schemas.common import bounded_text


class ProfileAttributes(BaseModel):
    bio: str | None = None

    @field_validator("bio")
    @classmethod
    def bio_length(cls, v):
        return bounded_text(v)


class ProfileUpdateRequest(BaseModel):
    profile: ProfileAttributes


class ProfilePublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    bio: str | None = None
