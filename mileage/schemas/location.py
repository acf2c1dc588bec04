import re

from pydantic import BaseModel, ConfigDict, field_validator

from mileage.schemas.common import require_text

ZIP_CODE_PATTERN = re.compile(r"^\d{5}(-\d{4})?$")


class LocationAttributes(BaseModel):
    """Nested ``location_attributes`` of a meetup payload."""

    model_config = ConfigDict(validate_default=True)

    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    country: str | None = None

    @field_validator("address", "city", "state", "country")
    @classmethod
    def not_blank(cls, v):
        return require_text(v)

    @field_validator("zip_code")
    @classmethod
    def zip_format(cls, v):
        v = require_text(v)
        if not ZIP_CODE_PATTERN.match(v):
            raise ValueError("should be 5 digits or ZIP+4")
        return v


class LocationPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    address: str
    city: str
    state: str
    zip_code: str
    country: str
