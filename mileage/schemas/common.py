from datetime import datetime, timezone
from typing import Annotated

from pydantic import PlainSerializer

BLANK = "can't be blank"
MAX_TEXT_LENGTH = 2000


def to_utc_naive(dt: datetime) -> datetime:
    """
    DB stores naive DateTime, always in UTC.
    - naive input is assumed to be UTC already
    - aware input is converted to UTC and stripped
    """
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def iso_z(dt: datetime) -> str:
    if dt.tzinfo is not None:
        dt = to_utc_naive(dt)
    return dt.replace(tzinfo=timezone.utc).isoformat().replace("+00:00", "Z")


def require_text(v: str | None) -> str:
    if v is None or not str(v).strip():
        raise ValueError(BLANK)
    return str(v).strip()


def bounded_text(v: str | None) -> str | None:
    if v is not None and len(v) > MAX_TEXT_LENGTH:
        raise ValueError(f"is too long (maximum is {MAX_TEXT_LENGTH} characters)")
    return v


UtcDatetime = Annotated[datetime, PlainSerializer(iso_z, return_type=str)]
