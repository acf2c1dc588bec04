from enum import Enum as PyEnum

from sqlalchemy import Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from mileage.core.database import Base


class LocationableKind(str, PyEnum):
    """Owner kinds a Location can be attached to."""

    MEETUP = "Meetup"
    USER = "User"


class Location(Base):
    """Postal address attached to either a Meetup or a User (kind + id)."""

    __tablename__ = "locations"
    __table_args__ = (Index("ix_locations_owner", "locationable_type", "locationable_id"),)

    id: Mapped[int] = mapped_column(primary_key=True)

    locationable_type: Mapped[str] = mapped_column(String(20), nullable=False)
    locationable_id: Mapped[int] = mapped_column(Integer, nullable=False)

    address: Mapped[str] = mapped_column(String(255), nullable=False)
    city: Mapped[str] = mapped_column(String(120), nullable=False)
    state: Mapped[str] = mapped_column(String(80), nullable=False)
    zip_code: Mapped[str] = mapped_column(String(10), nullable=False)  # 12345 or 12345-6789
    country: Mapped[str] = mapped_column(String(80), nullable=False)
