from datetime import datetime
from enum import Enum as PyEnum

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from mileage.core.database import Base


class Activity(str, PyEnum):
    RUN = "run"
    BICYCLE = "bicycle"


class Meetup(Base):
    __tablename__ = "meetups"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)

    title: Mapped[str] = mapped_column(String(120), nullable=False)
    activity: Mapped[str] = mapped_column(String(20), nullable=False)  # run/bicycle

    start_date_time: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    end_date_time: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    guests: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )
