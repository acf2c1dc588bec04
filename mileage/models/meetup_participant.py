from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from mileage.core.database import Base


class MeetupParticipant(Base):
    __tablename__ = "meetup_participants"
    __table_args__ = (UniqueConstraint("user_id", "meetup_id", name="uq_participant_user_meetup"),)

    id: Mapped[int] = mapped_column(primary_key=True)

    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    meetup_id: Mapped[int] = mapped_column(ForeignKey("meetups.id"), nullable=False, index=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
