from sqlalchemy import ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column

from mileage.core.database import Base


class Profile(Base):
    __tablename__ = "profiles"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), unique=True, nullable=False, index=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)  # max 2000, checked in schemas
