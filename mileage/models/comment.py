from datetime import datetime
from enum import Enum as PyEnum

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from mileage.core.database import Base


class CommentableKind(str, PyEnum):
    """Entities that accept comments. Only meetups today."""

    MEETUP = "Meetup"


class Comment(Base):
    __tablename__ = "comments"
    __table_args__ = (Index("ix_comments_commentable", "commentable_type", "commentable_id"),)

    id: Mapped[int] = mapped_column(primary_key=True)

    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    commentable_type: Mapped[str] = mapped_column(String(20), nullable=False)
    commentable_id: Mapped[int] = mapped_column(Integer, nullable=False)

    content: Mapped[str] = mapped_column(Text, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )
