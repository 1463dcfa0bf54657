"""SQLAlchemy ORM models for users and itineraries."""

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Index, Text, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.sql import func

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONPayload = JSON().with_variant(JSONB(), "postgresql")


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class UserAccount(Base):
    """User table - login accounts."""

    __tablename__ = "user_account"

    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    # Relationships
    itineraries: Mapped[list["Itinerary"]] = relationship(
        "Itinerary", back_populates="user", cascade="all, delete-orphan"
    )


class Itinerary(Base):
    """Itinerary table - generated trip plans."""

    __tablename__ = "itinerary"
    __table_args__ = (Index("idx_itinerary_user_created", "user_id", "created_at"),)

    itinerary_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("user_account.user_id", ondelete="CASCADE"), nullable=False
    )
    location: Mapped[str] = mapped_column(Text, nullable=False)
    is_favorite: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    data: Mapped[dict[str, Any]] = mapped_column(JSONPayload, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    # Relationships
    user: Mapped["UserAccount"] = relationship("UserAccount", back_populates="itineraries")
