"""
Database models and session management for the News Verification API.

Uses SQLAlchemy with SQLite for the standalone service.
Can be configured for PostgreSQL in production.

Vote tallies and comment counts are never stored here; they are
computed from the ``votes`` and ``comments`` tables on every read.
"""

import uuid
from datetime import datetime, UTC
from typing import Optional, List

from sqlalchemy import (
    String, Text, DateTime, ForeignKey, Index, UniqueConstraint, create_engine
)
from sqlalchemy.orm import (
    DeclarativeBase, relationship, sessionmaker, Mapped, mapped_column
)

from newsverify.config import get_settings
from newsverify.models import NewsStatus, UserRole, Visibility


# =============================================================================
# Database Setup
# =============================================================================


class Base(DeclarativeBase):
    """Base class for all database models."""
    pass


def get_engine():
    """Create database engine."""
    settings = get_settings()
    options = {}
    if settings.database_isolation_level:
        options["isolation_level"] = settings.database_isolation_level
    return create_engine(
        settings.database_url,
        connect_args={"check_same_thread": False} if "sqlite" in settings.database_url else {},
        echo=settings.debug,
        **options,
    )


engine = get_engine()
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """Dependency to get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """Initialize database tables."""
    Base.metadata.create_all(bind=engine)


def _new_id() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(UTC)


# =============================================================================
# Database Models
# =============================================================================


class User(Base):
    """A registered account."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    avatar_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    role: Mapped[str] = mapped_column(
        String(20), default=UserRole.READER.value, nullable=False
    )

    created_at: Mapped[datetime] = mapped_column(DateTime, default=_now, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=_now, onupdate=_now)

    news: Mapped[List["News"]] = relationship("News", back_populates="reporter")


class News(Base):
    """
    A news item submitted for community verification.

    ``status`` is set by moderators and is independent of the vote tally.
    """

    __tablename__ = "news"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)

    topic: Mapped[str] = mapped_column(String(255), nullable=False)
    short_detail: Mapped[str] = mapped_column(Text, nullable=False)
    full_detail: Mapped[str] = mapped_column(Text, nullable=False)
    image_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    status: Mapped[str] = mapped_column(
        String(20), default=NewsStatus.UNKNOWN.value, index=True, nullable=False
    )
    visibility: Mapped[str] = mapped_column(
        String(20), default=Visibility.ACTIVE.value, nullable=False
    )

    reporter_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id"), index=True, nullable=False
    )

    created_at: Mapped[datetime] = mapped_column(DateTime, default=_now, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=_now, onupdate=_now)

    # Relationships
    reporter: Mapped["User"] = relationship("User", back_populates="news")
    votes: Mapped[List["Vote"]] = relationship("Vote", back_populates="news")
    comments: Mapped[List["Comment"]] = relationship("Comment", back_populates="news")

    __table_args__ = (
        Index("ix_news_visibility_created", "visibility", "created_at"),
    )

    @property
    def is_deleted(self) -> bool:
        return self.visibility == Visibility.HIDDEN.value


class Vote(Base):
    """A user's fake / not-fake verdict on a news item."""

    __tablename__ = "votes"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)

    news_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("news.id"), index=True, nullable=False
    )
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id"), index=True, nullable=False
    )
    vote: Mapped[str] = mapped_column(String(20), nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=_now, nullable=False)

    news: Mapped["News"] = relationship("News", back_populates="votes")

    __table_args__ = (
        # One vote per user per news item; the final arbiter under races
        UniqueConstraint("news_id", "user_id", name="uq_vote_news_user"),
    )


class Comment(Base):
    """Discussion or evidence attached to a news item."""

    __tablename__ = "comments"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)

    news_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("news.id"), index=True, nullable=False
    )
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id"), index=True, nullable=False
    )

    content: Mapped[str] = mapped_column(Text, nullable=False)
    image_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    visibility: Mapped[str] = mapped_column(
        String(20), default=Visibility.ACTIVE.value, nullable=False
    )

    created_at: Mapped[datetime] = mapped_column(DateTime, default=_now, nullable=False)

    news: Mapped["News"] = relationship("News", back_populates="comments")
    user: Mapped["User"] = relationship("User")

    __table_args__ = (
        Index("ix_comments_news_visibility", "news_id", "visibility"),
    )

    @property
    def is_deleted(self) -> bool:
        return self.visibility == Visibility.HIDDEN.value
