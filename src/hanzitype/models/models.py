"""Database models for the dictionary, accounts and personal lists."""
from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from hanzitype.models.base import Base, TimestampMixin


class Character(Base):
    """Dictionary entry."""

    __tablename__ = "characters"

    id = Column(Integer, primary_key=True)
    character = Column(String, nullable=False, index=True)
    pinyin = Column(String, nullable=False)
    pinyin_no_tones = Column(String, nullable=False, index=True)  # lower-case, tone marks stripped
    definition = Column(String, nullable=False)


class User(Base, TimestampMixin):
    """Registered account."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, nullable=False)
    password_hash = Column(String, nullable=False)

    # Relationships
    sessions = relationship("AuthSession", back_populates="user", cascade="all, delete-orphan")
    cards = relationship("UserCard", back_populates="user", cascade="all, delete-orphan")


class AuthSession(Base, TimestampMixin):
    """Signed-in session, addressed by the token kept in the auth cookie."""

    __tablename__ = "auth_sessions"

    id = Column(Integer, primary_key=True)
    token = Column(String, unique=True, nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)

    # Relationships
    user = relationship("User", back_populates="sessions")


class UserCard(Base, TimestampMixin):
    """Word saved to a user's personal list."""

    __tablename__ = "user_cards"
    __table_args__ = (UniqueConstraint("user_id", "character", name="uq_user_cards_user_character"),)

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    character = Column(String, nullable=False)
    pinyin = Column(String, nullable=False)
    definition = Column(String, nullable=False)

    # Relationships
    user = relationship("User", back_populates="cards")
