"""Account registration and session management."""
import logging
import secrets
from datetime import UTC, datetime, timedelta
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from werkzeug.security import check_password_hash, generate_password_hash

from hanzitype.config import settings
from hanzitype.errors import AuthError, CollaboratorError, ConflictError, ValidationError
from hanzitype.models.models import AuthSession, User

logger = logging.getLogger(__name__)


class AuthService:
    """Account registration and session management."""

    def __init__(self, db: Session):
        """Initialize the service with a database session."""
        self.db = db

    def _validate_credentials(self, email: str, password: str) -> str:
        email = (email or "").strip().lower()
        if not email or "@" not in email:
            raise ValidationError("A valid email address is required")
        if not password or len(password) < settings.auth.min_password_length:
            raise ValidationError(
                f"Password should be at least {settings.auth.min_password_length} characters"
            )
        return email

    def get_user_by_email(self, email: str) -> Optional[User]:
        """Get a user by e-mail address."""
        try:
            return self.db.query(User).filter(User.email == email.strip().lower()).first()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error looking up user: {e}")
            raise CollaboratorError(str(e)) from e

    def sign_up(self, email: str, password: str) -> str:
        """Register a new account and sign it in. Returns the session token."""
        email = self._validate_credentials(email, password)
        if self.get_user_by_email(email):
            raise ConflictError("User already registered")

        user = User(email=email, password_hash=generate_password_hash(password))
        self.db.add(user)
        try:
            self.db.commit()
            self.db.refresh(user)
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError("User already registered") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error registering user: {e}")
            raise CollaboratorError(str(e)) from e
        logger.info(f"Registered user {user.id}")

        return self.sign_in(email, password)

    def sign_in(self, email: str, password: str) -> str:
        """Check the credentials and open a session. Returns the session token."""
        user = self.get_user_by_email(email or "")
        if not user or not check_password_hash(user.password_hash, password or ""):
            logger.info("Rejected sign-in attempt")
            raise AuthError("Invalid login credentials")

        session = AuthSession(
            token=secrets.token_urlsafe(32),
            user_id=user.id,
            expires_at=datetime.now(UTC) + timedelta(hours=settings.auth.session_ttl_hours),
        )
        self.db.add(session)
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error opening session for user {user.id}: {e}")
            raise CollaboratorError(str(e)) from e
        logger.info(f"User {user.id} signed in")
        return session.token

    def sign_out(self, token: Optional[str]) -> None:
        """Close the session addressed by the token; unknown tokens are ignored."""
        if not token:
            return
        try:
            deleted = self.db.query(AuthSession).filter(AuthSession.token == token).delete()
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error closing session: {e}")
            raise CollaboratorError(str(e)) from e
        if deleted:
            logger.info("Session closed")

    def get_current_user(self, token: Optional[str]) -> Optional[User]:
        """Get the user owning a live session, or None."""
        if not token:
            return None
        try:
            session = (
                self.db.query(AuthSession)
                .filter(
                    AuthSession.token == token,
                    AuthSession.expires_at > datetime.now(UTC),
                )
                .first()
            )
            return session.user if session else None
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error resolving session: {e}")
            raise CollaboratorError(str(e)) from e
