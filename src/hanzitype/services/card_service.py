"""Service for managing a user's saved words."""
import logging
from typing import List

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from hanzitype.errors import CollaboratorError, ConflictError, ValidationError
from hanzitype.models.entries import SavedWord
from hanzitype.models.models import UserCard

logger = logging.getLogger(__name__)


class CardService:
    """Service for managing a user's saved words."""

    def __init__(self, db: Session):
        """Initialize the service with a database session."""
        self.db = db

    def list_cards(self, user_id: int) -> List[SavedWord]:
        """Get all saved words for a user, newest first."""
        try:
            rows = (
                self.db.query(UserCard)
                .filter(UserCard.user_id == user_id)
                .order_by(UserCard.created_at.desc(), UserCard.id.desc())
                .all()
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error fetching cards for user {user_id}: {e}")
            raise CollaboratorError(str(e)) from e
        return [SavedWord.from_row(row) for row in rows]

    def add_card(self, user_id: int, character: str, pinyin: str, definition: str) -> SavedWord:
        """Save a word for a user.

        Raises:
            ValidationError: a field is missing or empty.
            ConflictError: the user already saved this character.
        """
        entry = SavedWord.from_dict(
            {"character": character, "pinyin": pinyin, "definition": definition}
        )

        try:
            existing = (
                self.db.query(UserCard.id)
                .filter(UserCard.user_id == user_id, UserCard.character == entry.character)
                .first()
            )
            if existing:
                raise ConflictError("Card already exists")

            card = UserCard(
                user_id=user_id,
                character=entry.character,
                pinyin=entry.pinyin,
                definition=entry.definition,
            )
            self.db.add(card)
            self.db.commit()
            self.db.refresh(card)
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError("Card already exists") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error inserting card for user {user_id}: {e}")
            raise CollaboratorError(str(e)) from e
        return SavedWord.from_row(card)

    def remove_card(self, user_id: int, character: str) -> bool:
        """Delete a saved word. Returns whether a row was removed."""
        if not character:
            raise ValidationError("Missing character parameter")
        try:
            deleted = (
                self.db.query(UserCard)
                .filter(UserCard.user_id == user_id, UserCard.character == character)
                .delete()
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error deleting card for user {user_id}: {e}")
            raise CollaboratorError(str(e)) from e
        return bool(deleted)
