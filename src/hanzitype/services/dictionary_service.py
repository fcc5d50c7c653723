"""Service for looking up and importing dictionary entries."""
import csv
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hanzitype.config import settings
from hanzitype.errors import CollaboratorError, ValidationError
from hanzitype.models.entries import DictionaryEntry
from hanzitype.models.models import Character
from hanzitype.services.tones import strip_tones

logger = logging.getLogger(__name__)


def search_key(text: str) -> str:
    """Phonetic key used for prefix lookups: trimmed, lower-cased, tone-free."""
    return strip_tones(text.strip().lower())


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class DictionaryService:
    """Service for looking up and importing dictionary entries."""

    def __init__(self, db: Session):
        """Initialize the service with a database session."""
        self.db = db

    def clamp_limit(self, limit: Optional[int]) -> int:
        """Apply the default result count and the upper bound."""
        if limit is None:
            return settings.search.default_limit
        if limit < 1:
            raise ValidationError("limit must be positive")
        return min(limit, settings.search.max_limit)

    def search(self, query: str, limit: Optional[int] = None) -> List[DictionaryEntry]:
        """Find entries whose tone-free pinyin starts with the query.

        An empty query matches every entry, bounded by the limit.
        """
        key = search_key(query or "")
        limit = self.clamp_limit(limit)
        try:
            rows = (
                self.db.query(Character)
                .filter(Character.pinyin_no_tones.like(f"{_escape_like(key)}%", escape="\\"))
                .order_by(Character.id)
                .limit(limit)
                .all()
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Dictionary search for {key!r} failed: {e}")
            raise CollaboratorError(str(e)) from e
        logger.debug(f"Dictionary search {key!r} returned {len(rows)} entries")
        return [DictionaryEntry.from_row(row) for row in rows]

    def add_entry(self, character: str, pinyin: str, definition: str) -> Character:
        """Add a single entry to the dictionary."""
        entry = DictionaryEntry.from_dict(
            {"character": character, "pinyin": pinyin, "definition": definition}
        )
        row = Character(
            character=entry.character,
            pinyin=entry.pinyin,
            pinyin_no_tones=search_key(entry.pinyin),
            definition=entry.definition,
        )
        self.db.add(row)
        try:
            self.db.commit()
            self.db.refresh(row)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error adding dictionary entry {entry.character}: {e}")
            raise CollaboratorError(str(e)) from e
        return row

    def add_entries(self, entries: Iterable[DictionaryEntry]) -> int:
        """Add entries, skipping (character, pinyin) pairs already present."""
        added = 0
        try:
            existing = {
                (character, pinyin)
                for character, pinyin in self.db.query(Character.character, Character.pinyin).all()
            }
            for entry in entries:
                if (entry.character, entry.pinyin) in existing:
                    continue
                self.db.add(
                    Character(
                        character=entry.character,
                        pinyin=entry.pinyin,
                        pinyin_no_tones=search_key(entry.pinyin),
                        definition=entry.definition,
                    )
                )
                existing.add((entry.character, entry.pinyin))
                added += 1
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error adding dictionary entries: {e}")
            raise CollaboratorError(str(e)) from e
        return added

    def import_tsv(self, path: Union[str, Path]) -> int:
        """Import a tab-separated file of character, pinyin and definition columns.

        Blank lines and lines starting with ``#`` are ignored; malformed
        lines are logged and skipped.
        """
        path = Path(path)
        entries = []
        with path.open(encoding="utf-8", newline="") as handle:
            for line_no, row in enumerate(csv.reader(handle, delimiter="\t", quoting=csv.QUOTE_NONE), start=1):
                if not row or not "".join(row).strip() or row[0].startswith("#"):
                    continue
                if len(row) < 3:
                    logger.warning(f"{path}:{line_no}: expected 3 columns, got {len(row)}")
                    continue
                try:
                    entries.append(
                        DictionaryEntry.from_dict(
                            {
                                "character": row[0].strip(),
                                "pinyin": row[1].strip(),
                                "definition": row[2].strip(),
                            }
                        )
                    )
                except ValidationError as e:
                    logger.warning(f"{path}:{line_no}: {e}")
        added = self.add_entries(entries)
        logger.info(f"Imported {added} dictionary entries from {path}")
        return added

    def count(self) -> int:
        """Get the number of dictionary entries."""
        try:
            return self.db.query(Character).count()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error counting dictionary entries: {e}")
            raise CollaboratorError(str(e)) from e

    def seed_if_empty(self, path: Union[str, Path, None] = None) -> int:
        """Import the seed file when the dictionary has no entries yet."""
        if self.count():
            return 0
        path = Path(path) if path is not None else settings.dictionary.seed_file
        if not path.exists():
            logger.warning(f"Dictionary is empty and seed file {path} does not exist")
            return 0
        return self.import_tsv(path)
