"""Value objects exchanged between the collaborators and the client."""
from dataclasses import asdict, dataclass
from typing import Any, Dict, Mapping, Optional

from hanzitype.errors import ValidationError

ENTRY_FIELDS = ("character", "pinyin", "definition")


@dataclass(frozen=True)
class DictionaryEntry:
    """A character with its toned pinyin and definition."""
    character: str
    pinyin: str
    definition: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DictionaryEntry":
        """Build an entry from a JSON-like mapping, rejecting missing or empty fields."""
        missing = [name for name in ENTRY_FIELDS if not isinstance(data.get(name), str) or not data.get(name)]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")
        return cls(
            character=data["character"],
            pinyin=data["pinyin"],
            definition=data["definition"],
        )

    @classmethod
    def from_row(cls, row: Any) -> "DictionaryEntry":
        """Build an entry from any object exposing the three entry attributes."""
        return cls(character=row.character, pinyin=row.pinyin, definition=row.definition)

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


# Saved words have the same shape; the uniqueness key is ``character``.
SavedWord = DictionaryEntry


@dataclass(frozen=True)
class CurrentUser:
    """Authenticated user as seen by the client."""
    id: int
    email: str
    token: Optional[str] = None
