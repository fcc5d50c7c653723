"""The user's saved word list, backed by a cookie or by the remote list."""
import json
import logging
from enum import Enum
from typing import List, Optional, Tuple

from hanzitype import monitoring
from hanzitype.client.collaborators import AuthClient, CardsClient
from hanzitype.client.cookies import CookieJar
from hanzitype.config import settings
from hanzitype.errors import HanziTypeError, ValidationError
from hanzitype.models.entries import CurrentUser, SavedWord

logger = logging.getLogger(__name__)


class StoreMode(Enum):
    """Where the list is persisted."""
    ANONYMOUS = "anonymous"  # browser cookie
    AUTHENTICATED = "authenticated"  # remote per-user table


class ListStore:
    """Ordered list of saved words, unique by character.

    Anonymous visitors keep the list in a cookie; signed-in users keep it
    in the remote list and the store holds a cached copy. Remote writes
    happen before the local copy changes, so a rejected write leaves the
    list untouched.
    """

    def __init__(
        self,
        auth: AuthClient,
        cards: CardsClient,
        cookies: CookieJar,
        cookie_name: Optional[str] = None,
        max_age_days: Optional[int] = None,
    ):
        self.auth = auth
        self.cards = cards
        self.cookies = cookies
        self.cookie_name = cookie_name or settings.cookies.words_cookie_name
        self.max_age_days = max_age_days if max_age_days is not None else settings.cookies.max_age_days
        self.mode = StoreMode.ANONYMOUS
        self.user: Optional[CurrentUser] = None
        self.is_loaded = False
        self._words: List[SavedWord] = []
        self._load_generation = 0

    @property
    def words(self) -> Tuple[SavedWord, ...]:
        """Snapshot of the current list."""
        return tuple(self._words)

    def __len__(self) -> int:
        return len(self._words)

    def contains(self, character: str) -> bool:
        return any(word.character == character for word in self._words)

    async def load(self) -> None:
        """Pick the mode from the auth state and read the list from its source."""
        self._load_generation += 1
        generation = self._load_generation
        self.is_loaded = False

        try:
            user = await self.auth.get_current_user()
        except HanziTypeError as e:
            logger.error(f"Could not determine auth state, treating visitor as anonymous: {e}")
            monitoring.collaborator_errors.labels(operation="get_current_user").inc()
            user = None

        if user is not None:
            try:
                words = await self.cards.list()
            except HanziTypeError as e:
                logger.error(f"Error fetching saved words for user {user.id}: {e}")
                monitoring.collaborator_errors.labels(operation="list_cards").inc()
                words = []
            words = self._unique(words)
        else:
            words = self._read_cookie()

        if generation != self._load_generation:
            logger.debug("Discarding superseded list load")
            return

        self.user = user
        self.mode = StoreMode.AUTHENTICATED if user is not None else StoreMode.ANONYMOUS
        self._words = words
        self.is_loaded = True
        logger.info(f"Loaded {len(words)} saved words ({self.mode.value})")
        self._persist()

    async def add(self, entry: SavedWord) -> bool:
        """Append a word unless its character is already saved. Returns whether it was added."""
        if self.contains(entry.character):
            logger.debug(f"{entry.character} is already saved")
            return False

        if self.mode is StoreMode.AUTHENTICATED:
            generation = self._load_generation
            try:
                entry = await self.cards.create(entry)
            except HanziTypeError as e:
                logger.warning(f"Could not save {entry.character}: {e}")
                monitoring.collaborator_errors.labels(operation="create_card").inc()
                return False
            if generation != self._load_generation:
                logger.debug(f"Discarding save of {entry.character} after auth change")
                return False
            # Another add may have completed while the request was in flight
            if self.contains(entry.character):
                return False

        self._words.append(entry)
        monitoring.cards_added.labels(mode=self.mode.value).inc()
        self._persist()
        return True

    async def remove(self, character: str) -> bool:
        """Remove a saved word. Returns whether it was removed."""
        if not self.contains(character):
            return False

        if self.mode is StoreMode.AUTHENTICATED:
            generation = self._load_generation
            try:
                await self.cards.delete(character)
            except HanziTypeError as e:
                logger.warning(f"Could not remove {character}: {e}")
                monitoring.collaborator_errors.labels(operation="delete_card").inc()
                return False
            if generation != self._load_generation:
                return False

        self._words = [word for word in self._words if word.character != character]
        monitoring.cards_removed.labels(mode=self.mode.value).inc()
        self._persist()
        return True

    async def toggle(self, entry: SavedWord) -> bool:
        """Remove the word if saved, add it otherwise. Returns whether it is saved afterwards."""
        if self.contains(entry.character):
            await self.remove(entry.character)
        else:
            await self.add(entry)
        return self.contains(entry.character)

    async def handle_auth_change(self) -> None:
        """Drop the current list and reload it from the source matching the new auth state."""
        previous = self.mode
        self._words = []
        self.user = None
        self.is_loaded = False
        await self.load()
        logger.info(f"List store switched from {previous.value} to {self.mode.value}")

    async def login(self, email: str, password: str) -> CurrentUser:
        user = await self.auth.sign_in(email, password)
        await self.handle_auth_change()
        return user

    async def register(self, email: str, password: str) -> CurrentUser:
        user = await self.auth.sign_up(email, password)
        await self.handle_auth_change()
        return user

    async def logout(self) -> None:
        """Sign out; the list switches back to the cookie even when the backend call fails."""
        try:
            await self.auth.sign_out()
        finally:
            await self.handle_auth_change()

    def _persist(self) -> None:
        # Never write before the first load, or an unread cookie would be clobbered
        if not self.is_loaded or self.mode is not StoreMode.ANONYMOUS:
            return
        if self._words:
            payload = json.dumps(
                [word.to_dict() for word in self._words],
                ensure_ascii=False,
                separators=(",", ":"),
            )
            self.cookies.set(self.cookie_name, payload, max_age_days=self.max_age_days)
        elif self.cookie_name in self.cookies:
            self.cookies.delete(self.cookie_name)

    def _read_cookie(self) -> List[SavedWord]:
        raw = self.cookies.get(self.cookie_name)
        if not raw:
            return []
        try:
            payload = json.loads(raw)
        except ValueError as e:
            logger.warning(f"Error parsing saved words from cookie: {e}")
            return []

        if isinstance(payload, dict):
            payload = [payload]
        if not isinstance(payload, list):
            logger.warning(f"Ignoring saved words cookie holding {type(payload).__name__}")
            return []

        words = []
        for item in payload:
            if not isinstance(item, dict):
                logger.warning(f"Skipping malformed saved word {item!r}")
                continue
            try:
                words.append(SavedWord.from_dict(item))
            except ValidationError as e:
                logger.warning(f"Skipping saved word {item!r}: {e}")
        return self._unique(words)

    @staticmethod
    def _unique(words: List[SavedWord]) -> List[SavedWord]:
        seen = set()
        unique = []
        for word in words:
            if word.character in seen:
                continue
            seen.add(word.character)
            unique.append(word)
        return unique
