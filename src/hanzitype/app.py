"""Main application object."""
import logging
from pathlib import Path
from typing import Optional, Union

from sqlalchemy.orm import Session

from hanzitype.client.collaborators import AuthClient, CardsClient, DictionaryClient
from hanzitype.client.cookies import CookieJar
from hanzitype.client.game import GameSession
from hanzitype.client.list_store import ListStore
from hanzitype.client.search import SearchInterface
from hanzitype.config import settings
from hanzitype.models.base import SessionLocal, init_db
from hanzitype.monitoring import start_monitoring
from hanzitype.services.dictionary_service import DictionaryService


class HanziTypeApp:
    """Wires the database, collaborators, word list, search and game together."""

    def __init__(self, cookies: Optional[CookieJar] = None):
        """Initialize the application."""
        self.cookies = cookies or CookieJar()
        self.db: Optional[Session] = None
        self.store: Optional[ListStore] = None
        self.search: Optional[SearchInterface] = None
        self.game: Optional[GameSession] = None
        self.running = False
        self.logger = logging.getLogger(__name__)

    async def start(self) -> None:
        """Start the application."""
        if self.running:
            return

        init_db()
        self.db = SessionLocal()
        self.logger.info("Database initialized")

        seeded = DictionaryService(self.db).seed_if_empty()
        if seeded:
            self.logger.info(f"Seeded dictionary with {seeded} entries")

        auth = AuthClient(self.db, self.cookies)
        cards = CardsClient(self.db, auth)
        self.store = ListStore(auth, cards, self.cookies)
        await self.store.load()
        self.search = SearchInterface(DictionaryClient(self.db))

        if settings.monitoring.enabled:
            start_monitoring(settings.monitoring.port)
            self.logger.info(f"Metrics exporter listening on port {settings.monitoring.port}")

        self.running = True
        self.logger.info("Application started")

    def new_game(self) -> GameSession:
        """Create a game bound to the saved word list, discarding any previous one."""
        if self.store is None:
            raise RuntimeError("Application is not started")
        if self.game is not None:
            self.game.reset()
        self.game = GameSession(self.store)
        return self.game

    def import_dictionary(self, path: Union[str, Path]) -> int:
        """Import a TSV dictionary file."""
        if self.db is None:
            raise RuntimeError("Application is not started")
        return DictionaryService(self.db).import_tsv(path)

    async def stop(self) -> None:
        """Stop the application."""
        if not self.running:
            return

        self.running = False
        if self.search is not None:
            self.search.close()
        if self.game is not None:
            self.game.reset()
        if self.db is not None:
            self.db.close()
            self.db = None
        self.logger.info("Application stopped")
