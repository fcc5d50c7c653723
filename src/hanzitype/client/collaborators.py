"""Asynchronous client-side access to the authentication, dictionary and list backends."""
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from hanzitype.client.cookies import CookieJar
from hanzitype.config import settings
from hanzitype.errors import CollaboratorError, UnauthorizedError
from hanzitype.models.entries import CurrentUser, DictionaryEntry, SavedWord
from hanzitype.services.auth_service import AuthService
from hanzitype.services.card_service import CardService
from hanzitype.services.dictionary_service import DictionaryService

logger = logging.getLogger(__name__)


class AuthClient:
    """Authentication collaborator; the session token lives in the auth cookie."""

    def __init__(self, db: Session, cookies: CookieJar):
        self.auth_service = AuthService(db)
        self.cookies = cookies
        self.cookie_name = settings.cookies.auth_cookie_name

    async def get_current_user(self) -> Optional[CurrentUser]:
        """Get the signed-in user, or None for an anonymous visitor."""
        token = self.cookies.get(self.cookie_name)
        if not token:
            return None
        user = self.auth_service.get_current_user(token)
        if user is None:
            return None
        return CurrentUser(id=user.id, email=user.email, token=token)

    async def sign_in(self, email: str, password: str) -> CurrentUser:
        """Sign in and store the session token."""
        token = self.auth_service.sign_in(email, password)
        self.cookies.set(self.cookie_name, token)
        user = await self.get_current_user()
        if user is None:
            raise CollaboratorError("Session was not established")
        return user

    async def sign_up(self, email: str, password: str) -> CurrentUser:
        """Register; the new account is signed in straight away."""
        token = self.auth_service.sign_up(email, password)
        self.cookies.set(self.cookie_name, token)
        user = await self.get_current_user()
        if user is None:
            raise CollaboratorError("Session was not established")
        return user

    async def sign_out(self) -> None:
        """Close the session and drop the auth cookie."""
        token = self.cookies.get(self.cookie_name)
        try:
            self.auth_service.sign_out(token)
        finally:
            self.cookies.delete(self.cookie_name)


class DictionaryClient:
    """Dictionary lookup collaborator."""

    def __init__(self, db: Session):
        self.dictionary_service = DictionaryService(db)

    async def search(self, query: str, limit: Optional[int] = None) -> List[DictionaryEntry]:
        return self.dictionary_service.search(query, limit)


class CardsClient:
    """Personal list collaborator, scoped to the signed-in user."""

    def __init__(self, db: Session, auth: AuthClient):
        self.card_service = CardService(db)
        self.auth = auth

    async def _require_user(self) -> CurrentUser:
        user = await self.auth.get_current_user()
        if user is None:
            raise UnauthorizedError("Unauthorized")
        return user

    async def list(self) -> List[SavedWord]:
        """Get the user's saved words, newest first; anonymous callers get an empty list."""
        user = await self.auth.get_current_user()
        if user is None:
            return []
        return self.card_service.list_cards(user.id)

    async def create(self, entry: SavedWord) -> SavedWord:
        user = await self._require_user()
        return self.card_service.add_card(user.id, entry.character, entry.pinyin, entry.definition)

    async def delete(self, character: str) -> bool:
        user = await self._require_user()
        return self.card_service.remove_card(user.id, character)
