"""Test configuration."""
import os
import tempfile
from pathlib import Path
from typing import Generator

import pytest
from faker import Faker

# Set test environment before any imports
os.environ["ENV"] = "test"
os.environ.setdefault(
    "DATABASE_URL", f"sqlite:///{Path(tempfile.gettempdir()) / 'hanzitype_test.db'}"
)

# Import after environment setup
from sqlalchemy.orm import Session

from hanzitype.client.collaborators import AuthClient, CardsClient, DictionaryClient
from hanzitype.client.cookies import CookieJar
from hanzitype.client.list_store import ListStore
from hanzitype.models import models  # noqa: F401
from hanzitype.models.base import Base, SessionLocal, engine, init_db
from hanzitype.models.entries import SavedWord
from hanzitype.services.dictionary_service import DictionaryService

fake = Faker()

NIHAO = SavedWord(character="你好", pinyin="nǐ hǎo", definition="hello")
XIEXIE = SavedWord(character="谢谢", pinyin="xiè xie", definition="thank you")
MAO = SavedWord(character="猫", pinyin="māo", definition="cat")


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Recreate the schema and open a session for each test."""
    engine.dispose()
    Base.metadata.drop_all(bind=engine)
    init_db()

    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def seeded_dictionary(db: Session) -> DictionaryService:
    """Dictionary with a handful of entries."""
    service = DictionaryService(db)
    service.add_entries(
        [
            NIHAO,
            SavedWord("你", "nǐ", "you"),
            SavedWord("拿", "ná", "to hold"),
            SavedWord("那", "nà", "that"),
            SavedWord("我", "wǒ", "I; me"),
            XIEXIE,
            MAO,
            SavedWord("绿", "lǜ", "green"),
        ]
    )
    return service


@pytest.fixture
def credentials() -> dict:
    """Fresh e-mail and password."""
    return {"email": fake.unique.email(), "password": fake.password(length=12)}


@pytest.fixture
def cookies() -> CookieJar:
    return CookieJar()


@pytest.fixture
def auth_client(db: Session, cookies: CookieJar) -> AuthClient:
    return AuthClient(db, cookies)


@pytest.fixture
def cards_client(db: Session, auth_client: AuthClient) -> CardsClient:
    return CardsClient(db, auth_client)


@pytest.fixture
def dictionary_client(seeded_dictionary: DictionaryService) -> DictionaryClient:
    return DictionaryClient(seeded_dictionary.db)


@pytest.fixture
def store(auth_client: AuthClient, cards_client: CardsClient, cookies: CookieJar) -> ListStore:
    return ListStore(auth_client, cards_client, cookies)
