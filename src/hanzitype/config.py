"""Configuration settings for the application."""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Define base directory
BASE_DIR = Path(__file__).parent.parent.parent

# Load environment variables from .env file
env_file = ".env.test" if os.getenv("ENV") == "test" else ".env"
load_dotenv(env_file)


DATA_DIR = Path(os.getenv("DATA_DIR", str(BASE_DIR / "data")))
DEFAULT_SEED_FILE = DATA_DIR / "characters.tsv"


@dataclass
class DatabaseSettings:
    """Database configuration settings."""
    url: str = os.getenv("DATABASE_URL", "sqlite:///hanzitype.db")
    echo: bool = os.getenv("DATABASE_ECHO", "false").lower() == "true"


@dataclass
class LoggingSettings:
    """Logging configuration settings."""
    level: str = os.getenv("LOG_LEVEL", "INFO")
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    dir: Optional[str] = os.getenv("LOG_DIR", None)
    rotation: str = os.getenv("LOG_ROTATION", "midnight")
    interval: int = int(os.getenv("LOG_INTERVAL", "1"))
    backup_count: int = int(os.getenv("LOG_BACKUP_COUNT", "7"))


@dataclass
class SearchSettings:
    """Dictionary search settings."""
    debounce_ms: int = int(os.getenv("SEARCH_DEBOUNCE_MS", "300"))
    default_limit: int = int(os.getenv("SEARCH_DEFAULT_LIMIT", "20"))
    max_limit: int = int(os.getenv("SEARCH_MAX_LIMIT", "100"))


@dataclass
class GameSettings:
    """Typing game settings."""
    duration_seconds: int = int(os.getenv("GAME_DURATION_SECONDS", "60"))
    tick_seconds: float = float(os.getenv("GAME_TICK_SECONDS", "1.0"))
    advance_delay_ms: int = int(os.getenv("GAME_ADVANCE_DELAY_MS", "100"))


@dataclass
class CookieSettings:
    """Browser cookie settings."""
    words_cookie_name: str = os.getenv("WORDS_COOKIE_NAME", "addedWords")
    auth_cookie_name: str = os.getenv("AUTH_COOKIE_NAME", "hanzitype-auth-token")
    max_age_days: int = int(os.getenv("COOKIE_MAX_AGE_DAYS", "365"))
    path: str = os.getenv("COOKIE_PATH", "/")


@dataclass
class AuthSettings:
    """Authentication settings."""
    min_password_length: int = int(os.getenv("MIN_PASSWORD_LENGTH", "6"))
    session_ttl_hours: int = int(os.getenv("AUTH_SESSION_TTL_HOURS", "168"))


@dataclass
class DictionarySettings:
    """Character dictionary settings."""
    seed_file: Path = Path(os.getenv("DICTIONARY_SEED_FILE", str(DEFAULT_SEED_FILE)))


@dataclass
class MonitoringSettings:
    """Prometheus exporter settings."""
    enabled: bool = os.getenv("METRICS_ENABLED", "false").lower() == "true"
    port: int = int(os.getenv("METRICS_PORT", "9090"))


def get_database_settings() -> DatabaseSettings:
    """Get database settings."""
    return DatabaseSettings()


def get_logging_settings() -> LoggingSettings:
    """Get logging settings."""
    return LoggingSettings()


def get_search_settings() -> SearchSettings:
    """Get search settings."""
    return SearchSettings()


def get_game_settings() -> GameSettings:
    """Get game settings."""
    return GameSettings()


def get_cookie_settings() -> CookieSettings:
    """Get cookie settings."""
    return CookieSettings()


def get_auth_settings() -> AuthSettings:
    """Get auth settings."""
    return AuthSettings()


def get_dictionary_settings() -> DictionarySettings:
    """Get dictionary settings."""
    return DictionarySettings()


def get_monitoring_settings() -> MonitoringSettings:
    """Get monitoring settings."""
    return MonitoringSettings()


@dataclass
class Settings:
    """Main settings class that combines all configuration settings."""
    database: DatabaseSettings = field(default_factory=get_database_settings)
    logging: LoggingSettings = field(default_factory=get_logging_settings)
    search: SearchSettings = field(default_factory=get_search_settings)
    game: GameSettings = field(default_factory=get_game_settings)
    cookies: CookieSettings = field(default_factory=get_cookie_settings)
    auth: AuthSettings = field(default_factory=get_auth_settings)
    dictionary: DictionarySettings = field(default_factory=get_dictionary_settings)
    monitoring: MonitoringSettings = field(default_factory=get_monitoring_settings)

    def validate(self) -> None:
        """Validate settings and raise ValueError if invalid."""
        if self.search.debounce_ms <= 0:
            raise ValueError("SEARCH_DEBOUNCE_MS must be positive")

        if self.search.default_limit < 1 or self.search.max_limit < 1:
            raise ValueError("Search limits must be positive")

        if self.search.default_limit > self.search.max_limit:
            raise ValueError("SEARCH_DEFAULT_LIMIT cannot be greater than SEARCH_MAX_LIMIT")

        if self.game.duration_seconds < 1:
            raise ValueError("GAME_DURATION_SECONDS must be positive")

        if self.game.tick_seconds <= 0:
            raise ValueError("GAME_TICK_SECONDS must be positive")

        if self.game.advance_delay_ms < 0:
            raise ValueError("GAME_ADVANCE_DELAY_MS cannot be negative")

        if self.auth.min_password_length < 1:
            raise ValueError("MIN_PASSWORD_LENGTH must be positive")

        if not self.cookies.words_cookie_name or not self.cookies.auth_cookie_name:
            raise ValueError("Cookie names cannot be empty")


# Create global settings instance
settings = Settings()
settings.validate()
