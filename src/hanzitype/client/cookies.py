"""Browser-side cookie store for a single origin."""
import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Callable, Dict, List, Optional
from urllib.parse import quote, unquote

from werkzeug.http import dump_cookie, parse_cookie

from hanzitype.config import settings

logger = logging.getLogger(__name__)


@dataclass
class StoredCookie:
    """Cookie value as kept by the browser (percent-encoded)."""
    value: str
    expires: Optional[datetime] = None
    path: str = "/"


class CookieJar:
    """Cookie store for one origin.

    Values are percent-encoded on write and decoded on read. Every write
    records the ``Set-Cookie`` line a server would have sent, and the jar
    can be serialised to and rebuilt from a ``Cookie`` request header,
    which is how a page reload is reproduced.
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self._cookies: Dict[str, StoredCookie] = {}
        self._clock = clock or (lambda: datetime.now(UTC))
        self.set_cookie_headers: List[str] = []

    @classmethod
    def from_header(cls, header: Optional[str], clock: Optional[Callable[[], datetime]] = None) -> "CookieJar":
        """Build a jar from a ``Cookie`` request header."""
        jar = cls(clock=clock)
        for name, value in parse_cookie(header or "").items(multi=True):
            jar._cookies[name] = StoredCookie(value=value)
        return jar

    def get(self, name: str) -> Optional[str]:
        """Get a decoded cookie value; missing and expired cookies read as None."""
        cookie = self._cookies.get(name)
        if cookie is None:
            return None
        if cookie.expires is not None and cookie.expires <= self._clock():
            logger.debug(f"Cookie {name} expired")
            del self._cookies[name]
            return None
        return unquote(cookie.value)

    def set(
        self,
        name: str,
        value: str,
        max_age_days: Optional[int] = None,
        path: Optional[str] = None,
    ) -> None:
        """Store a cookie. Without max_age_days it lives for the browser session."""
        path = path or settings.cookies.path
        encoded = quote(value, safe="")
        expires = None
        max_age = None
        if max_age_days is not None:
            max_age = timedelta(days=max_age_days)
            expires = self._clock() + max_age
        self.set_cookie_headers.append(
            dump_cookie(name, encoded, max_age=max_age, expires=expires, path=path, samesite="Lax")
        )
        self._cookies[name] = StoredCookie(value=encoded, expires=expires, path=path)

    def delete(self, name: str, path: Optional[str] = None) -> None:
        """Expire a cookie."""
        path = path or settings.cookies.path
        self.set_cookie_headers.append(dump_cookie(name, "", max_age=0, expires=0, path=path))
        self._cookies.pop(name, None)

    def __contains__(self, name: str) -> bool:
        return self.get(name) is not None

    def to_header(self) -> str:
        """Serialise live cookies as a ``Cookie`` request header."""
        parts = []
        for name in list(self._cookies):
            if self.get(name) is None:
                continue
            parts.append(f"{name}={self._cookies[name].value}")
        return "; ".join(parts)
