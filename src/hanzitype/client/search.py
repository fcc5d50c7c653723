"""Debounced dictionary search."""
import asyncio
import logging
from typing import List, Optional

from hanzitype import monitoring
from hanzitype.client.collaborators import DictionaryClient
from hanzitype.config import settings
from hanzitype.errors import HanziTypeError
from hanzitype.models.entries import DictionaryEntry

logger = logging.getLogger(__name__)


class SearchInterface:
    """Debounced prefix search against the dictionary.

    Every keystroke restarts the debounce timer; only the latest timer
    issues a lookup, and a response that arrives after a newer keystroke
    or after ``close()`` is dropped.
    """

    def __init__(
        self,
        dictionary: DictionaryClient,
        debounce_ms: Optional[int] = None,
        limit: Optional[int] = None,
    ):
        self.dictionary = dictionary
        self.debounce_seconds = (debounce_ms if debounce_ms is not None else settings.search.debounce_ms) / 1000
        self.limit = limit
        self.query = ""
        self.results: List[DictionaryEntry] = []
        self.is_loading = False
        self.closed = False
        self._pending: Optional[asyncio.Task] = None
        self._generation = 0

    def set_query(self, query: str) -> None:
        """Record a keystroke. Must be called from inside the running event loop."""
        if self.closed:
            return
        self.query = query
        self._generation += 1
        self._cancel_pending()

        if not query.strip():
            self.results = []
            self.is_loading = False
            return

        self._pending = asyncio.get_running_loop().create_task(
            self._debounced_search(query, self._generation)
        )

    async def wait(self) -> None:
        """Wait until the latest debounce timer has fired and its lookup settled."""
        while self._pending is not None and not self._pending.done():
            await asyncio.gather(self._pending, return_exceptions=True)

    def close(self) -> None:
        """Stop searching; late responses are discarded."""
        self.closed = True
        self._generation += 1
        self._cancel_pending()
        self.is_loading = False

    def _cancel_pending(self) -> None:
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None

    async def _debounced_search(self, query: str, generation: int) -> None:
        await asyncio.sleep(self.debounce_seconds)
        if generation != self._generation:
            return

        self.is_loading = True
        monitoring.searches.inc()
        try:
            results = await self.dictionary.search(query, self.limit)
        except HanziTypeError as e:
            logger.error(f"Error searching for {query!r}: {e}")
            monitoring.search_errors.inc()
            results = []

        if generation != self._generation:
            logger.debug(f"Discarding stale results for {query!r}")
            return

        self.results = results
        self.is_loading = False
        logger.debug(f"Search {query!r} returned {len(results)} results")
