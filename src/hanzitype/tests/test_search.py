"""Tests for the debounced search interface."""
import asyncio
from typing import List, Optional

import pytest

from hanzitype.client.collaborators import DictionaryClient
from hanzitype.client.search import SearchInterface
from hanzitype.errors import CollaboratorError
from hanzitype.models.entries import DictionaryEntry

from .conftest import MAO, NIHAO


class FakeDictionary:
    """Dictionary client that records lookups and can hold responses back."""

    def __init__(self, results: Optional[List[DictionaryEntry]] = None, error: Optional[Exception] = None):
        self.results = results or []
        self.error = error
        self.calls: List[str] = []
        self.release = asyncio.Event()
        self.release.set()

    async def search(self, query: str, limit: Optional[int] = None) -> List[DictionaryEntry]:
        self.calls.append(query)
        await self.release.wait()
        if self.error:
            raise self.error
        return [entry for entry in self.results if entry.pinyin.startswith(query)]


@pytest.mark.asyncio
async def test_search_after_debounce(dictionary_client: DictionaryClient):
    search = SearchInterface(dictionary_client, debounce_ms=10)

    search.set_query("ni")
    assert search.results == []
    await search.wait()

    assert [entry.character for entry in search.results] == ["你好", "你"]
    assert search.is_loading is False


@pytest.mark.asyncio
async def test_empty_query_skips_lookup():
    dictionary = FakeDictionary([NIHAO])
    search = SearchInterface(dictionary, debounce_ms=10)
    search.set_query("nǐ")
    await search.wait()
    assert search.results == [NIHAO]

    search.set_query("")
    await search.wait()

    assert search.results == []
    assert dictionary.calls == ["nǐ"]

    search.set_query("   ")
    await search.wait()
    assert dictionary.calls == ["nǐ"]


@pytest.mark.asyncio
async def test_keystrokes_within_debounce_issue_one_lookup():
    dictionary = FakeDictionary([NIHAO])
    search = SearchInterface(dictionary, debounce_ms=30)

    search.set_query("n")
    await asyncio.sleep(0.005)
    search.set_query("nǐ")
    await asyncio.sleep(0.005)
    search.set_query("nǐ h")
    await search.wait()

    assert dictionary.calls == ["nǐ h"]
    assert search.results == [NIHAO]


@pytest.mark.asyncio
async def test_superseded_response_is_discarded():
    dictionary = FakeDictionary([NIHAO, MAO])
    dictionary.release.clear()
    search = SearchInterface(dictionary, debounce_ms=5)

    search.set_query("nǐ")
    await asyncio.sleep(0.05)
    assert dictionary.calls == ["nǐ"]
    assert search.is_loading is True

    search.set_query("mā")
    dictionary.release.set()
    await search.wait()

    assert dictionary.calls == ["nǐ", "mā"]
    assert search.results == [MAO]
    assert search.query == "mā"


@pytest.mark.asyncio
async def test_errors_degrade_to_empty_results():
    dictionary = FakeDictionary([NIHAO])
    search = SearchInterface(dictionary, debounce_ms=5)
    search.set_query("nǐ")
    await search.wait()
    assert search.results == [NIHAO]

    dictionary.error = CollaboratorError("connection reset")
    search.set_query("nǐ h")
    await search.wait()

    assert search.results == []
    assert search.is_loading is False


@pytest.mark.asyncio
async def test_close_discards_late_response():
    dictionary = FakeDictionary([NIHAO])
    dictionary.release.clear()
    search = SearchInterface(dictionary, debounce_ms=5)

    search.set_query("nǐ")
    await asyncio.sleep(0.05)
    search.close()
    dictionary.release.set()
    await asyncio.sleep(0.01)

    assert search.results == []
    assert search.is_loading is False

    search.set_query("nǐ")
    assert dictionary.calls == ["nǐ"]
