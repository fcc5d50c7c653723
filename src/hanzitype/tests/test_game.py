"""Tests for the typing game session."""
import asyncio
import random
from typing import List

import pytest

from hanzitype.client.game import GamePhase, GameSession, words_per_minute
from hanzitype.errors import EmptyWordListError, ValidationError
from hanzitype.models.entries import SavedWord

from .conftest import MAO, NIHAO, XIEXIE


class WordList:
    """Minimal word source."""

    def __init__(self, *words: SavedWord):
        self.words = list(words)


def make_game(*words: SavedWord, **kwargs) -> GameSession:
    # A long tick keeps the real countdown out of the way; tests call tick() directly
    options = {"tick_seconds": 3600, "advance_delay_ms": 0, "rng": random.Random(7)}
    options.update(kwargs)
    return GameSession(WordList(*words), **options)


async def settle() -> None:
    """Let pending timer callbacks run."""
    await asyncio.sleep(0.01)


async def answer_correctly(game: GameSession) -> None:
    assert game.set_input(game.current_word.pinyin)
    await settle()


@pytest.mark.parametrize(
    "correct, elapsed, expected",
    [(5, 60, 5), (0, 0, 0), (3, 0, 0), (10, 30, 20), (3, 40, 5), (1, 7, 9)],
)
def test_words_per_minute(correct: int, elapsed: int, expected: int):
    assert words_per_minute(correct, elapsed) == expected


@pytest.mark.asyncio
async def test_start_requires_words():
    game = make_game()

    with pytest.raises(EmptyWordListError) as exc_info:
        game.start()

    assert "add some words" in str(exc_info.value)
    assert game.phase is GamePhase.IDLE


@pytest.mark.asyncio
async def test_start():
    game = make_game(NIHAO, MAO)

    game.start()

    assert game.phase is GamePhase.RUNNING
    assert game.score == 0
    assert game.remaining_seconds == 60
    assert game.input_text == ""
    assert game.current_word in (NIHAO, MAO)
    game.reset()


@pytest.mark.asyncio
async def test_start_while_running_is_rejected():
    game = make_game(NIHAO)
    game.start()

    with pytest.raises(ValidationError):
        game.start()
    game.reset()


@pytest.mark.asyncio
async def test_correct_answer_scores_once_and_advances():
    events: List[str] = []
    game = make_game(NIHAO, advance_delay_ms=20)
    game.subscribe(lambda event, session: events.append(event))
    game.start()

    assert game.set_input("ni hao") is True
    assert game.set_input("ni hao") is False
    assert game.set_input("NI HAO ") is False
    assert game.score == 1
    assert game.input_text == "NI HAO "

    await asyncio.sleep(0.05)

    assert game.input_text == ""
    assert game.current_word == NIHAO
    assert events == ["started", "correct", "advanced"]
    game.reset()


@pytest.mark.asyncio
async def test_wrong_and_empty_answers():
    game = make_game(NIHAO)
    game.start()

    assert game.set_input("") is False
    assert game.set_input("ni") is False
    assert game.set_input("nihao") is False
    assert game.score == 0
    game.reset()


@pytest.mark.asyncio
async def test_single_word_list_always_picks_it():
    game = make_game(NIHAO)
    game.start()

    for _ in range(10):
        assert game.current_word.character == "你好"
        await answer_correctly(game)

    assert game.score == 10
    game.reset()


@pytest.mark.asyncio
async def test_picks_cover_whole_list():
    game = make_game(NIHAO, MAO, XIEXIE)
    game.start()

    seen = set()
    for _ in range(60):
        seen.add(game.current_word.character)
        await answer_correctly(game)

    assert seen == {NIHAO.character, MAO.character, XIEXIE.character}
    game.reset()


@pytest.mark.asyncio
async def test_advance_uses_current_list():
    game = make_game(NIHAO)
    game.start()
    game.source.words = [MAO]

    await answer_correctly(game)

    assert game.current_word == MAO
    game.reset()


@pytest.mark.asyncio
async def test_countdown_ends_game_with_rate():
    game = make_game(NIHAO)
    game.start()
    for _ in range(5):
        await answer_correctly(game)

    for _ in range(59):
        game.tick()
    assert game.phase is GamePhase.RUNNING
    assert game.remaining_seconds == 1

    game.tick()

    assert game.phase is GamePhase.ENDED
    assert game.remaining_seconds == 0
    assert game.final_rate == 5
    assert game.set_input("ni hao") is False
    assert game.score == 5


@pytest.mark.asyncio
async def test_rate_is_zero_before_time_passes():
    game = make_game(NIHAO)
    game.start()
    await answer_correctly(game)

    assert game.elapsed_seconds == 0
    assert game.rate == 0

    game.tick()
    assert game.rate == 60
    game.reset()


@pytest.mark.asyncio
async def test_real_countdown():
    events: List[str] = []
    game = make_game(NIHAO, duration_seconds=3, tick_seconds=0.01)
    game.subscribe(lambda event, session: events.append(event))

    game.start()
    await asyncio.sleep(0.2)

    assert game.phase is GamePhase.ENDED
    assert game.remaining_seconds == 0
    assert game.final_rate == 0
    assert events == ["started", "tick", "tick", "tick", "ended"]


@pytest.mark.asyncio
async def test_end_cancels_pending_advance():
    game = make_game(NIHAO, MAO, advance_delay_ms=50, duration_seconds=1)
    game.start()
    word = game.current_word

    assert game.set_input(word.pinyin) is True
    game.tick()
    await asyncio.sleep(0.1)

    assert game.phase is GamePhase.ENDED
    assert game.current_word == word


@pytest.mark.asyncio
async def test_reset_returns_to_idle():
    source_words = [NIHAO, MAO]
    game = make_game(*source_words, tick_seconds=0.01)
    game.start()
    await answer_correctly(game)

    game.reset()
    await asyncio.sleep(0.05)

    assert game.phase is GamePhase.IDLE
    assert game.current_word is None
    assert game.score == 0
    assert game.remaining_seconds == 60
    assert game.final_rate is None
    assert game.source.words == source_words


@pytest.mark.asyncio
async def test_replay_after_end():
    game = make_game(NIHAO, duration_seconds=1)
    game.start()
    await answer_correctly(game)
    game.tick()
    assert game.phase is GamePhase.ENDED

    game.start()

    assert game.phase is GamePhase.RUNNING
    assert game.score == 0
    assert game.remaining_seconds == 1
    assert game.final_rate is None
    game.reset()


@pytest.mark.asyncio
async def test_input_ignored_when_not_running():
    game = make_game(NIHAO)

    assert game.set_input("ni hao") is False
    assert game.input_text == ""


@pytest.mark.asyncio
async def test_failing_listener_does_not_break_game():
    game = make_game(NIHAO)

    def broken(event, session):
        raise RuntimeError("boom")

    unsubscribe = game.subscribe(broken)
    game.start()
    await answer_correctly(game)
    unsubscribe()
    unsubscribe()

    assert game.score == 1
    game.reset()
