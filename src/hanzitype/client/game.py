"""Timed pinyin typing game."""
import asyncio
import logging
import math
import random
from enum import Enum
from typing import Callable, List, Optional, Protocol, Sequence

from hanzitype import monitoring
from hanzitype.config import settings
from hanzitype.errors import EmptyWordListError, ValidationError
from hanzitype.models.entries import SavedWord
from hanzitype.services.tones import grade

logger = logging.getLogger(__name__)


class WordSource(Protocol):
    """Anything exposing the current saved words, e.g. a ListStore."""

    @property
    def words(self) -> Sequence[SavedWord]: ...


class GamePhase(Enum):
    """Game lifecycle."""
    IDLE = "idle"
    RUNNING = "running"
    ENDED = "ended"


Listener = Callable[[str, "GameSession"], None]


def words_per_minute(correct: int, elapsed_seconds: int) -> int:
    """Correct answers per minute, rounded half up; zero before any time has passed."""
    if elapsed_seconds <= 0:
        return 0
    return int(math.floor(correct * 60 / elapsed_seconds + 0.5))


class GameSession:
    """One player's typing challenge against their saved words.

    Phases go idle -> running -> ended; ``start`` from ended replays and
    ``reset`` returns to idle from either running or ended. While running
    a countdown ticks once per ``tick_seconds`` and every input change is
    graded against the current word, ignoring tone marks. A correct
    answer scores once and schedules the next word after a short delay.
    """

    def __init__(
        self,
        source: WordSource,
        duration_seconds: Optional[int] = None,
        tick_seconds: Optional[float] = None,
        advance_delay_ms: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ):
        self.source = source
        self.duration_seconds = duration_seconds or settings.game.duration_seconds
        self.tick_seconds = tick_seconds or settings.game.tick_seconds
        delay_ms = advance_delay_ms if advance_delay_ms is not None else settings.game.advance_delay_ms
        self.advance_delay_seconds = delay_ms / 1000
        self.rng = rng or random.Random()

        self.phase = GamePhase.IDLE
        self.current_word: Optional[SavedWord] = None
        self.score = 0
        self.remaining_seconds = self.duration_seconds
        self.input_text = ""
        self.final_rate: Optional[int] = None

        self._advancing = False
        self._tick_task: Optional[asyncio.Task] = None
        self._advance_handle: Optional[asyncio.TimerHandle] = None
        self._listeners: List[Listener] = []

    @property
    def elapsed_seconds(self) -> int:
        return self.duration_seconds - self.remaining_seconds

    @property
    def rate(self) -> int:
        """Words per minute so far."""
        return words_per_minute(self.score, self.elapsed_seconds)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener for game events. Returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def start(self) -> None:
        """Start a new round (or replay a finished one).

        Raises:
            EmptyWordListError: there are no saved words to play with.
            ValidationError: a round is already running.
        """
        if self.phase is GamePhase.RUNNING:
            raise ValidationError("A game is already running")
        words = self.source.words
        if not words:
            raise EmptyWordListError()

        loop = asyncio.get_running_loop()
        self._cancel_timers()
        self.score = 0
        self.remaining_seconds = self.duration_seconds
        self.final_rate = None
        self.input_text = ""
        self._advancing = False
        self.current_word = self._pick(words)
        self.phase = GamePhase.RUNNING
        self._tick_task = loop.create_task(self._run_countdown())

        monitoring.games_started.inc()
        logger.info(f"Game started with {len(words)} words, {self.duration_seconds}s on the clock")
        self._emit("started")

    def tick(self) -> None:
        """Advance the countdown by one second."""
        if self.phase is not GamePhase.RUNNING:
            return
        self.remaining_seconds = max(self.remaining_seconds - 1, 0)
        self._emit("tick")
        if self.remaining_seconds == 0:
            self._end()

    def set_input(self, text: str) -> bool:
        """Update the input buffer and grade it. Returns whether it scored."""
        if self.phase is not GamePhase.RUNNING:
            return False
        self.input_text = text
        if self._advancing or self.current_word is None:
            return False
        if not grade(text, self.current_word.pinyin):
            return False

        self._advancing = True
        self.score += 1
        monitoring.correct_answers.inc()
        logger.debug(f"Correct answer for {self.current_word.character}, score {self.score}")
        self._emit("correct")
        self._advance_handle = asyncio.get_running_loop().call_later(
            self.advance_delay_seconds, self._advance
        )
        return True

    def reset(self) -> None:
        """Return to idle, discarding the round. The saved words are not touched."""
        if self.phase is GamePhase.IDLE:
            return
        self._cancel_timers()
        self.phase = GamePhase.IDLE
        self.current_word = None
        self.score = 0
        self.remaining_seconds = self.duration_seconds
        self.input_text = ""
        self.final_rate = None
        self._advancing = False
        logger.info("Game reset")
        self._emit("reset")

    def _pick(self, words: Sequence[SavedWord]) -> SavedWord:
        return words[self.rng.randrange(len(words))]

    def _advance(self) -> None:
        self._advance_handle = None
        if self.phase is not GamePhase.RUNNING:
            return
        # Sample from the list as it is now; the same word may come up again
        words = self.source.words
        if words:
            self.current_word = self._pick(words)
        self.input_text = ""
        self._advancing = False
        self._emit("advanced")

    def _end(self) -> None:
        self._cancel_timers()
        self.phase = GamePhase.ENDED
        self._advancing = False
        self.final_rate = self.rate
        monitoring.game_rate.observe(self.final_rate)
        logger.info(
            f"Game over: {self.score} correct in {self.elapsed_seconds}s ({self.final_rate} per minute)"
        )
        self._emit("ended")

    async def _run_countdown(self) -> None:
        while self.phase is GamePhase.RUNNING:
            await asyncio.sleep(self.tick_seconds)
            self.tick()

    def _cancel_timers(self) -> None:
        if self._advance_handle is not None:
            self._advance_handle.cancel()
            self._advance_handle = None
        task = self._tick_task
        self._tick_task = None
        if task is not None and not task.done():
            try:
                current = asyncio.current_task()
            except RuntimeError:
                current = None
            # The countdown ends on its own when it is the caller
            if task is not current:
                task.cancel()

    def _emit(self, event: str) -> None:
        for listener in list(self._listeners):
            try:
                listener(event, self)
            except Exception as e:
                logger.error(f"Game listener failed on {event}: {e}")
