"""
In-memory registry of running hangman games.

A game run is a shuffled deck of card snapshots plus a cursor. Decks are
copied out of the database when the run starts, so later edits, approvals
or deletions of cards do not touch a run that is already in progress.

One GameStore is created per application and handed to the routes through a
dependency (it lives on `app.state`). A single lock guards the whole run
map; it is held only for map lookups and cursor moves, never across a
database call. Runs that have not been touched for `ttl_secs` are dropped by
the background sweeper, so abandoned games do not accumulate for the
lifetime of the process.
"""
import logging
import random
import threading
import time
import uuid
from contextlib import contextmanager
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Optional

from core.errors import NotFoundError, StorageError

logger = logging.getLogger(__name__)

# --- Configuration ---
# Default time-to-live for idle runs, in seconds (2 hours).
DEFAULT_TTL_SECS = 2 * 60 * 60
DEFAULT_LOCK_TIMEOUT_SECS = 5.0

MSG_EMPTY_DECK = "No cards for this category."
MSG_STARTED = "The game has started."
MSG_NEXT = "New card."
MSG_FINISHED = "You reached the end of the deck. Want to start over?"
MSG_RESET = "Starting over from the beginning."
MSG_UNKNOWN_GAME = "Invalid game_id."


@dataclass(frozen=True)
class CardSnapshot:
    """Immutable copy of the card fields a game needs."""
    id: int
    category: str
    english: str
    latin: str
    image_path: str

    @classmethod
    def from_card(cls, card: Any) -> "CardSnapshot":
        return cls(
            id=card.id,
            category=card.category,
            english=card.english,
            latin=card.latin,
            image_path=card.image_path,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class GameRun:
    category: str
    deck: List[CardSnapshot]
    idx: int = 0
    last_used: float = field(default_factory=time.time)

    @property
    def total(self) -> int:
        return len(self.deck)


def _card_payload(card: Optional[CardSnapshot]) -> Optional[Dict[str, Any]]:
    return card.to_dict() if card is not None else None


class GameStore:
    """Process-scoped, lock-guarded map of game_id -> GameRun."""

    def __init__(self, ttl_secs: int = DEFAULT_TTL_SECS, lock_timeout: float = DEFAULT_LOCK_TIMEOUT_SECS,
                 rng: Optional[random.Random] = None):
        self.ttl_secs = ttl_secs
        self.lock_timeout = lock_timeout
        self._rng = rng or random.Random()
        self._runs: Dict[str, GameRun] = {}
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._sweeper: Optional[threading.Thread] = None

    @contextmanager
    def _locked(self) -> Iterator[Dict[str, GameRun]]:
        # A lock we cannot get means some holder is wedged; that is not a
        # business condition the caller can fix, so it surfaces as STORAGE.
        if not self._lock.acquire(timeout=self.lock_timeout):
            logger.error("[Game] registry lock not acquired within %.1fs", self.lock_timeout)
            raise StorageError("Game registry lock failed.")
        try:
            yield self._runs
        finally:
            self._lock.release()

    def _get(self, runs: Dict[str, GameRun], game_id: str) -> GameRun:
        run = runs.get(game_id)
        if run is None:
            raise NotFoundError(MSG_UNKNOWN_GAME)
        run.last_used = time.time()
        return run

    # --- Public API ---

    def start(self, category: str, cards: Iterable[Any]) -> Dict[str, Any]:
        """
        Register a new run over `cards` (already filtered to APPROVED + category).

        An empty deck is a soft, terminal response: nothing is registered and
        no game_id is handed out.
        """
        deck = [c if isinstance(c, CardSnapshot) else CardSnapshot.from_card(c) for c in cards]
        if not deck:
            return {
                "game_id": None,
                "total": 0,
                "card": None,
                "finished": True,
                "message": MSG_EMPTY_DECK,
            }

        self._rng.shuffle(deck)
        game_id = str(uuid.uuid4())
        run = GameRun(category=category, deck=deck)
        with self._locked() as runs:
            runs[game_id] = run
        logger.info("[Game] started %s category=%s cards=%d", game_id, category, run.total)
        return {
            "game_id": game_id,
            "total": run.total,
            "card": _card_payload(deck[0]),
            "finished": False,
            "message": MSG_STARTED,
        }

    def next(self, game_id: str) -> Dict[str, Any]:
        with self._locked() as runs:
            run = self._get(runs, game_id)
            # Stay parked past the end so repeated calls keep answering "finished".
            run.idx = min(run.idx + 1, run.total)
            if run.idx >= run.total:
                return {"card": None, "finished": True, "remaining": 0, "message": MSG_FINISHED}
            card = run.deck[run.idx]
            remaining = run.total - (run.idx + 1)
        return {"card": _card_payload(card), "finished": False, "remaining": remaining, "message": MSG_NEXT}

    def reset(self, game_id: str) -> Dict[str, Any]:
        """Reshuffle the run's deck in place and rewind to the first card."""
        with self._locked() as runs:
            run = self._get(runs, game_id)
            self._rng.shuffle(run.deck)
            run.idx = 0
            card = run.deck[0]
            remaining = run.total - 1
        return {"card": _card_payload(card), "finished": False, "remaining": remaining, "message": MSG_RESET}

    def end(self, game_id: str) -> None:
        """Forget a run. Unknown ids are ignored."""
        with self._locked() as runs:
            removed = runs.pop(game_id, None)
        if removed is not None:
            logger.info("[Game] ended %s", game_id)

    def count(self) -> int:
        with self._locked() as runs:
            return len(runs)

    # --- TTL Sweeper ---

    def sweep(self, now: Optional[float] = None) -> int:
        """Drop runs idle for longer than ttl_secs. Returns how many were removed."""
        cutoff = (now if now is not None else time.time()) - self.ttl_secs
        with self._locked() as runs:
            stale = [game_id for game_id, run in runs.items() if run.last_used < cutoff]
            for game_id in stale:
                del runs[game_id]
        if stale:
            logger.info("[Game] swept %d idle run(s)", len(stale))
        return len(stale)

    def start_sweeper(self, interval: int = 60) -> None:
        """Start a daemon thread that calls sweep() every `interval` seconds until stop_sweeper()."""
        if self._sweeper is not None and self._sweeper.is_alive():
            return
        self._stop.clear()

        def _run():
            while not self._stop.wait(interval):
                try:
                    self.sweep()
                except StorageError:
                    logger.exception("[Game] sweep skipped")

        self._sweeper = threading.Thread(target=_run, daemon=True, name="Game_Sweeper")
        self._sweeper.start()

    def stop_sweeper(self) -> None:
        self._stop.set()
        if self._sweeper is not None:
            self._sweeper.join(timeout=1.0)
            self._sweeper = None
