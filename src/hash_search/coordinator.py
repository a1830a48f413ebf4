import threading
from typing import Callable, Optional

import structlog

from hash_search.results import Match, SearchMode

log = structlog.get_logger(__name__)

OnMatchFn = Callable[[Match], None]


class ResultCoordinator:
    """Thread-safe sink for matches reported by search workers.

    In first-match mode the first report wins: `on_match` runs once and the
    stop event is set so the other workers wind down. In enumerate mode every
    report runs `on_match`. Either way `on_match` runs under the lock, so two
    workers never write at the same time.
    """

    def __init__(self, mode: SearchMode, on_match: Optional[OnMatchFn] = None) -> None:
        self.mode = mode
        self.stop_event = threading.Event()
        self._lock = threading.Lock()
        self._on_match = on_match
        self._winner: Optional[Match] = None
        self._match_count = 0

    @property
    def winner(self) -> Optional[Match]:
        with self._lock:
            return self._winner

    @property
    def match_count(self) -> int:
        with self._lock:
            return self._match_count

    @property
    def cancelled(self) -> bool:
        return self.stop_event.is_set()

    def cancel(self) -> None:
        self.stop_event.set()

    def report(self, match: Match) -> bool:
        """Hand over a match. Returns True when the reporting worker should stop."""
        with self._lock:
            if self.mode is SearchMode.FIRST_MATCH:
                if self._winner is not None or self.stop_event.is_set():
                    log.debug("match discarded", candidate=match.candidate)
                    return True
                self._winner = match
                self._match_count = 1
                self.stop_event.set()
                if self._on_match is not None:
                    self._on_match(match)
                log.info("match accepted", candidate=match.candidate, digest=match.digest.hex())
                return True

            self._match_count += 1
            if self._on_match is not None:
                self._on_match(match)
            return False
