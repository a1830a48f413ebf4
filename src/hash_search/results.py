from dataclasses import dataclass
from enum import Enum
from typing import Optional


class SearchMode(str, Enum):
    FIRST_MATCH = "first"
    ENUMERATE = "all"

    def __str__(self):
        return self.value


@dataclass(frozen=True, slots=True)
class Match:
    """One candidate whose suffix gives a digest with the target prefix."""

    candidate: int
    suffix: bytes
    digest: bytes


@dataclass(frozen=True, slots=True)
class SearchOutcome:
    """Immutable summary of a finished search."""

    mode: SearchMode
    max_search: int
    evaluated: int
    match_count: int
    winner: Optional[Match] = None

    @property
    def found(self) -> bool:
        return self.match_count > 0

    @property
    def exit_code(self) -> int:
        # Only first-match mode can fail.
        if self.mode is SearchMode.FIRST_MATCH and self.winner is None:
            return 1
        return 0
