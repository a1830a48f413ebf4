from enum import Enum

import structlog

from hash_search.utils import ConfigurationError

log = structlog.get_logger(__name__)

DEFAULT_SHIFT = 24
MIN_SHIFT = 1
MAX_SHIFT = 64


class PartitionStrategy(str, Enum):
    BLOCK = "block"
    STRIDE = "stride"

    def __str__(self):
        return self.value


def search_bound(shift: int) -> int:
    """Number of candidates searched for a given bit count: 2**shift - 1 (2**64 - 1 at most)."""
    if shift < MIN_SHIFT or shift > MAX_SHIFT:
        raise ConfigurationError(f"invalid number of bits: {shift} (must be {MIN_SHIFT}-{MAX_SHIFT})")
    if shift == MAX_SHIFT:
        return (1 << 64) - 1
    return (1 << shift) - 1


def partition(
    max_search: int,
    workers: int,
    strategy: PartitionStrategy = PartitionStrategy.BLOCK,
) -> list[range]:
    """
    Split [0, max_search) into at most `workers` disjoint ranges.
    - block: contiguous slices, worker i gets the i-th run of values.
    - stride: worker i gets i, i + workers, i + 2*workers, ...
    Every value is covered exactly once. Empty ranges are left out.
    """
    if workers < 1:
        raise ConfigurationError(f"worker count must be at least 1, got {workers}")
    if max_search < 0:
        raise ValueError(f"search bound must not be negative, got {max_search}")

    match strategy:
        case PartitionStrategy.BLOCK:
            size = -(-max_search // workers)  # ceil
            slices = [range(start, min(start + size, max_search)) for start in range(0, max_search, size or 1)]
        case PartitionStrategy.STRIDE:
            slices = [range(i, max_search, workers) for i in range(min(workers, max_search))]
        case _:
            raise ValueError(f"Invalid partition strategy: {strategy}")

    # len() overflows for ranges past sys.maxsize; truthiness does not.
    slices = [s for s in slices if s]
    log.debug("partitioned", strategy=str(strategy), max_search=max_search, slices=len(slices))
    return slices
