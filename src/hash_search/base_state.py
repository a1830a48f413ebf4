from typing import BinaryIO, Callable, Optional

import structlog

from hash_search.digests import DigestAlgorithm, DigestState
from hash_search.utils import InputReadError

log = structlog.get_logger(__name__)

CHUNK_SIZE = 16384


def build_base_state(
    stream: BinaryIO,
    algorithm: DigestAlgorithm,
    echo: Optional[BinaryIO] = None,
    on_chunk: Optional[Callable[[int], None]] = None,
    *,
    chunk_size: int = CHUNK_SIZE,
) -> DigestState:
    """
    Hash the whole stream once and return the unfinalized state.
    Each chunk is written to `echo` before the next one is read, so `echo`
    already holds a correct prefix of the poisoned file while the search runs.
    """
    state = DigestState(algorithm)
    total = 0
    index = 0

    while True:
        try:
            chunk = stream.read(chunk_size)
        except OSError as e:
            raise InputReadError(f"failed to read input: {e}") from e
        if not chunk:
            break

        state.update(chunk)
        if echo is not None:
            echo.write(chunk)
            echo.flush()
        if on_chunk is not None:
            on_chunk(index)
        total += len(chunk)
        index += 1

    log.debug("input hashed", algorithm=str(algorithm), bytes=total, chunks=index)
    return state
