from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from typing import Callable, Optional

import structlog

from hash_search.config import SearchConfig
from hash_search.coordinator import OnMatchFn, ResultCoordinator
from hash_search.digests import DigestState
from hash_search.partition import partition
from hash_search.results import Match, SearchOutcome
from hash_search.target import TargetPrefix
from hash_search.utils import EncodeFn

log = structlog.get_logger(__name__)

PROGRESS_INTERVAL = 1 << 16

ProgressFn = Callable[[int], None]


def evaluate_range(
    base: DigestState,
    candidates: range,
    target: TargetPrefix,
    encode: EncodeFn,
    coordinator: ResultCoordinator,
    on_progress: Optional[ProgressFn] = None,
) -> int:
    """
    Try every candidate in order against the shared base state.
    Each candidate gets its own clone of `base`; the base itself is only read.
    Stops early once the coordinator's stop event is set.
    Returns the number of candidates evaluated.
    """
    stop_event = coordinator.stop_event
    evaluated = 0
    pending = 0

    for candidate in candidates:
        if stop_event.is_set():
            break

        suffix = encode(candidate)
        state = base.clone()
        state.update(suffix)
        digest = state.finalize()
        evaluated += 1
        pending += 1

        if target.matches(digest):
            if coordinator.report(Match(candidate, suffix, digest)):
                break

        if pending == PROGRESS_INTERVAL:
            if on_progress is not None:
                on_progress(pending)
            pending = 0

    if on_progress is not None and pending:
        on_progress(pending)
    return evaluated


def run_search(
    config: SearchConfig,
    base: DigestState,
    on_match: Optional[OnMatchFn] = None,
    on_progress: Optional[ProgressFn] = None,
) -> SearchOutcome:
    """Fan the search space out over a thread pool and wait for the outcome."""
    max_search = config.max_search
    coordinator = ResultCoordinator(config.mode, on_match)
    slices = partition(max_search, config.workers, config.strategy)
    encode = config.encoding.encoder

    log.info(
        "search started",
        mode=str(config.mode),
        algorithm=str(config.algorithm),
        target=str(config.target),
        max_search=max_search,
        workers=len(slices),
    )

    with ThreadPoolExecutor(max_workers=len(slices) or 1, thread_name_prefix="search") as executor:
        futures = [
            executor.submit(evaluate_range, base, candidates, config.target, encode, coordinator, on_progress)
            for candidates in slices
        ]

        try:
            done, _ = wait(futures, return_when=FIRST_EXCEPTION)
        except KeyboardInterrupt:
            coordinator.cancel()
            raise

        # A failed worker takes the rest of the search down with it.
        for future in done:
            if future.exception() is not None:
                coordinator.cancel()
                raise future.exception()

    evaluated = 0
    for index, future in enumerate(futures):
        count = future.result()
        evaluated += count
        log.debug("worker finished", worker=index, evaluated=count)

    outcome = SearchOutcome(
        mode=config.mode,
        max_search=max_search,
        evaluated=evaluated,
        match_count=coordinator.match_count,
        winner=coordinator.winner,
    )
    log.info("search finished", evaluated=evaluated, matches=outcome.match_count, found=outcome.found)
    return outcome
