from contextlib import contextmanager
from typing import Callable, Iterator, Optional

from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn, TimeElapsedColumn


def get_console() -> Console:
    return Console(stderr=True)


def get_progress(console: Console) -> Progress:
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(bar_width=30),
        TextColumn("{task.percentage:>5.1f}%"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    )


@contextmanager
def search_progress(max_search: int, console: Optional[Console] = None) -> Iterator[Callable[[int], None]]:
    """Show a progress bar on stderr and yield an `advance(n)` callback for the workers."""
    progress = get_progress(console or get_console())
    with progress:
        task = progress.add_task("searching", total=max_search)
        yield lambda count: progress.advance(task, count)
