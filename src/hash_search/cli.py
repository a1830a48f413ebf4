from typing import BinaryIO

import click

from hash_search.base_state import build_base_state
from hash_search.candidates import CandidateEncoding
from hash_search.config import SearchConfig
from hash_search.coordinator import OnMatchFn
from hash_search.digests import DigestAlgorithm, DigestState
from hash_search.logs import configure_logging
from hash_search.partition import DEFAULT_SHIFT, MAX_SHIFT, MIN_SHIFT, PartitionStrategy
from hash_search.results import Match, SearchMode, SearchOutcome
from hash_search.search import run_search
from hash_search.ui import search_progress
from hash_search.utils import ConfigurationError, InputReadError, c_hex, hex_digest

DOTS_EVERY = 256


class SearchCommand(click.Command):
    """Command that reports usage errors with exit status 1 instead of click's 2."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as e:
            e.exit_code = 1
            raise


def usage_error(ctx: click.Context, message: str) -> click.UsageError:
    error = click.UsageError(message, ctx)
    error.exit_code = 1
    return error


def read_input(stdin: BinaryIO, config: SearchConfig, echo: BinaryIO | None) -> DigestState:
    """Hash stdin, echoing it when building a poisoned file, with progress dots on stderr."""
    click.echo("reading file to hash from stdin...", err=True, nl=False)
    interactive = stdin.isatty()
    if interactive:
        click.echo(err=True)

    def dots(index: int) -> None:
        if index % DOTS_EVERY == 0:
            click.echo(".", err=True, nl=False)

    try:
        base = build_base_state(stdin, config.algorithm, echo=echo, on_chunk=None if interactive else dots)
    except InputReadError as e:
        raise click.ClickException(str(e)) from e

    if not interactive:
        click.echo(err=True)
    return base


def write_suffix(stdout: BinaryIO) -> OnMatchFn:
    """Finish the poisoned file with the winning suffix."""

    def on_match(match: Match) -> None:
        stdout.write(match.suffix)
        stdout.flush()
        click.echo("found match!", err=True)
        click.echo(f"new hash is {hex_digest(match.digest)}", err=True)

    return on_match


def write_listing(stdout: BinaryIO, encoding: CandidateEncoding) -> OnMatchFn:
    """One line per match: `<hex digest> ascii <candidate>`."""

    def on_match(match: Match) -> None:
        line = f"{hex_digest(match.digest)} {encoding.label(match.candidate)}\n"
        stdout.write(line.encode("ascii"))
        stdout.flush()

    return on_match


def search(config: SearchConfig, base: DigestState, on_match: OnMatchFn, progress: bool) -> SearchOutcome:
    if not progress:
        return run_search(config, base, on_match)
    with search_progress(config.max_search) as advance:
        return run_search(config, base, on_match, advance)


@click.command(
    cls=SearchCommand,
    context_settings={"help_option_names": ["-h", "--help"], "auto_envvar_prefix": "HASH_SEARCH"},
)
@click.argument("hexdigits")
@click.option(
    "--bits",
    "-b",
    type=click.IntRange(MIN_SHIFT, MAX_SHIFT),
    default=DEFAULT_SHIFT,
    show_default=True,
    help="Search 2**BITS - 1 candidates.",
)
@click.option(
    "--digest",
    "-d",
    type=click.Choice(DigestAlgorithm.names(), case_sensitive=False),
    default=DigestAlgorithm.MD5.value,
    show_default=True,
    help="Digest algorithm.",
)
@click.option("--list", "-l", "list_all", is_flag=True, help="List every match instead of writing a matching file.")
@click.option("--workers", "-j", type=click.IntRange(min=1), default=None, help="Worker threads [default: CPU count].")
@click.option(
    "--partition",
    "-p",
    "strategy",
    type=click.Choice([s.value for s in PartitionStrategy]),
    default=PartitionStrategy.BLOCK.value,
    show_default=True,
    help="How the search space is split between workers.",
)
@click.option(
    "--encoding",
    "-e",
    type=click.Choice([e.value for e in CandidateEncoding]),
    default=CandidateEncoding.DECIMAL.value,
    show_default=True,
    help="Suffix format: decimal text, or 4 raw little-endian bytes (BITS <= 32).",
)
@click.option("--progress", is_flag=True, help="Show a progress bar on stderr while searching.")
@click.option("--verbose", "-v", count=True, help="Log more (-vv for debug).")
@click.pass_context
def cli(
    ctx: click.Context,
    hexdigits: str,
    bits: int,
    digest: str,
    list_all: bool,
    workers: int | None,
    strategy: str,
    encoding: str,
    progress: bool,
    verbose: int,
):
    """Append a short suffix to stdin so its hash starts with HEXDIGITS.

    The original bytes and the suffix are written to stdout. With --list,
    every matching suffix is listed instead. An odd number of hex digits
    matches on the high nibble of the last byte.
    """
    configure_logging(verbose)

    try:
        config = SearchConfig.create(
            hexdigits,
            digest=digest,
            shift=bits,
            list_all=list_all,
            workers=workers,
            strategy=strategy,
            encoding=encoding,
        )
    except ConfigurationError as e:
        raise usage_error(ctx, str(e)) from e

    stdin = click.get_binary_stream("stdin")
    stdout = click.get_binary_stream("stdout")
    first_match = config.mode is SearchMode.FIRST_MATCH

    base = read_input(stdin, config, echo=stdout if first_match else None)

    click.echo(f"beginning search (original hash = {hex_digest(base.peek())})", err=True)
    click.echo(f"searching 0 to {c_hex(config.max_search)} ... ", err=True, nl=progress)

    on_match = write_suffix(stdout) if first_match else write_listing(stdout, config.encoding)
    outcome = search(config, base, on_match, progress)

    if first_match and outcome.winner is None:
        click.echo("no match found.", err=True)
    elif not first_match:
        click.echo(f"done, {outcome.match_count} matches.", err=True)

    ctx.exit(outcome.exit_code)


if __name__ == "__main__":
    cli()
