"""Entry point for `hash-search` and `python -m hash_search`."""
from hash_search.cli import cli


def main():
    cli(prog_name="hash-search")


if __name__ == "__main__":
    main()
