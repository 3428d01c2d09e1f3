"""Entry point for llmdoc.

Delegates to the Click command group.
"""

from llmdoc.cli.commands import cli


def main() -> None:
    """Launch the CLI."""
    cli()


if __name__ == "__main__":
    main()
