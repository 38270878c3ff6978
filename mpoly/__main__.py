"""CLI entry point.

Usage:
    python -m mpoly <command> [OPTIONS]

Commands:
    serve           Run the API with uvicorn
    seed            Write demo data files
    hash-password   Print a bcrypt hash for a password
"""

from mpoly.cli import cli


def main() -> None:
    """Entry point for ``python -m mpoly``."""
    cli()


if __name__ == "__main__":
    main()
