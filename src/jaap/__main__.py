"""Entry point for running jaap as a module."""

from .cli import app


def main() -> None:
    """Main entry point for the jaap CLI application."""
    app()


if __name__ == "__main__":
    main()
