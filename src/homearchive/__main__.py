"""Main entry point for the homearchive package."""

from homearchive.cli import app


def main():
    """Run the command-line interface."""
    app()


if __name__ == "__main__":
    main()
