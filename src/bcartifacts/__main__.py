"""
Main entry point for python -m bcartifacts.
"""

from bcartifacts.cli import app


def main() -> None:
    app()


if __name__ == "__main__":
    main()
