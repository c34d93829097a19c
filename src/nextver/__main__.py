"""Entry point for ``python -m nextver``."""

from nextver.cli.app import app

if __name__ == "__main__":
    app()
