"""
Entry point for ``python -m shopcalendar``.
"""

from .cli.app import app

if __name__ == "__main__":
    app()
