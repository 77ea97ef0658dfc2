"""Database access."""

from inboxlens.db.postgres import Database

__all__ = ["Database"]
