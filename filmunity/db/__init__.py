"""
Database package.

Lets the rest of the code import `from filmunity.db import get_db, Base`
without reaching into the session module.
"""

from .session import (
    engine,
    AsyncSessionLocal,
    Base,
    get_db,
    init_db,
    drop_db,
    close_db,
)

__all__ = [
    "engine",
    "AsyncSessionLocal",
    "Base",
    "get_db",
    "init_db",
    "drop_db",
    "close_db",
]
