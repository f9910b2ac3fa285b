"""
Database module - async MongoDB client ownership.
"""

from common.database.mongodb import (
    MongoDB,
    set_main_database,
    get_main_database,
)

__all__ = [
    "MongoDB",
    "set_main_database",
    "get_main_database",
]
