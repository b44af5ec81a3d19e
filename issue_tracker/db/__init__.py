"""
Database package for the issue tracker.
"""

from .base import Base, dispose_engine, get_db, get_engine, init_database
from .models import IssueModel

__all__ = [
    "Base",
    "dispose_engine",
    "get_db",
    "get_engine",
    "init_database",
    "IssueModel",
]
