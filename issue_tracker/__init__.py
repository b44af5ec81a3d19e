"""
Issue Tracker

A small REST API for reporting and tracking issues per project.
"""

import importlib.metadata

__version__ = importlib.metadata.version("issue-tracker")

from .issues import (
    IssueService,
    IssueStore,
    IssueTrackerError,
    NotFoundError,
    SQLAlchemyIssueStore,
    StorageError,
    ValidationError,
    is_valid_id,
)

__all__ = [
    "IssueService",
    "IssueStore",
    "IssueTrackerError",
    "NotFoundError",
    "SQLAlchemyIssueStore",
    "StorageError",
    "ValidationError",
    "is_valid_id",
]
