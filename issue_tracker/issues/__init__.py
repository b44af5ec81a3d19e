"""
Project-scoped issues: validation, normalization, storage and routes.
"""

from .errors import IssueTrackerError, NotFoundError, StorageError, ValidationError
from .identifiers import is_valid_id, new_id
from .normalize import (
    MUTABLE_FIELDS,
    build_filter,
    build_issue,
    build_update,
    parse_open,
    require_id,
)
from .schemas import IssueChanges, IssueCreate
from .services import IssueService
from .store import IssueStore, SQLAlchemyIssueStore

__all__ = [
    "IssueChanges",
    "IssueCreate",
    "IssueService",
    "IssueStore",
    "IssueTrackerError",
    "MUTABLE_FIELDS",
    "NotFoundError",
    "SQLAlchemyIssueStore",
    "StorageError",
    "ValidationError",
    "build_filter",
    "build_issue",
    "build_update",
    "is_valid_id",
    "new_id",
    "parse_open",
    "require_id",
]
