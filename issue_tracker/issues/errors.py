"""Error kinds raised by the issue service layer."""

from typing import Any, Dict, Optional


class IssueTrackerError(Exception):
    """Base class for errors reported to API callers."""

    status_code = 500

    def __init__(self, message: str, issue_id: Optional[str] = None, **details: Any):
        self.message = message
        self.issue_id = issue_id
        self.details = details
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.message}
        if self.issue_id is not None:
            body["_id"] = self.issue_id
        body.update(self.details)
        return body


class ValidationError(IssueTrackerError):
    """The request is malformed: missing fields, bad ``_id``, empty update."""

    status_code = 400


class NotFoundError(IssueTrackerError):
    """A well-formed ``_id`` matched no issue in the project."""

    status_code = 404


class StorageError(IssueTrackerError):
    """The database could not complete the operation."""

    status_code = 500

    def __init__(self, message: str = "internal server error", **details: Any):
        super().__init__(message, **details)
