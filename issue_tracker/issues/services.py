"""
Issue service layer.

Each method handles one request end to end: normalize the raw input,
gate identifiers, call the store and shape the result. Failures surface as
``ValidationError``, ``NotFoundError`` or ``StorageError``.
"""

from typing import Any, Dict, List, Mapping

import structlog

from .errors import NotFoundError, ValidationError
from .normalize import build_filter, build_issue, build_update, require_id, utc_now
from .store import IssueStore

logger = structlog.get_logger()


class IssueService:
    """Service for managing a project's issues."""

    def __init__(self, store: IssueStore):
        self.store = store

    def list_issues(
        self, project: str, params: Mapping[str, Any]
    ) -> List[Dict[str, Any]]:
        """List issues in ``project`` matching the query parameters."""
        conditions = build_filter(params)
        issues = self.store.find_many(project, conditions)
        return [issue.to_dict() for issue in issues]

    def create_issue(self, project: str, body: Mapping[str, Any]) -> Dict[str, Any]:
        """Create an issue, implicitly creating the project on first use."""
        try:
            issue = build_issue(body)
        except ValidationError as exc:
            logger.warning("Issue rejected", project=project, error=exc.message)
            raise

        now = utc_now()
        record = {
            **issue.model_dump(),
            "open": True,
            "created_on": now,
            "updated_on": now,
        }
        db_issue = self.store.insert_one(project, record)
        logger.info("Issue created", project=project, issue_id=db_issue.id)
        return db_issue.to_dict()

    def update_issue(self, project: str, body: Mapping[str, Any]) -> str:
        """Apply the non-empty fields of ``body`` to the issue it names."""
        try:
            issue_id, changes = build_update(body)
        except ValidationError as exc:
            logger.warning(
                "Issue update rejected",
                project=project,
                issue_id=exc.issue_id,
                error=exc.message,
            )
            raise

        updated = self.store.find_one_and_update(project, issue_id, changes)
        if updated is None:
            raise NotFoundError("could not update", issue_id=issue_id)

        logger.info(
            "Issue updated",
            project=project,
            issue_id=issue_id,
            fields=sorted(k for k in changes if k != "updated_on"),
        )
        return issue_id

    def delete_issue(self, project: str, body: Mapping[str, Any]) -> str:
        """Permanently remove the issue named by ``body['_id']``."""
        issue_id = require_id(body)

        if self.store.delete_one(project, issue_id) != 1:
            raise NotFoundError("could not delete", issue_id=issue_id)

        logger.info("Issue deleted", project=project, issue_id=issue_id)
        return issue_id
