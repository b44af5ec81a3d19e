"""
Issue storage.

``IssueStore`` is the persistence contract the service layer depends on.
Every operation is scoped by project name; how projects are laid out in the
database is the implementation's business.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import structlog
from sqlalchemy import delete, desc, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..db.models import IssueModel
from .errors import StorageError
from .identifiers import new_id

logger = structlog.get_logger()


class IssueStore(ABC):
    """Project-scoped issue persistence."""

    @abstractmethod
    def find_many(self, project: str, conditions: Dict[str, Any]) -> List[IssueModel]:
        """Return issues matching every condition, newest ``updated_on`` first."""

    @abstractmethod
    def insert_one(self, project: str, record: Dict[str, Any]) -> IssueModel:
        """Persist a new issue and return it with its assigned id."""

    @abstractmethod
    def find_one_and_update(
        self, project: str, issue_id: str, changes: Dict[str, Any]
    ) -> Optional[IssueModel]:
        """Apply ``changes`` to one issue; return it, or None if nothing matched."""

    @abstractmethod
    def delete_one(self, project: str, issue_id: str) -> int:
        """Remove one issue and return the number of records deleted."""


class SQLAlchemyIssueStore(IssueStore):
    """Issue store backed by the shared ``issues`` table."""

    def __init__(self, db: Session):
        self.db = db

    def _fail(self, operation: str, project: str, exc: SQLAlchemyError) -> StorageError:
        self.db.rollback()
        logger.error(
            "Issue storage operation failed",
            operation=operation,
            project=project,
            error=str(exc),
        )
        return StorageError()

    @staticmethod
    def _column(field: str):
        column = IssueModel.__table__.columns.get(field)
        if column is None or field == "project":
            raise ValueError(f"Unknown issue field: {field}")
        return column

    def find_many(self, project: str, conditions: Dict[str, Any]) -> List[IssueModel]:
        query = self.db.query(IssueModel).filter(IssueModel.project == project)
        for field, value in conditions.items():
            query = query.filter(self._column(field) == value)

        try:
            return query.order_by(desc(IssueModel.updated_on)).all()
        except SQLAlchemyError as exc:
            raise self._fail("find_many", project, exc) from exc

    def insert_one(self, project: str, record: Dict[str, Any]) -> IssueModel:
        for field in record:
            self._column(field)
        db_issue = IssueModel(id=new_id(), project=project, **record)

        try:
            self.db.add(db_issue)
            self.db.commit()
            self.db.refresh(db_issue)
        except SQLAlchemyError as exc:
            raise self._fail("insert_one", project, exc) from exc
        return db_issue

    def find_one_and_update(
        self, project: str, issue_id: str, changes: Dict[str, Any]
    ) -> Optional[IssueModel]:
        for field in changes:
            if field == "id":
                raise ValueError("Issue ids are immutable")
            self._column(field)

        stmt = (
            update(IssueModel)
            .where(IssueModel.project == project, IssueModel.id == issue_id)
            .values(**changes)
        )
        try:
            result = self.db.execute(stmt)
            self.db.commit()
            if result.rowcount == 0:
                return None
            return self.db.get(IssueModel, issue_id)
        except SQLAlchemyError as exc:
            raise self._fail("find_one_and_update", project, exc) from exc

    def delete_one(self, project: str, issue_id: str) -> int:
        stmt = delete(IssueModel).where(
            IssueModel.project == project, IssueModel.id == issue_id
        )
        try:
            result = self.db.execute(stmt)
            self.db.commit()
        except SQLAlchemyError as exc:
            raise self._fail("delete_one", project, exc) from exc
        return result.rowcount
