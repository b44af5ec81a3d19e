"""
SQLAlchemy models for the issue tracker.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import Boolean, Column, DateTime, Index, String, Text

from .base import Base


def _utc_isoformat(value: Optional[datetime]) -> Optional[str]:
    """Render a stored timestamp as ISO-8601 with its UTC offset.

    SQLite hands back naive values; they were written as UTC.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


class IssueModel(Base):
    """SQLAlchemy model for issues.

    All projects share one table; ``project`` is the namespace key and is
    part of every lookup.
    """

    __tablename__ = "issues"

    # Primary fields
    id = Column(String(36), primary_key=True)
    project = Column(Text, nullable=False, index=True)

    # Content
    issue_title = Column(Text, nullable=False)
    issue_text = Column(Text, nullable=False)
    created_by = Column(Text, nullable=False)
    assigned_to = Column(Text, nullable=False, default="")
    status_text = Column(Text, nullable=False, default="")
    open = Column(Boolean, nullable=False, default=True)

    # Timestamps
    created_on = Column(DateTime(timezone=True), nullable=False)
    updated_on = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index("ix_issues_project_updated_on", "project", "updated_on"),
        Index("ix_issues_project_open", "project", "open"),
    )

    def to_dict(self) -> Dict[str, Any]:
        """Convert model to dictionary."""
        return {
            "_id": self.id,
            "issue_title": self.issue_title,
            "issue_text": self.issue_text,
            "created_by": self.created_by,
            "assigned_to": self.assigned_to,
            "status_text": self.status_text,
            "open": self.open,
            "created_on": _utc_isoformat(self.created_on),
            "updated_on": _utc_isoformat(self.updated_on),
        }
