"""
Request models for issue intake and updates.

Both models ignore keys they do not declare, so arbitrary client fields can
never reach a persisted record.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr, constr, field_validator


class IssueCreate(BaseModel):
    """Fields a client may supply when reporting an issue."""

    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "example": {
                "issue_title": "Login button unresponsive",
                "issue_text": "Clicking the button on /login does nothing.",
                "created_by": "alice",
                "assigned_to": "bob",
                "status_text": "triage",
            }
        },
    )

    issue_title: constr(strict=True, min_length=1)
    issue_text: constr(strict=True, min_length=1)
    created_by: constr(strict=True, min_length=1)
    assigned_to: StrictStr = ""
    status_text: StrictStr = ""


class IssueChanges(BaseModel):
    """Mutable issue fields accepted by an update.

    Only fields that were actually sent are meant to be applied; dump with
    ``exclude_unset=True``.
    """

    model_config = ConfigDict(extra="ignore")

    issue_title: Optional[StrictStr] = None
    issue_text: Optional[StrictStr] = None
    created_by: Optional[StrictStr] = None
    assigned_to: Optional[StrictStr] = None
    status_text: Optional[StrictStr] = None
    open: Optional[bool] = Field(
        None, description="Boolean, or the text 'true' / 'false'"
    )

    @field_validator("open", mode="before")
    @classmethod
    def parse_open_text(cls, value: Any) -> Any:
        if value == "true":
            return True
        if value == "false":
            return False
        if isinstance(value, bool):
            return value
        raise ValueError("open must be true or false")
