"""
Field normalization for issue requests.

Turns raw query-string parameters and JSON bodies into storage filters,
validated creation payloads and update sets. Across all of them an empty
string means "not provided": it never filters for, nor writes, an empty
value.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Tuple

from pydantic import ValidationError as PydanticValidationError

from .errors import ValidationError
from .identifiers import is_valid_id
from .schemas import IssueChanges, IssueCreate

ID_FIELD = "_id"
REQUIRED_FIELDS = ("issue_title", "issue_text", "created_by")
TEXT_FIELDS = REQUIRED_FIELDS + ("assigned_to", "status_text")
MUTABLE_FIELDS = TEXT_FIELDS + ("open",)


def utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


def _is_blank(value: Any) -> bool:
    return value is None or value == ""


def _error_fields(exc: PydanticValidationError) -> List[str]:
    return sorted({str(err["loc"][0]) for err in exc.errors() if err["loc"]})


def parse_open(value: Any) -> bool:
    """Normalize an ``open`` filter value.

    A bare ``?open`` (empty string) asks for open issues.
    """
    if value is True or value == "" or value == "true":
        return True
    if value is False or value == "false":
        return False
    raise ValidationError("invalid open value", open=str(value))


def require_id(payload: Mapping[str, Any]) -> str:
    """Return the canonical ``_id`` from ``payload`` or raise ValidationError."""
    issue_id = payload.get(ID_FIELD)
    if _is_blank(issue_id):
        raise ValidationError("missing _id")
    if not is_valid_id(issue_id):
        raise ValidationError("invalid _id", issue_id=str(issue_id))
    return issue_id


def build_filter(params: Mapping[str, Any]) -> Dict[str, Any]:
    """Build storage equality conditions from list query parameters.

    Keys are storage field names (``id`` for the identifier). Parameters
    that name nothing filterable are ignored.
    """
    conditions: Dict[str, Any] = {}
    for key, value in params.items():
        if key == "open":
            conditions["open"] = parse_open(value)
        elif _is_blank(value):
            continue
        elif key == ID_FIELD:
            conditions["id"] = require_id(params)
        elif key in TEXT_FIELDS:
            conditions[key] = value
    return conditions


def build_issue(body: Mapping[str, Any]) -> IssueCreate:
    """Validate a creation body, applying defaults for optional fields."""
    provided = {k: v for k, v in body.items() if not _is_blank(v)}
    missing = [name for name in REQUIRED_FIELDS if name not in provided]
    if missing:
        raise ValidationError("required field(s) missing", fields=missing)

    try:
        return IssueCreate.model_validate(provided)
    except PydanticValidationError as exc:
        raise ValidationError(
            "invalid field(s)", fields=_error_fields(exc)
        ) from exc


def build_update(body: Mapping[str, Any]) -> Tuple[str, Dict[str, Any]]:
    """Split an update body into the target id and the set of changes.

    The ``_id`` is checked first, then the allow-listed, non-empty fields.
    ``updated_on`` is always part of an accepted change set.
    """
    issue_id = require_id(body)

    provided = {
        k: v for k, v in body.items() if k in MUTABLE_FIELDS and not _is_blank(v)
    }
    if not provided:
        raise ValidationError("no update field(s) sent", issue_id=issue_id)

    try:
        changes = IssueChanges.model_validate(provided).model_dump(exclude_unset=True)
    except PydanticValidationError as exc:
        raise ValidationError(
            "invalid update field(s)", issue_id=issue_id, fields=_error_fields(exc)
        ) from exc

    changes["updated_on"] = utc_now()
    return issue_id, changes
