"""
Issue API Routes.

All endpoints share the path /api/issues/{project}; the HTTP verb selects
the operation. PUT and DELETE name their target with ``_id`` in the body.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from ..db.base import get_db
from .errors import IssueTrackerError
from .services import IssueService
from .store import SQLAlchemyIssueStore

router = APIRouter(prefix="/api/issues", tags=["issues"])


def get_issue_service(db: Session = Depends(get_db)) -> IssueService:
    """Build an IssueService over the request's database session."""
    return IssueService(SQLAlchemyIssueStore(db))


def _http_error(exc: IssueTrackerError) -> HTTPException:
    return HTTPException(status_code=exc.status_code, detail=exc.to_dict())


@router.get(
    "/{project}",
    responses={400: {"description": "Invalid _id or open filter"}},
)
def list_issues(
    project: str,
    request: Request,
    service: IssueService = Depends(get_issue_service),
) -> List[Dict[str, Any]]:
    """List a project's issues, most recently updated first.

    Text fields, ``open`` and ``_id`` may be passed as query parameters to
    filter on them.
    """
    try:
        return service.list_issues(project, dict(request.query_params))
    except IssueTrackerError as exc:
        raise _http_error(exc) from exc


@router.post(
    "/{project}",
    status_code=201,
    responses={
        201: {"description": "Issue created"},
        400: {"description": "Required field(s) missing"},
    },
)
def create_issue(
    project: str,
    body: Optional[Dict[str, Any]] = Body(None),
    service: IssueService = Depends(get_issue_service),
) -> Dict[str, Any]:
    """Report a new issue in ``project``."""
    try:
        return service.create_issue(project, body or {})
    except IssueTrackerError as exc:
        raise _http_error(exc) from exc


@router.put(
    "/{project}",
    responses={
        400: {"description": "Missing or invalid _id, or no update field(s) sent"},
        404: {"description": "No issue with this _id in the project"},
    },
)
def update_issue(
    project: str,
    body: Optional[Dict[str, Any]] = Body(None),
    service: IssueService = Depends(get_issue_service),
) -> Dict[str, Any]:
    """Update the issue named by ``_id``; empty fields are left untouched."""
    try:
        issue_id = service.update_issue(project, body or {})
    except IssueTrackerError as exc:
        raise _http_error(exc) from exc

    return {"result": "successfully updated", "_id": issue_id}


@router.delete(
    "/{project}",
    responses={
        400: {"description": "Missing or invalid _id"},
        404: {"description": "No issue with this _id in the project"},
    },
)
def delete_issue(
    project: str,
    body: Optional[Dict[str, Any]] = Body(None),
    service: IssueService = Depends(get_issue_service),
) -> Dict[str, Any]:
    """Delete the issue named by ``_id``."""
    try:
        issue_id = service.delete_issue(project, body or {})
    except IssueTrackerError as exc:
        raise _http_error(exc) from exc

    return {"result": "successfully deleted", "_id": issue_id}
