"""Error log endpoints: client error reporting and admin review."""

import secrets

from fastapi import APIRouter, Depends, HTTPException, Request

from app.config import settings
from app.models.quiz import ClientErrorReport
from app.routes.deps import get_error_log
from app.services.error_log import ErrorLog

router = APIRouter(prefix="/api/errors", tags=["errors"])


def _require_admin_secret(request: Request) -> None:
    """Check X-Admin-Secret when an admin secret is configured."""
    if not settings.admin_secret:
        return
    provided = request.headers.get("X-Admin-Secret", "")
    if not secrets.compare_digest(provided.encode(), settings.admin_secret.encode()):
        raise HTTPException(status_code=403, detail="Admin access required")


@router.post("")
async def report_error(body: ClientErrorReport, error_log: ErrorLog = Depends(get_error_log)):
    entry = error_log.log(body.message, context=body.context, source="client", stack=body.stack)
    return {"logged": True, "timestamp": entry["timestamp"]}


@router.get("")
async def list_errors(request: Request, error_log: ErrorLog = Depends(get_error_log)):
    _require_admin_secret(request)
    errors = error_log.get_errors()
    return {"errors": errors, "count": len(errors), "capacity": error_log.capacity}


@router.delete("")
async def clear_errors(request: Request, error_log: ErrorLog = Depends(get_error_log)):
    _require_admin_secret(request)
    error_log.clear()
    return {"cleared": True}
