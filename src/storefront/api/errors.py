"""Translate domain exceptions into HTTP responses.

Every error body has the same shape::

    {"error": "<kind>", "messages": {"<field>": ["<message>", ...]}}
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import InvalidOperationError, ObjectNotFoundError, ValidationError
from sqlalchemy.exc import IntegrityError

from storefront.shared.errors import ConflictError, ForbiddenError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def _messages(exc) -> dict:
    messages = getattr(exc, "messages", None)
    if isinstance(messages, dict):
        return messages
    if not exc.args:
        return {"_entity": [exc.__class__.__name__]}

    detail = exc.args[0]
    if isinstance(detail, dict):
        return detail
    return {"_entity": [str(detail)]}


def error_response(status_code: int, kind: str, messages: dict) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": kind, "messages": messages})


def register_error_handlers(app: FastAPI) -> None:
    """Map storefront and framework exceptions to status codes on ``app``."""

    @app.exception_handler(ObjectNotFoundError)
    async def not_found(request: Request, exc: ObjectNotFoundError):
        return error_response(404, "NotFound", _messages(exc))

    @app.exception_handler(ValidationError)
    async def invalid_request(request: Request, exc: ValidationError):
        return error_response(400, "InvalidRequest", _messages(exc))

    @app.exception_handler(InvalidOperationError)
    async def invalid_operation(request: Request, exc: InvalidOperationError):
        return error_response(400, "InvalidRequest", _messages(exc))

    @app.exception_handler(ConflictError)
    async def conflict(request: Request, exc: ConflictError):
        return error_response(409, "Conflict", exc.messages)

    @app.exception_handler(IntegrityError)
    async def integrity_conflict(request: Request, exc: IntegrityError):
        logger.warning("Storage integrity violation", path=request.url.path, error=str(exc.orig))
        return error_response(409, "Conflict", {"_entity": ["Resource already exists or is still referenced"]})

    @app.exception_handler(ForbiddenError)
    async def forbidden(request: Request, exc: ForbiddenError):
        return error_response(403, "Forbidden", exc.messages)
