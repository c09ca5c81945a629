"""
Response envelope and exception handlers.

Every response body is ``{success, data?, message?}``; validation failures
add ``errors``.
"""
from typing import Any, Dict, List, Optional
import math

import structlog
from pydantic import BaseModel
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = structlog.get_logger()

NOT_FOUND_MESSAGE = "API endpoint not found"


def success_response(data: Any = None, message: Optional[str] = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": True}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = data
    return body


def pagination(page: int, limit: int, total: int, count: int) -> Dict[str, int]:
    return {
        "current": page,
        "total": math.ceil(total / limit) if limit else 0,
        "count": count,
        "totalRecords": total,
    }


def dump(model: BaseModel) -> Dict[str, Any]:
    return model.model_dump(by_alias=True, mode="json")


def error_body(message: str, errors: Optional[List[str]] = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": False, "message": message}
    if errors:
        body["errors"] = errors
    return body


def format_validation_errors(errors: List[Dict[str, Any]]) -> List[str]:
    """Flatten pydantic errors into ``field: message`` strings."""
    messages = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        msg = str(error.get("msg", "Invalid value")).removeprefix("Value error, ")
        messages.append(f"{'.'.join(loc)}: {msg}" if loc else msg)
    return messages


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    if exc.status_code == 404 and message == "Not Found":
        message = NOT_FOUND_MESSAGE
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(message),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = format_validation_errors(exc.errors())
    logger.info("Request validation failed", path=request.url.path, errors=errors)
    return JSONResponse(
        status_code=400,
        content=error_body("Validation failed", errors),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled exception", path=request.url.path, error=str(exc), exc_info=exc)
    return JSONResponse(status_code=500, content=error_body("Something went wrong!"))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
