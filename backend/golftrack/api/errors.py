import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from golftrack.core.errors import INTERNAL_ERROR, GolfTrackError, ValidationError

logger = logging.getLogger(__name__)

# FastAPI prefixes error locations with where the value came from.
_LOCATION_PREFIXES = {"body", "query", "path", "header"}


def error_field(loc) -> str | None:
    parts = [str(p) for p in loc]
    if parts and parts[0] in _LOCATION_PREFIXES:
        parts = parts[1:]
    return ".".join(parts) or None


def validation_error_from(errors: list[dict]) -> ValidationError:
    """Turn pydantic error dicts into a single ValidationError naming the first field."""
    first = errors[0] if errors else {}
    field = error_field(first.get("loc", ()))
    message = first.get("msg", "Input validation failed")
    if field:
        message = f"{field}: {message}"
    return ValidationError(message, field=field)


async def golftrack_error_handler(_request: Request, exc: GolfTrackError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_error_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    err = validation_error_from(exc.errors())
    return JSONResponse(status_code=err.status_code, content=err.to_dict())


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("database error", extra={"path": request.url.path})
    return JSONResponse(
        status_code=500, content={"detail": "Internal server error", "code": INTERNAL_ERROR}
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(GolfTrackError, golftrack_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
