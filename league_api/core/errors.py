"""Domain errors and their mapping onto HTTP responses."""
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from league_api.core.logging import logger


class LeagueError(Exception):
    """Base class for every error the services raise."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(LeagueError):
    """A referenced entity does not exist."""

    status_code = 404


class InvalidInputError(LeagueError):
    """A field is malformed or out of range."""

    status_code = 400


class InvalidStateError(LeagueError):
    """The operation is not legal for the entity's current state."""

    status_code = 400


class InvalidReferenceError(LeagueError):
    """A cross-entity rule is violated."""

    status_code = 400


class StorageError(LeagueError):
    """The underlying query or transaction failed."""

    status_code = 500


class AuthenticationError(LeagueError):
    status_code = 401


def _format_validation_error(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        location = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{location}: {err.get('msg')}" if location else err.get("msg", ""))
    return "; ".join(parts) or "invalid request"


def register_exception_handlers(app: FastAPI):
    @app.exception_handler(LeagueError)
    async def league_error_handler(request: Request, exc: LeagueError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": _format_validation_error(exc)})

    @app.exception_handler(SQLAlchemyError)
    async def storage_error_handler(request: Request, exc: SQLAlchemyError):
        logger.error(f"{request.method} {request.url.path} storage failure: {str(exc)}")
        return JSONResponse(status_code=500, content={"error": "storage failure"})
