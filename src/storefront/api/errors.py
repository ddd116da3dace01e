"""Exception-to-HTTP mapping for the storefront API.

Every error body carries a human readable ``message``. Conflicts add a
machine readable ``code`` and, where there is any, structured ``data``.
"""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import (
    ExpectedVersionError,
    InvalidDataError,
    InvalidOperationError,
    InvalidStateError,
    ObjectNotFoundError,
    ValidationError,
)

from storefront.errors import Conflict, InvalidInput, NotFound, Unauthorized
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

SERVER_ERROR = "Server error"


def _body(message: str, **extra: Any) -> dict[str, Any]:
    return {"message": message, **{k: v for k, v in extra.items() if v is not None}}


def _first_message(messages) -> str:
    """Pick a readable summary out of protean's ``{field: [messages]}`` mapping."""
    if isinstance(messages, dict):
        for field, errors in messages.items():
            if errors:
                error = errors[0] if isinstance(errors, list) else errors
                return str(error) if field.startswith("_") else f"{field}: {error}"
    return "Invalid input"


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(InvalidInput)
    async def invalid_input_handler(request: Request, exc: InvalidInput) -> JSONResponse:
        return JSONResponse(status_code=400, content=_body(exc.message, errors=exc.messages))

    @app.exception_handler(ValidationError)
    @app.exception_handler(InvalidDataError)
    async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content=_body(_first_message(exc.messages), errors=exc.messages),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors: dict[str, list[str]] = {}
        for error in exc.errors():
            field = ".".join(str(part) for part in error["loc"] if part not in ("body", "query", "header"))
            errors.setdefault(field or "_request", []).append(error["msg"])
        return JSONResponse(status_code=400, content=_body(_first_message(errors), errors=errors))

    @app.exception_handler(Unauthorized)
    async def unauthorized_handler(request: Request, exc: Unauthorized) -> JSONResponse:
        return JSONResponse(status_code=401, content=_body(exc.message))

    @app.exception_handler(NotFound)
    async def not_found_handler(request: Request, exc: NotFound) -> JSONResponse:
        return JSONResponse(status_code=404, content=_body(exc.message))

    @app.exception_handler(ObjectNotFoundError)
    async def object_not_found_handler(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content=_body("Not found"))

    @app.exception_handler(Conflict)
    async def conflict_handler(request: Request, exc: Conflict) -> JSONResponse:
        return JSONResponse(status_code=409, content=_body(exc.message, code=exc.code, data=exc.data))

    @app.exception_handler(InvalidStateError)
    @app.exception_handler(InvalidOperationError)
    async def invalid_state_handler(request: Request, exc: Exception) -> JSONResponse:
        return JSONResponse(status_code=409, content=_body(str(exc), code=Conflict.code))

    @app.exception_handler(ExpectedVersionError)
    async def version_conflict_handler(request: Request, exc: ExpectedVersionError) -> JSONResponse:
        logger.warning("version_conflict_exhausted", path=request.url.path)
        return JSONResponse(
            status_code=409,
            content=_body("The resource was modified concurrently, please retry", code=Conflict.code),
        )

    @app.exception_handler(Exception)
    async def server_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("unhandled_error", path=request.url.path, method=request.method)
        return JSONResponse(status_code=500, content=_body(SERVER_ERROR))
