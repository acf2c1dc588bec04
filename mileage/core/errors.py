"""Exception handlers rendering every error as ``{"errors": [...]}``."""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = structlog.get_logger()

VALUE_ERROR_PREFIX = "Value error, "


def humanize_field(name: str) -> str:
    """``start_date_time`` -> ``Start date time``."""
    return name.replace("_", " ").capitalize()


def full_message(error: dict) -> str:
    """Turn one pydantic error into a sentence like ``Title can't be blank``."""
    msg = error.get("msg", "is invalid")
    if msg.startswith(VALUE_ERROR_PREFIX):
        msg = msg[len(VALUE_ERROR_PREFIX):]
    fields = [str(part) for part in error.get("loc", ()) if part != "body" and not isinstance(part, int)]
    # nested payloads ({"meetup": {...}}) report the innermost field
    if len(fields) > 1:
        fields = fields[-1:]
    if not fields or fields[0] in {"meetup", "comment", "profile", "user"}:
        return msg
    return f"{humanize_field(fields[0])} {msg[0].lower()}{msg[1:]}" if msg else humanize_field(fields[0])


def setup_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
        errors = exc.detail if isinstance(exc.detail, list) else [exc.detail]
        return JSONResponse(status_code=exc.status_code, content={"errors": errors}, headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
        messages: list[str] = []
        for error in exc.errors():
            message = full_message(error)
            if message not in messages:
                messages.append(message)
        return JSONResponse(status_code=422, content={"errors": messages})

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "unhandled_exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            exc_info=exc,
        )
        return JSONResponse(status_code=500, content={"errors": ["Internal server error"]})
