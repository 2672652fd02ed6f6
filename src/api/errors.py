import traceback

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.core.config import settings
from src.core.logging import logger

GENERIC_ERROR_MESSAGE = "An unexpected error occurred"


def _validation_message(exc: RequestValidationError) -> str:
    """Pick the first error and turn it into a sentence a form user can act on."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    err = errors[0]
    if err.get("type") == "json_invalid":
        return "Request body must be valid JSON"
    if err.get("type") == "missing" and tuple(err.get("loc", ())) == ("body",):
        return "Request body is required"
    msg = str(err.get("msg", "Invalid request"))
    return msg.removeprefix("Value error, ")


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    message = _validation_message(exc)
    logger.info(f"Rejected {request.method} {request.url.path}: {message}")
    return JSONResponse(status_code=400, content={"success": False, "error": message})


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404 and exc.detail == "Not Found":
        message = f"Route {request.method} {request.url.path} not found"
    else:
        message = str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": message},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    if settings.is_production:
        return JSONResponse(status_code=500, content={"success": False, "error": GENERIC_ERROR_MESSAGE})
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": str(exc) or GENERIC_ERROR_MESSAGE,
            "stack": "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
