"""
Exception handlers

- PrintShipError -> {error, code} with the error's status code
- Request body validation -> 400 {error} naming the first bad field
- Anything else -> logged with traceback, generic 500 (full message in DEBUG)
"""
import logging
import traceback

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from printship.core.config import settings
from printship.core.exceptions import PrintShipError

logger = logging.getLogger(__name__)


async def printship_error_handler(request: Request, exc: PrintShipError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"[ERROR] {request.method} {request.url.path}: {exc!r} {exc.details}")
    else:
        logger.info(f"[ERROR] {request.method} {request.url.path}: {exc!r}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message, "code": exc.code},
    )


def describe_validation_error(errors) -> str:
    """'deliveryAddress.pincode: Field required' for the first error."""
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid value")
    return f"{location}: {message}" if location else message


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    error = describe_validation_error(exc.errors())
    logger.info(f"[ERROR] {request.method} {request.url.path}: {error}")
    return JSONResponse(status_code=400, content={"error": error})


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled exception: {type(exc).__name__}: {exc}\n"
        f"Path: {request.url.path}\n"
        f"Method: {request.method}\n"
        f"Traceback:\n{''.join(traceback.format_exception(type(exc), exc, exc.__traceback__))}"
    )
    message = str(exc) if settings.DEBUG else "Internal server error"
    return JSONResponse(status_code=500, content={"error": message})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PrintShipError, printship_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
