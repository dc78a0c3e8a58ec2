"""Request pipeline: error stage, request logging, JSON content-type enforcement.

Typed failures are turned into responses by exception handlers; anything else
reaches the outermost stage, is logged in full and answered with a generic 500.
"""

import logging
import time

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse

from nodetree.errors import BusinessRuleError, InvalidInputError, NotFoundError
from nodetree.validation import field_errors

logger = logging.getLogger(__name__)

_BODY_METHODS = {"POST", "PUT", "PATCH"}


def wants_json(request: Request) -> bool:
    """Clients that send no Accept header, */* or a JSON type get JSON errors."""
    accept = request.headers.get("accept", "").lower()
    return not accept or "*/*" in accept or "json" in accept


def error_response(request: Request, status_code: int, message: str) -> Response:
    if wants_json(request):
        return JSONResponse(status_code=status_code, content={"error": message})
    return PlainTextResponse(message, status_code=status_code)


def _is_json(content_type: str) -> bool:
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type == "application/json" or media_type.endswith("+json")


# -- Middleware stages --


async def catch_unhandled_errors(request: Request, call_next) -> Response:
    try:
        return await call_next(request)
    except Exception:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return error_response(
            request, status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error"
        )


async def log_requests(request: Request, call_next) -> Response:
    started = time.perf_counter()
    response = await call_next(request)
    logger.info(
        "%s %s -> %d (%.1f ms)",
        request.method,
        request.url.path,
        response.status_code,
        (time.perf_counter() - started) * 1000,
    )
    return response


async def require_json_body(request: Request, call_next) -> Response:
    if request.method in _BODY_METHODS and not _is_json(request.headers.get("content-type", "")):
        return error_response(
            request,
            status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            "Content-Type must be application/json",
        )
    return await call_next(request)


# -- Exception handlers --


async def handle_invalid_input(request: Request, exc: InvalidInputError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"errors": [error.to_dict() for error in exc.errors]},
    )


async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = field_errors(list(exc.errors()))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"errors": [error.to_dict() for error in errors]},
    )


async def handle_not_found(request: Request, exc: NotFoundError) -> Response:
    return error_response(request, status.HTTP_404_NOT_FOUND, str(exc))


async def handle_business_rule(request: Request, exc: BusinessRuleError) -> Response:
    return error_response(request, status.HTTP_409_CONFLICT, str(exc))


def install(app: FastAPI) -> None:
    """Register exception handlers and middleware. The last stage added runs first."""
    app.add_exception_handler(InvalidInputError, handle_invalid_input)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(NotFoundError, handle_not_found)
    app.add_exception_handler(BusinessRuleError, handle_business_rule)

    app.middleware("http")(require_json_body)
    app.middleware("http")(log_requests)
    app.middleware("http")(catch_unhandled_errors)
