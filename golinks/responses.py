"""Error responses and the exception handlers that produce them."""

import logging
from http import HTTPStatus

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger("golinks")

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def other_methods(*allowed: str) -> list[str]:
    return [m for m in ALL_METHODS if m not in allowed]


def method_not_allowed(*allowed: str) -> HTTPException:
    return HTTPException(status_code=405, detail="Method not allowed", headers={"Allow": ", ".join(allowed)})


def internal_error(detail: str = "Internal Server Error") -> HTTPException:
    return HTTPException(status_code=500, detail=detail)


def error_body(status_code: int, message: str | None = None) -> dict:
    phrase = HTTPStatus(status_code).phrase
    return {"error": phrase, "message": message or phrase}


def _is_api(request: Request) -> bool:
    return request.url.path.startswith("/api/")


def _render(request: Request, status_code: int, message: str | None, headers=None):
    if _is_api(request):
        return JSONResponse(error_body(status_code, message), status_code=status_code, headers=headers)
    return PlainTextResponse(message or HTTPStatus(status_code).phrase, status_code=status_code, headers=headers)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return _render(request, exc.status_code, exc.detail, getattr(exc, "headers", None))


async def request_validation_handler(request: Request, exc: RequestValidationError):
    # undecodable bodies and non-integer ids are input errors, not rule violations
    sources = {(err.get("loc") or ("",))[0] for err in exc.errors()}
    if "path" in sources:
        message = "Invalid link ID"
    elif "body" in sources:
        message = "Invalid request body"
    else:
        message = "Invalid request"
    logger.debug("rejected %s %s: %s", request.method, request.url.path, exc.errors())
    return _render(request, 400, message)


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _render(request, 500, "Internal Server Error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
