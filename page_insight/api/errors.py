"""JSON error envelope shared by every endpoint.

All error responses, including the framework's own 404/405, have the shape::

    {"statusCode": 400, "message": "invalid JSON body"}
"""

from __future__ import annotations

from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException


def error_response(
    status_code: int, message: str, headers: dict[str, str] | None = None
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"statusCode": status_code, "message": message},
        headers=headers,
    )


def _message(exc: StarletteHTTPException) -> str:
    message = str(exc.detail)
    try:
        # Framework defaults ("Method Not Allowed") are lower-cased to match ours.
        if message == HTTPStatus(exc.status_code).phrase:
            return message.lower()
    except ValueError:
        pass
    return message


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return error_response(exc.status_code, _message(exc), headers=exc.headers)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return error_response(400, "invalid JSON body")


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
