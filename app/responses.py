# app/responses.py
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from .log import log_response


def success_response(
    request: Request,
    message: str = "Request Successful",
    status_code: int = 200,
    **extras: Any,
) -> JSONResponse:
    log_response(request, message, status_code)
    return JSONResponse(status_code=status_code, content={"message": message, **extras})


def client_error(
    request: Request,
    message: str = "Invalid Request",
    status_code: int = 400,
) -> JSONResponse:
    log_response(request, message, status_code)
    return JSONResponse(status_code=status_code, content={"error": message})


def server_error(
    request: Request,
    message: str = "Server Side Error",
    status_code: int = 500,
) -> JSONResponse:
    # logged as a generic "Server Side Error" whatever the client-facing message
    log_response(request, "Server Side Error", status_code)
    return JSONResponse(status_code=status_code, content={"error": message})
