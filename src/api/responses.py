"""JSON envelope shared by the public and admin APIs."""

from typing import Any

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import HTTPException, RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel


def api_response(data: Any, status_code: int = 200) -> JSONResponse:
    """Success envelope: ``{"success": true, "data": ...}``."""
    if isinstance(data, BaseModel):
        data = data.model_dump(mode="json", by_alias=True)
    return JSONResponse(
        {"success": True, "data": jsonable_encoder(data)},
        status_code=status_code,
    )


def error_response(message: str, status_code: int = 400) -> JSONResponse:
    """Failure envelope: ``{"success": false, "error": ...}``."""
    return JSONResponse({"success": False, "error": message}, status_code=status_code)


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    response = error_response(str(exc.detail), exc.status_code)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return error_response("Validation failed", 400)
