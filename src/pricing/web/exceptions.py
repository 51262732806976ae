"""Error handlers for the REST API.

Every error body has the shape ``{"error": str, "details"?: object}``.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from pricing.application.config.loader import format_json_path
from pricing.domain.exceptions import ConfigError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def error_body(message: str, details: Any = None) -> dict[str, Any]:
    body: dict[str, Any] = {"error": message}
    if details:
        body["details"] = details
    return body


def _body_errors(exc: RequestValidationError) -> list[dict[str, str]]:
    errors = []
    for err in exc.errors():
        loc = tuple(err.get("loc", ()))
        if loc and loc[0] == "body":
            loc = loc[1:]
        errors.append({"field": format_json_path(loc) or "body", "message": err["msg"]})
    return errors


def register_exception_handlers(app: FastAPI) -> None:
    """Register custom exception handlers with the FastAPI app."""

    @app.exception_handler(ValidationError)
    async def validation_error_handler(
        request: Request, exc: ValidationError
    ) -> JSONResponse:
        details = exc.details
        if exc.field and not details:
            details = {"field": exc.field}
        return JSONResponse(status_code=400, content=error_body(exc.message, details))

    @app.exception_handler(ConfigError)
    async def config_error_handler(request: Request, exc: ConfigError) -> JSONResponse:
        # Stored data is broken; an admin has to fix it
        logger.warning(
            f"Pricing config error ({exc.error_type}) on {request.url.path}"
            f" preset={exc.preset_key}: {exc.message}"
        )
        details: dict[str, Any] = {"errorType": exc.error_type}
        if exc.preset_key:
            details["presetKey"] = exc.preset_key
        if exc.details:
            details["errors"] = [
                {"field": d.get("field"), "message": d.get("message")} for d in exc.details
            ]
        return JSONResponse(status_code=400, content=error_body(exc.message, details))

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content=error_body(exc.message))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content=error_body("Invalid request body", {"errors": _body_errors(exc)}),
        )
