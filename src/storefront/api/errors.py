"""Render storefront rejections as ``{"reason", "message", "errors"}`` bodies."""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ValidationError

from storefront.errors import StorefrontError

logger = structlog.get_logger(__name__)


async def storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("request_failed", path=request.url.path, reason=exc.reason, message=exc.message)
    else:
        logger.info("request_rejected", path=request.url.path, reason=exc.reason)

    body = exc.to_dict()
    body["errors"] = {}
    return JSONResponse(status_code=exc.status_code, content=body)


def _as_list(messages) -> list[str]:
    if isinstance(messages, (list, tuple)):
        return [str(message) for message in messages]
    return [str(messages)]


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    logger.info("request_invalid", path=request.url.path, errors=exc.messages)
    return JSONResponse(
        status_code=400,
        content={
            "reason": "validation_error",
            "message": "Request failed validation",
            "errors": {field: _as_list(messages) for field, messages in exc.messages.items()},
        },
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StorefrontError, storefront_error_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
