"""Translate domain errors into HTTP responses."""

import structlog
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.integrations.fastapi import register_exception_handlers

from teffmarket.shared.errors import MarketplaceError

logger = structlog.get_logger(__name__)


async def _marketplace_error(request: Request, exc: MarketplaceError) -> JSONResponse:
    logger.info("Request rejected", path=request.url.path, kind=exc.kind, detail=exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.kind, "detail": exc.message})


async def _invalid_input(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": "InvalidInput", "detail": exc.messages})


async def _invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": "InvalidInput", "detail": jsonable_encoder(exc.errors())})


async def _not_found(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": "NotFound", "detail": str(exc)})


def register_error_handlers(app: FastAPI) -> None:
    """Protean's handlers first, then the marketplace's own on top."""
    register_exception_handlers(app)
    app.add_exception_handler(MarketplaceError, _marketplace_error)
    app.add_exception_handler(ValidationError, _invalid_input)
    app.add_exception_handler(ObjectNotFoundError, _not_found)
    app.add_exception_handler(RequestValidationError, _invalid_request)
