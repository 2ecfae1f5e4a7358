"""FastAPI application factory for the records service."""

from __future__ import annotations

import logging
from typing import Dict, Optional

from fastapi import FastAPI
from starlette.exceptions import HTTPException as StarletteHTTPException
from fastapi.exceptions import RequestValidationError

from records_api.config import AppConfig, load_config
from records_api.errors import RecordsError
from records_api.http.problem import (
    handle_http_exception,
    handle_records_error,
    handle_request_validation_error,
    handle_unexpected_error,
)
from records_api.http.request_id import RequestIdMiddleware
from records_api.logging_setup import configure_logging
from records_api.logic.inmemory_state import RECORDS_STORE
from records_api.routes import api_router

logger = logging.getLogger(__name__)


def create_app(config: Optional[AppConfig] = None, records_store: Optional[Dict[str, Dict]] = None) -> FastAPI:
    configure_logging()
    app = FastAPI(title="Records Service", version="0.1.0")
    app.state.config = config or load_config()
    app.state.records_store = RECORDS_STORE if records_store is None else records_store

    app.add_middleware(RequestIdMiddleware)
    app.add_exception_handler(RecordsError, handle_records_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
    app.include_router(api_router, prefix="/api/v1")

    @app.get("/health", include_in_schema=False)
    def health() -> dict:
        return {"status": "ok"}

    logger.info("app.created", extra={"etag_algorithm": app.state.config.etag.algorithm})
    return app


__all__ = ["create_app"]
