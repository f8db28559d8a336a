from __future__ import annotations

import logging
from typing import Callable, Optional

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from sqlalchemy import text as sql_text
from sqlalchemy.exc import SQLAlchemyError

from parish_survey.config import AppConfig, load_config
from parish_survey.http.problem import (
    handle_http_exception,
    handle_request_validation_error,
    handle_unexpected_error,
)
from parish_survey.http.request_id import RequestIdMiddleware
from parish_survey.logging_setup import configure_logging
from parish_survey.middleware.cors import apply_cors
from parish_survey.routes import api_router
from parish_survey.services import Services, build_services

logger = logging.getLogger(__name__)


def _health_check(services: Services) -> Callable[[], dict]:
    def check() -> dict:
        result: dict = {"status": "ok", "sink": services.sink is not None}
        if services.config.uses_sql:
            from parish_survey.db.base import get_engine

            try:
                with get_engine(services.config.sink.database_url).connect() as conn:
                    conn.execute(sql_text("SELECT 1"))
                result["db"] = True
            except SQLAlchemyError as e:
                logger.error("Health DB check failed", exc_info=True)
                result.update({"status": "degraded", "db": False, "reason": str(e)})
        if services.sink is None:
            result["status"] = "degraded"
        return result

    return check


def create_app(config: Optional[AppConfig] = None, services: Optional[Services] = None) -> FastAPI:
    """Build the FastAPI application.

    Without arguments the configuration is loaded from the environment; tests
    pass a prebuilt `Services` container to swap in fake collaborators.
    """
    configure_logging()
    if services is None:
        services = build_services(config or load_config())

    app = FastAPI(title="Parish Survey")
    app.state.services = services

    app.add_exception_handler(HTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
    app.add_middleware(RequestIdMiddleware)
    apply_cors(app, services.config.cors_origins)

    app.include_router(api_router, prefix="/api/v1")

    health_check = _health_check(services)

    @app.get("/health")
    def health():  # pragma: no cover - trivial
        return health_check()

    logger.info("app_created sink=%s", services.sink is not None)
    return app


# Intentionally do not instantiate the app at import time to prevent side effects.
