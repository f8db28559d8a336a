"""CORS configuration helper.

The survey pages and the viewer may be served from a static host. With an
explicit origin list, credentials are allowed so the `survey_session` cookie
travels with API calls; the wildcard origin never carries credentials.
"""

from __future__ import annotations

import logging
from typing import Iterable

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

logger = logging.getLogger(__name__)

EXPOSE_HEADERS: list[str] = ["X-Request-Id"]
SURVEY_METHODS: list[str] = ["GET", "POST", "PATCH", "OPTIONS"]


def apply_cors(app: FastAPI, origins: Iterable[str] | None = None) -> None:
    allowed = [o for o in (origins or []) if o] or ["*"]
    wildcard = "*" in allowed
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if wildcard else allowed,
        allow_credentials=not wildcard,
        allow_methods=SURVEY_METHODS,
        allow_headers=["Content-Type", "X-Request-Id"],
        expose_headers=EXPOSE_HEADERS,
    )
    logger.info("cors_configured origins=%s credentials=%s", allowed, not wildcard)


__all__ = ["apply_cors", "EXPOSE_HEADERS", "SURVEY_METHODS"]
