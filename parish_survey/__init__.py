"""FastAPI application package for the Parish Survey service.

This package exposes a small FastAPI application factory. It wires only
cross-cutting middleware (request-id and CORS), the problem+json error
handlers and the API routers. Business logic lives in `parish_survey/logic/`
and route handlers in `parish_survey/routes/`.
"""

from __future__ import annotations

from parish_survey.main import create_app

__all__ = ["create_app"]
