"""APIRouter registration for the Parish Survey service."""

from __future__ import annotations

from fastapi import APIRouter

from parish_survey.routes.responses import router as responses_router
from parish_survey.routes.survey import router as survey_router

api_router = APIRouter()
api_router.include_router(survey_router, tags=["Survey"])
api_router.include_router(responses_router, tags=["Responses"])

__all__ = ["api_router"]
