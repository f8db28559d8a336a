"""Response viewer endpoints.

Implements:
- POST /responses/refresh          re-fetch all responses from the sink
- GET  /responses                  header stats and filtered table rows
- GET  /responses/summary          per-question summary of the filtered set
- GET  /responses/{record_id}      grouped details of one response

The first read triggers the one-shot initial fetch. Fetch and initialization
failures are reported inline through `error`, never as HTTP errors.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query, Request
from pydantic import BaseModel, Field

from parish_survey.http.problem import problem
from parish_survey.logic.details import NO_DETAILS_MESSAGE
from parish_survey.logic.filter_engine import ALL
from parish_survey.logic.viewer import ResponseViewer
from parish_survey.models.catalog import SummaryBlock
from parish_survey.models.viewer import DetailGroup, ResponseRow, ViewerStats

router = APIRouter()
logger = logging.getLogger(__name__)


class ResponseListing(BaseModel):
    stats: ViewerStats
    rows: List[ResponseRow] = Field(default_factory=list)
    error: Optional[str] = None
    empty: bool = True
    # True while a fetch started by another request is in flight
    loading: bool = False


class ResponseSummary(BaseModel):
    total: int
    blocks: List[SummaryBlock] = Field(default_factory=list)
    error: Optional[str] = None


class ResponseDetails(BaseModel):
    record_id: str
    groups: List[DetailGroup] = Field(default_factory=list)
    message: Optional[str] = None


def _viewer(request: Request) -> ResponseViewer:
    viewer = request.app.state.services.viewer
    viewer.ensure_loaded()
    return viewer


def _listing(viewer: ResponseViewer, age_group: str, parish_member: str) -> ResponseListing:
    rows = viewer.rows(age_group, parish_member)
    return ResponseListing(
        stats=viewer.stats(),
        rows=rows,
        error=viewer.error,
        empty=not rows,
        loading=viewer.loading,
    )


@router.post("/responses/refresh", summary="Re-fetch responses", response_model=ResponseListing)
def refresh_responses(
    request: Request,
    age_group: str = Query(ALL),
    parish_member: str = Query(ALL),
) -> ResponseListing:
    viewer: ResponseViewer = request.app.state.services.viewer
    viewer.refresh()
    return _listing(viewer, age_group, parish_member)


@router.get("/responses", summary="List responses", response_model=ResponseListing)
def list_responses(
    request: Request,
    age_group: str = Query(ALL),
    parish_member: str = Query(ALL),
) -> ResponseListing:
    return _listing(_viewer(request), age_group, parish_member)


@router.get("/responses/summary", summary="Summarize responses", response_model=ResponseSummary)
def summarize_responses(
    request: Request,
    age_group: str = Query(ALL),
    parish_member: str = Query(ALL),
) -> ResponseSummary:
    viewer = _viewer(request)
    filtered = viewer.filtered(age_group, parish_member)
    return ResponseSummary(
        total=len(filtered),
        blocks=viewer.summary(age_group, parish_member),
        error=viewer.error,
    )


@router.get("/responses/{record_id}", summary="Response details", response_model=ResponseDetails)
def response_details(record_id: str, request: Request) -> ResponseDetails:
    groups = _viewer(request).details(record_id)
    if groups is None:
        raise HTTPException(status_code=404, detail=problem(404, "Not Found", f"response {record_id} not found"))
    return ResponseDetails(
        record_id=record_id,
        groups=groups,
        message=None if groups else NO_DETAILS_MESSAGE,
    )


__all__ = ["router", "ResponseListing", "ResponseSummary", "ResponseDetails"]
