"""Survey endpoints.

Implements:
- GET   /survey                    current page view
- POST  /survey/next               validate the visible page and advance
- POST  /survey/back               go back one page
- PATCH /survey/fields/{field_id}  auto-save one field change
- POST  /survey/restart            discard the draft and start over

The respondent's session is identified by the `survey_session` cookie, issued
on the first request that lacks one. A blocked advance is not an HTTP error:
the response carries `moved: false` and the field annotations. Reaching the
thank-you page and restarting release the live session; a later request
rebuilds it from the draft.
"""

from __future__ import annotations

import logging
import uuid

from fastapi import APIRouter, HTTPException, Request, Response

from parish_survey.http.problem import problem
from parish_survey.logic.navigator import Navigator
from parish_survey.logic.page_view import assemble_page_view
from parish_survey.models.api import FieldChangeModel, NavigationResult, PageSubmitModel, PageView
from parish_survey.services import Services

router = APIRouter()
logger = logging.getLogger(__name__)

SESSION_COOKIE = "survey_session"


def _services(request: Request) -> Services:
    return request.app.state.services


def _navigator(request: Request, response: Response) -> Navigator:
    session_id = request.cookies.get(SESSION_COOKIE)
    if not session_id:
        session_id = str(uuid.uuid4())
        logger.info("survey_session_issued session=%s", session_id)
    # Refresh on every response so the cookie follows the session's lifetime
    response.set_cookie(SESSION_COOKIE, session_id, httponly=True, samesite="lax")
    return _services(request).navigator(session_id)


@router.get("/survey", summary="Current survey page", response_model=PageView)
def get_page(request: Request, response: Response) -> PageView:
    navigator = _navigator(request, response)
    return assemble_page_view(navigator)


@router.post("/survey/next", summary="Advance to the next page", response_model=NavigationResult)
def next_page(payload: PageSubmitModel, request: Request, response: Response) -> NavigationResult:
    navigator = _navigator(request, response)
    moved = navigator.advance(payload.values)
    result = NavigationResult(moved=moved, view=assemble_page_view(navigator))
    if moved and navigator.is_terminal:
        _services(request).release(navigator.session.session_id)
    return result


@router.post("/survey/back", summary="Return to the previous page", response_model=NavigationResult)
def previous_page(request: Request, response: Response) -> NavigationResult:
    navigator = _navigator(request, response)
    moved = navigator.retreat()
    return NavigationResult(moved=moved, view=assemble_page_view(navigator))


@router.patch("/survey/fields/{field_id}", summary="Auto-save a field change", response_model=PageView)
def change_field(field_id: str, payload: FieldChangeModel, request: Request, response: Response) -> PageView:
    navigator = _navigator(request, response)
    if not navigator.change_field(field_id, payload.value):
        raise HTTPException(
            status_code=404,
            detail=problem(404, "Not Found", f"field {field_id} is not on the current page"),
        )
    return assemble_page_view(navigator, consume_scroll=False)


@router.post("/survey/restart", summary="Discard the draft and restart", response_model=PageView)
def restart(request: Request, response: Response) -> PageView:
    navigator = _navigator(request, response)
    navigator.restart()
    view = assemble_page_view(navigator)
    _services(request).release(navigator.session.session_id)
    return view


__all__ = ["router", "SESSION_COOKIE"]
