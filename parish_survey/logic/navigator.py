"""Linear page state machine for the survey.

The navigator owns no state of its own: it drives a `SurveySession` through
the page list, consulting the validator before every forward move and the
submitter when the terminal page is reached. Transitions are strictly
`index+1` / `index-1`; the age-section show/hide is cosmetic and never
branches the page sequence.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional, Sequence

from parish_survey.logic.draft_store import DraftStore
from parish_survey.logic.field_collector import collect_page, collect_value, merge_answers
from parish_survey.logic.submitter import Submitter
from parish_survey.logic.validation import ValidationResult, validate_page
from parish_survey.logic.visibility_rules import AGE_FIELD, visible_age_section
from parish_survey.models.page import PageSchema
from parish_survey.models.session import SurveySession

logger = logging.getLogger(__name__)

Validator = Callable[[PageSchema, Mapping[str, Any], Optional[str]], ValidationResult]


def restore_session(session_id: str, draft_store: DraftStore, page_count: int) -> SurveySession:
    """Build a session from the persisted draft and page index."""
    answers = draft_store.load()
    index = draft_store.load_page()
    if index is None or not 0 <= index < page_count:
        if index is not None:
            logger.warning("draft_page_out_of_range session=%s index=%s", session_id, index)
        index = 0
    return SurveySession(session_id=session_id, current_page=index, answers=answers)


class Navigator:
    def __init__(
        self,
        pages: Sequence[PageSchema],
        session: SurveySession,
        draft_store: DraftStore,
        submitter: Submitter,
        validator: Validator = validate_page,
    ) -> None:
        if len(pages) < 2:
            raise ValueError("a survey needs at least two pages")
        self.pages = list(pages)
        self.session = session
        self.draft_store = draft_store
        self.submitter = submitter
        self.validator = validator
        self._sections = {s for p in self.pages for s in p.age_sections}
        self._refresh_derived()

    @property
    def last_index(self) -> int:
        return len(self.pages) - 1

    @property
    def current_page(self) -> PageSchema:
        return self.pages[self.session.current_page]

    @property
    def is_terminal(self) -> bool:
        return self.session.current_page == self.last_index

    def progress(self) -> float:
        """Progress as a percentage of the way from the first to the last page."""
        return self.session.current_page / self.last_index * 100

    def visible_section(self) -> Optional[str]:
        return visible_age_section(self.session.answers, self._sections)

    def _refresh_derived(self) -> None:
        self.session.progress = self.progress()
        self.session.visible_section = self.visible_section()

    def _show(self, index: int) -> None:
        self.session.current_page = index
        self.session.errors = {}
        self.session.scroll_to_top = True
        self._refresh_derived()
        self.draft_store.save_page(index)

    def advance(self, values: Mapping[str, Any]) -> bool:
        """Validate the visible page and move forward one page.

        On validation failure nothing is collected, the index is unchanged and
        the failing fields are annotated in `session.errors`. On the terminal
        page nothing is collected or saved.
        """
        if self.is_terminal:
            self.session.errors = {}
            return False

        page = self.current_page
        section = self._section_for(values)
        result = self.validator(page, values, section)
        if not result.ok:
            self.session.errors = dict(result.errors)
            logger.info(
                "survey_advance_blocked session=%s page=%s errors=%s",
                self.session.session_id,
                page.key,
                sorted(result.errors),
            )
            return False

        merge_answers(self.session.answers, collect_page(page, values))
        self.draft_store.save(self.session.answers)
        self._show(self.session.current_page + 1)
        logger.info(
            "survey_advance session=%s page=%s index=%s",
            self.session.session_id,
            self.current_page.key,
            self.session.current_page,
        )
        if self.is_terminal:
            self.submitter.submit(self.session.answers)
        return True

    def retreat(self) -> bool:
        """Move back one page; always permitted, never validates."""
        if self.session.current_page == 0:
            return False
        self._show(self.session.current_page - 1)
        logger.info(
            "survey_retreat session=%s page=%s index=%s",
            self.session.session_id,
            self.current_page.key,
            self.session.current_page,
        )
        return True

    def change_field(self, field_id: str, raw: Any) -> bool:
        """Record a single field change on the visible page and persist the draft.

        Returns False when the field is not on the visible page.
        """
        field = self.current_page.field(field_id)
        if field is None:
            logger.info(
                "survey_field_unknown session=%s page=%s field=%s",
                self.session.session_id,
                self.current_page.key,
                field_id,
            )
            return False
        value = collect_value(field, raw)
        if value is None:
            self.session.answers.pop(field_id, None)
        else:
            self.session.answers[field_id] = value
        self.session.errors.pop(field_id, None)
        self.draft_store.save(self.session.answers)
        if field_id == AGE_FIELD:
            self._refresh_derived()
        return True

    def restart(self) -> None:
        """Discard the draft and start over from the first page."""
        self.draft_store.clear()
        self.session.answers = {}
        self.session.current_page = 0
        self.session.errors = {}
        self.session.scroll_to_top = True
        self._refresh_derived()
        logger.info("survey_restart session=%s", self.session.session_id)

    def _section_for(self, values: Mapping[str, Any]) -> Optional[str]:
        # An age choice on the same page governs that page's sections
        if AGE_FIELD in values and self.current_page.field(AGE_FIELD) is not None:
            posted = collect_value(self.current_page.field(AGE_FIELD), values.get(AGE_FIELD))
            merged = {**self.session.answers}
            if posted is not None:
                merged[AGE_FIELD] = posted
            return visible_age_section(merged, self._sections)
        return self.visible_section()


__all__ = ["Validator", "Navigator", "restore_session"]
