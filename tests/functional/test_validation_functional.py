"""Functional tests for per-page validation and age-section visibility."""

from __future__ import annotations

import pytest

from parish_survey.logic.field_collector import collect_page, collect_value
from parish_survey.logic.survey_pages import SURVEY_PAGES
from parish_survey.logic.validation import (
    MSG_CHECKBOX_REQUIRED,
    MSG_INVALID_EMAIL,
    MSG_REQUIRED,
    MSG_SELECT_OPTION,
    validate_page,
)
from parish_survey.logic.visibility_rules import (
    compute_visible_fields,
    visible_age_section,
)

ABOUT_YOU = SURVEY_PAGES[1]
YOUR_STAGE = SURVEY_PAGES[5]
FINAL = SURVEY_PAGES[6]
SECTIONS = {"minor", "young", "adult", "senior"}

VALID_ABOUT_YOU = {
    "full_name": "Jane Doe",
    "email": "jane@example.org",
    "parish_member": "yes",
    "age": "adult",
}


def test_complete_page_passes():
    result = validate_page(ABOUT_YOU, VALID_ABOUT_YOU, "adult")
    assert result.ok
    assert result.errors == {}


@pytest.mark.parametrize("blank", ["", "   ", None])
def test_blank_text_field_is_required(blank):
    values = {**VALID_ABOUT_YOU, "full_name": blank}
    result = validate_page(ABOUT_YOU, values, "adult")
    assert not result.ok
    assert result.errors == {"full_name": MSG_REQUIRED}


def test_email_without_at_sign_is_invalid():
    values = {**VALID_ABOUT_YOU, "email": "jane.example.org"}
    result = validate_page(ABOUT_YOU, values, "adult")
    assert result.errors == {"email": MSG_INVALID_EMAIL}


def test_empty_email_gets_required_message():
    values = {**VALID_ABOUT_YOU, "email": ""}
    assert validate_page(ABOUT_YOU, values, "adult").errors == {"email": MSG_REQUIRED}


def test_email_check_is_intentionally_weak():
    values = {**VALID_ABOUT_YOU, "email": "@"}
    assert validate_page(ABOUT_YOU, values, "adult").ok


def test_radio_group_without_selection_fails():
    values = {k: v for k, v in VALID_ABOUT_YOU.items() if k != "parish_member"}
    result = validate_page(ABOUT_YOU, values, "adult")
    assert result.errors == {"parish_member": MSG_SELECT_OPTION}


def test_optional_field_may_stay_empty():
    values = {**VALID_ABOUT_YOU, "specific_age": ""}
    assert validate_page(ABOUT_YOU, values, "adult").ok


@pytest.mark.parametrize("posted, ok", [("on", True), (True, True), (None, False), (False, False), ("", False)])
def test_required_checkbox_must_be_checked(posted, ok):
    result = validate_page(FINAL, {"consent": posted}, None)
    assert result.ok is ok
    if not ok:
        assert result.errors == {"consent": MSG_CHECKBOX_REQUIRED}


def test_hidden_age_sections_are_not_validated():
    # Only the adult section is visible; other sections' required fields are skipped
    result = validate_page(YOUR_STAGE, {"adult_family": "Weekly family rosary"}, "adult")
    assert result.ok


def test_visible_age_section_required_field_is_validated():
    result = validate_page(YOUR_STAGE, {}, "minor")
    assert not result.ok
    assert set(result.errors) == {"minor_fav", "minor_excitement"}


def test_no_age_selected_hides_every_section():
    assert validate_page(YOUR_STAGE, {}, None).ok
    assert compute_visible_fields(YOUR_STAGE, None) == set()


@pytest.mark.parametrize("age", sorted(SECTIONS))
def test_exactly_one_section_visible_per_age(age):
    section = visible_age_section({"age": age}, SECTIONS)
    assert section == age
    visible = compute_visible_fields(YOUR_STAGE, section)
    sections_shown = {f.age_section for f in YOUR_STAGE.fields if f.field_id in visible}
    assert sections_shown == {age}


@pytest.mark.parametrize("answers", [{}, {"age": ""}, {"age": False}, {"age": "martian"}])
def test_unset_or_unknown_age_shows_no_section(answers):
    assert visible_age_section(answers, SECTIONS) is None


@pytest.mark.parametrize("field_id, posted", [("parish_member", "maybe"), ("age", "bogus"), ("age", "Adult")])
def test_radio_value_outside_its_options_fails(field_id, posted):
    values = {**VALID_ABOUT_YOU, field_id: posted}
    result = validate_page(ABOUT_YOU, values, "adult")
    assert result.errors == {field_id: MSG_SELECT_OPTION}


def test_collector_ignores_radio_value_outside_its_options():
    parish_member = ABOUT_YOU.field("parish_member")
    assert collect_value(parish_member, "maybe") is None
    assert collect_value(parish_member, "no") == "no"
    collected = collect_page(ABOUT_YOU, {**VALID_ABOUT_YOU, "age": "bogus"})
    assert "age" not in collected
    assert collected["parish_member"] == "yes"
