"""Page definitions of the Holy Trinity parish survey.

Page 0 welcomes the respondent, the last page thanks them; reaching it
submits the survey. Age-specific questions live in sections named after the
values of the `age` radio group and are shown only for the matching choice.
"""

from __future__ import annotations

from typing import List

from parish_survey.models.field_kind import FieldKind
from parish_survey.models.page import FieldDescriptor, FieldOption, PageSchema

AGE_OPTIONS = [
    FieldOption(value="minor", label="Under 18"),
    FieldOption(value="young", label="18 - 35"),
    FieldOption(value="adult", label="36 - 64"),
    FieldOption(value="senior", label="65 and over"),
]

YES_NO = [FieldOption(value="yes", label="Yes"), FieldOption(value="no", label="No")]

SCALE_1_5 = [FieldOption(value=str(n), label=str(n)) for n in range(1, 6)]


def _f(field_id: str, kind: str, label: str, **kwargs) -> FieldDescriptor:
    return FieldDescriptor(field_id=field_id, kind=kind, label=label, **kwargs)


SURVEY_PAGES: List[PageSchema] = [
    PageSchema(key="welcome", title="Welcome to the Holy Trinity Parish Survey"),
    PageSchema(
        key="about_you",
        title="About You",
        fields=[
            _f("full_name", FieldKind.TEXT, "Full Name", required=True),
            _f("email", FieldKind.EMAIL, "Email", required=True),
            _f("parish_member", FieldKind.RADIO, "Are you a registered parishioner?", required=True, options=YES_NO),
            _f("age", FieldKind.RADIO, "Age Group", required=True, options=AGE_OPTIONS),
            _f("specific_age", FieldKind.NUMBER, "Specific Age"),
        ],
    ),
    PageSchema(
        key="ministries",
        title="Ministry Interests",
        fields=[
            _f("current_ministries", FieldKind.TEXTAREA, "Which ministries are you involved in today?"),
            _f("cat_faith_formation", FieldKind.CHECKBOX, "Faith Formation"),
            _f("cat_liturgical", FieldKind.CHECKBOX, "Liturgical / Mass"),
            _f("cat_youth", FieldKind.CHECKBOX, "Youth Ministry"),
            _f("cat_groups", FieldKind.CHECKBOX, "Service Groups"),
            _f("cat_seasonal", FieldKind.CHECKBOX, "Seasonal / Events"),
        ],
    ),
    PageSchema(
        key="communication",
        title="Communication Preferences",
        fields=[
            _f("pref_email", FieldKind.CHECKBOX, "Email Updates"),
            _f("pref_bulletin", FieldKind.CHECKBOX, "Printed Bulletin"),
            _f("pref_website", FieldKind.CHECKBOX, "Parish Website"),
        ],
    ),
    PageSchema(
        key="community",
        title="Feedback & Community",
        fields=[
            _f("community_connection", FieldKind.RADIO, "How connected do you feel to the parish community?", required=True, options=SCALE_1_5),
            _f("community_additions", FieldKind.TEXTAREA, "What new programs would you like to see?"),
            _f("community_families", FieldKind.TEXTAREA, "How could the parish better support families?"),
        ],
    ),
    PageSchema(
        key="your_stage",
        title="Your Stage of Life",
        fields=[
            _f("minor_fav", FieldKind.TEXT, "What is your favorite part of parish life?", required=True, age_section="minor"),
            _f("minor_excitement", FieldKind.RADIO, "How excited are you about youth events?", required=True, options=SCALE_1_5, age_section="minor"),
            _f("minor_feedback", FieldKind.TEXTAREA, "Anything else you want to tell us?", age_section="minor"),
            _f("young_challenge", FieldKind.TEXTAREA, "What challenges your faith most right now?", required=True, age_section="young"),
            _f("adult_family", FieldKind.TEXTAREA, "How can the parish help your family grow in faith?", required=True, age_section="adult"),
            _f("senior_service", FieldKind.TEXTAREA, "Tell us about your experience serving the parish.", required=True, age_section="senior"),
        ],
    ),
    PageSchema(
        key="final",
        title="Prayer Intentions & Final Comments",
        fields=[
            _f("final_comments", FieldKind.TEXTAREA, "Prayer intentions or final comments"),
            _f("consent", FieldKind.CHECKBOX, "I agree that the parish may store my answers", required=True),
        ],
    ),
    PageSchema(key="thank_you", title="Thank You!"),
]


__all__ = ["AGE_OPTIONS", "YES_NO", "SCALE_1_5", "SURVEY_PAGES"]
