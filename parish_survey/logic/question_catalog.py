"""Static catalog of the questions the viewer knows how to summarize."""

from __future__ import annotations

from typing import List

from parish_survey.models.catalog import CatalogEntry
from parish_survey.models.field_kind import QuestionKind

CHOICE = QuestionKind.CHOICE
TEXT = QuestionKind.TEXT

QUESTION_CATALOG: List[CatalogEntry] = [
    CatalogEntry(label="Parish Member", key="parish_member", kind=CHOICE),
    CatalogEntry(label="Age Group", key="age_group", kind=CHOICE),
    CatalogEntry(label="Current Ministries", key="current_ministries", kind=TEXT),
    CatalogEntry(label="Faith Formation", key="cat_faith_formation", kind=CHOICE),
    CatalogEntry(label="Liturgical / Mass", key="cat_liturgical", kind=CHOICE),
    CatalogEntry(label="Youth Ministry", key="cat_youth", kind=CHOICE),
    CatalogEntry(label="Service Groups", key="cat_groups", kind=CHOICE),
    CatalogEntry(label="Seasonal/Events", key="cat_seasonal", kind=CHOICE),
    CatalogEntry(label="Email Updates", key="pref_email", kind=CHOICE),
    CatalogEntry(label="Printed Bulletin", key="pref_bulletin", kind=CHOICE),
    CatalogEntry(label="Parish Website", key="pref_website", kind=CHOICE),
    CatalogEntry(label="Community Connection (1-5)", key="community_connection", kind=CHOICE),
    CatalogEntry(label="New Program Ideas", key="community_additions", kind=TEXT),
    CatalogEntry(label="Family Support Needs", key="community_families", kind=TEXT),
    CatalogEntry(label="Family Growth (Adults)", key="adult_family", kind=TEXT),
    CatalogEntry(label="Faith Challenges (Young Adults)", key="young_challenge", kind=TEXT),
    CatalogEntry(label="Experience (Seniors)", key="senior_service", kind=TEXT),
    CatalogEntry(label="Minor: Favorite Part", key="minor_fav", kind=TEXT),
    CatalogEntry(label="Minor: Excitement (1-5)", key="minor_excitement", kind=CHOICE),
    CatalogEntry(label="Minor: Feedback", key="minor_feedback", kind=TEXT),
    CatalogEntry(label="Prayer Intentions / Final Comments", key="final_comments", kind=TEXT),
]


__all__ = ["QUESTION_CATALOG"]
