"""FieldKind constants for the interactive fields a survey page can hold.

A plain constants container rather than an Enum; descriptors store the raw
string so page definitions stay JSON-friendly.
"""

from __future__ import annotations


class FieldKind:
    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    EMAIL = "email"
    TEXTAREA = "textarea"
    SELECT = "select"
    RADIO = "radio"
    CHECKBOX = "checkbox"

    ALL = frozenset({TEXT, NUMBER, DATE, EMAIL, TEXTAREA, SELECT, RADIO, CHECKBOX})


class QuestionKind:
    """Kinds understood by the results summarizer."""

    CHOICE = "choice"
    TEXT = "text"


__all__ = ["FieldKind", "QuestionKind"]
