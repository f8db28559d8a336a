"""Survey session state.

One `SurveySession` is owned per respondent session and passed explicitly to
the navigator, validator and submitter.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Union

# Field identifier -> answer; False and "" mean "unanswered"
AnswerValue = Union[str, bool]
AnswerMap = Dict[str, AnswerValue]


def is_answered(value: object) -> bool:
    """Return True unless value is absent, None, False or an empty string."""
    if value is None or value is False:
        return False
    if isinstance(value, str) and value == "":
        return False
    return True


@dataclass
class SurveySession:
    session_id: str
    current_page: int = 0
    answers: AnswerMap = field(default_factory=dict)
    # Validation annotations for the current page: field_id -> message
    errors: Dict[str, str] = field(default_factory=dict)
    visible_section: Optional[str] = None
    progress: float = 0.0
    scroll_to_top: bool = False


__all__ = ["AnswerValue", "AnswerMap", "SurveySession", "is_answered"]
