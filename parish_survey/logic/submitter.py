"""Final submission of a completed survey.

Builds the normalized response record from the Answer Map and hands it to the
sink. On success the draft is cleared and a `survey.completed` event is
published (the client renders the celebration from it). On failure the error
is logged and a `survey.submission_failed` event is published; nothing is
retried and the respondent still sees the thank-you page.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from parish_survey.logic.draft_store import DraftStore
from parish_survey.logic.events import SURVEY_COMPLETED, SURVEY_SUBMISSION_FAILED, publish
from parish_survey.logic.sink import DataSink, SinkError
from parish_survey.models.session import AnswerMap, is_answered

logger = logging.getLogger(__name__)

RESPONSES_TABLE = "survey_responses"

# Top-level column -> Answer Map key
TOP_LEVEL_FIELDS: Dict[str, str] = {
    "full_name": "full_name",
    "email": "email",
    "parish_member": "parish_member",
    "age_group": "age",
    "age": "specific_age",
}


def build_record(answers: AnswerMap) -> Dict[str, Any]:
    """Return the record to insert: known columns plus the full Answer Map.

    Answers promoted to a column are stored in `data` under the column name,
    so a key means the same answer at the top level and in `data`.
    """
    record: Dict[str, Any] = {}
    data: Dict[str, Any] = dict(answers)
    for key in TOP_LEVEL_FIELDS.values():
        data.pop(key, None)
    for column, key in TOP_LEVEL_FIELDS.items():
        value = answers.get(key)
        record[column] = str(value).strip() if is_answered(value) else None
        if key in answers:
            data[column] = answers[key]
    record["data"] = data
    return record


class Submitter:
    def __init__(
        self,
        sink: Optional[DataSink],
        draft_store: DraftStore,
        table: str = RESPONSES_TABLE,
    ) -> None:
        self.sink = sink
        self.draft_store = draft_store
        self.table = table

    def submit(self, answers: AnswerMap) -> bool:
        """Insert the response; return True when the sink accepted it."""
        session_id = self.draft_store.session_id
        logger.info("survey_submit_start session=%s fields=%s", session_id, len(answers))
        if self.sink is None:
            logger.error("survey_submit_failed session=%s reason=sink_not_initialized", session_id)
            publish(SURVEY_SUBMISSION_FAILED, {"session_id": session_id, "reason": "sink_not_initialized"})
            return False
        try:
            stored = self.sink.insert(self.table, build_record(answers))
        except SinkError as exc:
            logger.error("survey_submit_failed session=%s reason=%s", session_id, exc)
            publish(SURVEY_SUBMISSION_FAILED, {"session_id": session_id, "reason": str(exc)})
            return False
        self.draft_store.clear()
        publish(SURVEY_COMPLETED, {"session_id": session_id, "record_id": stored.get("id")})
        logger.info("survey_submit_ok session=%s record_id=%s", session_id, stored.get("id"))
        return True


__all__ = ["RESPONSES_TABLE", "TOP_LEVEL_FIELDS", "build_record", "Submitter"]
