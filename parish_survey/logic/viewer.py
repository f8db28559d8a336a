"""Response viewer state: the fetched result set and everything derived from it.

The viewer fetches all responses newest-first in one request and answers
every later question (rows, stats, summary, details) from memory. A refresh
that fails keeps the previous result set and records an inline error; a
viewer without a sink keeps a persistent initialization error. Overlapping
refreshes are not serialized: whichever finishes last replaces the set.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional

from parish_survey.logic.details import build_details
from parish_survey.logic.filter_engine import ALL, filter_responses
from parish_survey.logic.question_catalog import QUESTION_CATALOG
from parish_survey.logic.sink import DataSink, SinkError
from parish_survey.logic.submitter import RESPONSES_TABLE
from parish_survey.logic.summarizer import summarize
from parish_survey.logic.timestamps import format_date, format_datetime, parse_timestamp
from parish_survey.models.catalog import SummaryBlock
from parish_survey.models.viewer import DetailGroup, ResponseRow, ViewerStats

logger = logging.getLogger(__name__)

MSG_NOT_INITIALIZED = "Data sink not initialized. Check credentials."
MSG_FETCH_FAILED = "Failed to load responses. Please try again."


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ResponseViewer:
    def __init__(
        self,
        sink: Optional[DataSink],
        table: str = RESPONSES_TABLE,
        new_badge_hours: int = 24,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.sink = sink
        self.table = table
        self.new_badge_window = timedelta(hours=new_badge_hours)
        self.clock = clock
        self.records: List[Dict[str, Any]] = []
        self.loading = False
        self.initial_fetch_attempted = False
        self.error: Optional[str] = None if sink is not None else MSG_NOT_INITIALIZED

    def refresh(self) -> bool:
        """Fetch all responses newest-first; return True on success."""
        if self.sink is None:
            self.error = MSG_NOT_INITIALIZED
            logger.error("viewer_refresh_skipped reason=sink_not_initialized")
            return False
        self.loading = True
        try:
            rows = self.sink.select(self.table, order=("created_at", True))
        except SinkError as exc:
            self.error = MSG_FETCH_FAILED
            logger.error("viewer_refresh_failed table=%s reason=%s", self.table, exc)
            return False
        finally:
            self.loading = False
        self.records = rows
        self.error = None
        logger.info("viewer_refresh_ok table=%s count=%s", self.table, len(rows))
        return True

    def ensure_loaded(self) -> None:
        """Perform the one-shot initial fetch.

        A failed initial fetch is not retried here; only `refresh` fetches again.
        """
        if self.initial_fetch_attempted or self.sink is None:
            return
        self.initial_fetch_attempted = True
        self.refresh()

    def stats(self) -> ViewerStats:
        last: Optional[str] = None
        if self.records:
            dt = parse_timestamp(self.records[0].get("created_at"))
            last = format_datetime(dt) if dt is not None else None
        return ViewerStats(total=len(self.records), last_submission=last)

    def filtered(self, age_group: str = ALL, parish_member: str = ALL) -> List[Mapping[str, Any]]:
        return filter_responses(self.records, age_group, parish_member)

    def row(self, record: Mapping[str, Any]) -> ResponseRow:
        created = parse_timestamp(record.get("created_at"))
        is_new = created is not None and created > self.clock() - self.new_badge_window
        member = record.get("parish_member")
        return ResponseRow(
            record_id=None if record.get("id") is None else str(record.get("id")),
            date_label=format_date(created) if created is not None else "N/A",
            is_new=is_new,
            full_name=str(record.get("full_name") or "N/A"),
            email=str(record.get("email") or "N/A"),
            parish_member=member,
            membership_label="Member" if member == "yes" else "Non-Member",
            age_group=str(record.get("age_group") or "N/A"),
        )

    def rows(self, age_group: str = ALL, parish_member: str = ALL) -> List[ResponseRow]:
        return [self.row(r) for r in self.filtered(age_group, parish_member)]

    def summary(self, age_group: str = ALL, parish_member: str = ALL) -> List[SummaryBlock]:
        return summarize(self.filtered(age_group, parish_member), QUESTION_CATALOG)

    def find(self, record_id: str) -> Optional[Mapping[str, Any]]:
        for record in self.records:
            if str(record.get("id")) == str(record_id):
                return record
        return None

    def details(self, record_id: str) -> Optional[List[DetailGroup]]:
        record = self.find(record_id)
        if record is None:
            return None
        logger.info("viewer_details record_id=%s", record_id)
        return build_details(record)


__all__ = ["MSG_NOT_INITIALIZED", "MSG_FETCH_FAILED", "ResponseViewer"]
