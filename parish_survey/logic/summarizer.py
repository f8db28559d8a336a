"""Per-question summaries over a set of response records.

For every catalog question with at least one non-empty answer:
- choice questions are tallied by normalized label (True -> "Yes",
  False -> "No", otherwise the raw value) with a count and a percentage of
  that question's answers; labels keep the order of first occurrence
- text questions list every non-empty answer verbatim in record order
Questions nobody answered are omitted.
"""

from __future__ import annotations

import math
from typing import Any, Dict, Iterable, List, Mapping, Sequence

from parish_survey.logic.question_catalog import QUESTION_CATALOG
from parish_survey.logic.record_access import get_field
from parish_survey.models.catalog import CatalogEntry, ChoiceTally, SummaryBlock
from parish_survey.models.field_kind import QuestionKind


def _has_answer(value: Any) -> bool:
    # False is an answer here: an unticked checkbox tallies as "No"
    if value is None:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True


def choice_label(value: Any) -> str:
    if value is True:
        return "Yes"
    if value is False:
        return "No"
    return str(value)


def percent_of(count: int, total: int) -> int:
    """Nearest whole percentage, halves rounded up."""
    if total <= 0:
        return 0
    return int(math.floor(count * 100 / total + 0.5))


def tally(values: Iterable[Any]) -> List[ChoiceTally]:
    counts: Dict[str, int] = {}
    for value in values:
        label = choice_label(value)
        counts[label] = counts.get(label, 0) + 1
    total = sum(counts.values())
    return [ChoiceTally(label=label, count=n, percent=percent_of(n, total)) for label, n in counts.items()]


def summarize_question(records: Sequence[Mapping[str, Any]], entry: CatalogEntry) -> SummaryBlock | None:
    answers = [v for v in (get_field(r, entry.key) for r in records) if _has_answer(v)]
    if not answers:
        return None
    if entry.kind == QuestionKind.CHOICE:
        return SummaryBlock(
            label=entry.label,
            key=entry.key,
            kind=entry.kind,
            total=len(answers),
            tallies=tally(answers),
        )
    return SummaryBlock(
        label=entry.label,
        key=entry.key,
        kind=entry.kind,
        total=len(answers),
        answers=[str(v) for v in answers],
    )


def summarize(
    records: Sequence[Mapping[str, Any]],
    catalog: Sequence[CatalogEntry] = QUESTION_CATALOG,
) -> List[SummaryBlock]:
    blocks: List[SummaryBlock] = []
    for entry in catalog:
        block = summarize_question(records, entry)
        if block is not None:
            blocks.append(block)
    return blocks


__all__ = ["choice_label", "percent_of", "tally", "summarize_question", "summarize"]
