"""In-process registry of live survey sessions.

Sessions are keyed by the client session id carried in the `survey_session`
cookie. A session unknown to this process is rebuilt from its persisted draft,
so a restart with the SQL draft backend resumes where the respondent stopped.

The registry holds at most `max_sessions` entries and evicts the least
recently used one when full. An evicted session loses nothing: its answers
and page index live in the draft and are restored on the next request.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from typing import Callable

from parish_survey.models.session import SurveySession

logger = logging.getLogger(__name__)

SessionFactory = Callable[[str], SurveySession]

DEFAULT_MAX_SESSIONS = 1000


class SessionRegistry:
    def __init__(self, max_sessions: int = DEFAULT_MAX_SESSIONS) -> None:
        if max_sessions < 1:
            raise ValueError("max_sessions must be at least 1")
        self.max_sessions = max_sessions
        self._sessions: "OrderedDict[str, SurveySession]" = OrderedDict()

    def get_or_restore(self, session_id: str, factory: SessionFactory) -> SurveySession:
        session = self._sessions.get(session_id)
        if session is not None:
            self._sessions.move_to_end(session_id)
            return session
        session = factory(session_id)
        self._sessions[session_id] = session
        while len(self._sessions) > self.max_sessions:
            evicted, _ = self._sessions.popitem(last=False)
            logger.info("survey_session_evicted session=%s", evicted)
        return session

    def discard(self, session_id: str) -> None:
        if self._sessions.pop(session_id, None) is not None:
            logger.info("survey_session_released session=%s", session_id)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)


__all__ = ["DEFAULT_MAX_SESSIONS", "SessionFactory", "SessionRegistry"]
