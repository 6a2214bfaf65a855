from __future__ import annotations

import logging
import time
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple

from app.models.survey import Answer, Question, SessionRecord, SessionStatus

from .session_store import SessionStore, StoreResult

logger = logging.getLogger(__name__)

DEFAULT_RESET_SECONDS = 5.0


class SurveyView(str, Enum):
    WELCOME = "welcome"
    QUESTION = "question"
    THANK_YOU = "thank_you"


def new_session_id(clock: Callable[[], float] = time.time) -> str:
    """Return a time-based session key such as ``session_1700000000000``."""

    return f"session_{int(clock() * 1000)}"


class SurveyController:
    """State machine for a linear survey run.

    Index 0 is the welcome screen and indices 1..N address the questions. The
    thank-you screen is entered by a confirmed ``finalize`` and left again
    once ``reset_seconds`` have elapsed on ``clock``; ``refresh`` applies that
    reset and must be called before reading state in a polling UI.
    """

    def __init__(
        self,
        questions: Sequence[Question],
        session_id: str,
        store: SessionStore,
        *,
        reset_seconds: float = DEFAULT_RESET_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if not questions:
            raise ValueError("a survey needs at least one question")
        question_ids = [question.id for question in questions]
        if len(set(question_ids)) != len(question_ids):
            raise ValueError(f"duplicate question ids in {question_ids}")

        self._questions: Tuple[Question, ...] = tuple(questions)
        self._session_id = session_id
        self._store = store
        self._reset_seconds = reset_seconds
        self._clock = clock

        self._current_index = 0
        self._completed = False
        self._thank_you = False
        self._reset_deadline: Optional[float] = None
        self._answers: List[Answer] = store.load(session_id)

    # -- read-only state ---------------------------------------------------

    @property
    def session_id(self) -> str:
        return self._session_id

    @property
    def questions(self) -> Tuple[Question, ...]:
        return self._questions

    @property
    def total_questions(self) -> int:
        return len(self._questions)

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def completed(self) -> bool:
        return self._completed

    @property
    def thank_you(self) -> bool:
        return self._thank_you

    @property
    def status(self) -> SessionStatus:
        return SessionStatus.COMPLETED if self._completed else SessionStatus.IN_PROGRESS

    @property
    def answers(self) -> List[Answer]:
        """Return a copy of the recorded answers in first-answered order."""

        return [answer.model_copy() for answer in self._answers]

    @property
    def view(self) -> SurveyView:
        if self._thank_you:
            return SurveyView.THANK_YOU
        if self._current_index == 0:
            return SurveyView.WELCOME
        return SurveyView.QUESTION

    @property
    def current_question(self) -> Optional[Question]:
        """Return the question on screen, or ``None`` outside the question view."""

        if self.view is not SurveyView.QUESTION:
            return None
        return self._questions[self._current_index - 1]

    @property
    def is_first_question(self) -> bool:
        return self._current_index == 1

    @property
    def is_last_question(self) -> bool:
        return self._current_index == self.total_questions

    def answer_for(self, question_id: int) -> Optional[str]:
        """Return the stored value for a question, if one was recorded."""

        for answer in self._answers:
            if answer.question_id == question_id:
                return answer.value
        return None

    def seconds_until_reset(self) -> Optional[float]:
        """Return the time left on the thank-you timer, or ``None`` when unarmed."""

        if self._reset_deadline is None:
            return None
        return max(0.0, self._reset_deadline - self._clock())

    # -- transitions -------------------------------------------------------

    def start(self) -> None:
        """Leave the welcome screen for the first question."""

        if self.view is not SurveyView.WELCOME:
            return
        self._current_index = 1
        logger.debug("Session %s started", self._session_id)

    def advance(self) -> None:
        """Move to the next question; no-op on the last question."""

        if self.view is not SurveyView.QUESTION or self.is_last_question:
            return
        self._current_index += 1
        logger.debug("Session %s advanced to question %d", self._session_id, self._current_index)

    def retreat(self) -> None:
        """Move to the previous question; no-op on the first question."""

        if self.view is not SurveyView.QUESTION or self._current_index <= 1:
            return
        self._current_index -= 1
        logger.debug("Session %s went back to question %d", self._session_id, self._current_index)

    def record_answer(self, question_id: int, value: str) -> StoreResult:
        """Upsert the answer for ``question_id`` and persist every answer.

        The in-memory answer list is updated before the write, so a failed
        write leaves memory ahead of storage until the next successful save.
        """

        for answer in self._answers:
            if answer.question_id == question_id:
                answer.value = str(value)
                break
        else:
            self._answers.append(Answer(question_id=question_id, value=value))

        return self._persist(SessionStatus.IN_PROGRESS)

    def finalize(self, confirm: Callable[[], bool]) -> StoreResult | None:
        """Submit the survey from the last question.

        Returns ``None`` when submission is not available or ``confirm``
        declines; otherwise the result of writing the completed record. The
        thank-you screen is only entered after a successful write.
        """

        if self.view is not SurveyView.QUESTION or not self.is_last_question:
            return None
        if not confirm():
            logger.debug("Session %s submission declined", self._session_id)
            return None

        result = self._persist(SessionStatus.COMPLETED)
        if not result.ok:
            return result

        self._completed = True
        self._thank_you = True
        self._reset_deadline = self._clock() + self._reset_seconds
        logger.info("Session %s completed with %d answers", self._session_id, len(self._answers))
        return result

    def refresh(self) -> bool:
        """Return to the welcome screen once the thank-you timer has run out.

        Returns True when the reset happened on this call.
        """

        if self._reset_deadline is None or self._clock() < self._reset_deadline:
            return False

        self._reset_deadline = None
        self._thank_you = False
        self._completed = False
        self._current_index = 0
        logger.debug("Session %s returned to the welcome screen", self._session_id)
        return True

    def _persist(self, status: SessionStatus) -> StoreResult:
        record = SessionRecord(answers=list(self._answers), status=status)
        return self._store.save(self._session_id, record)
