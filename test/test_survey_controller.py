from __future__ import annotations

import json

import pytest

from app.models.survey import SessionStatus, TextQuestion
from app.services.session_store import SessionStore, StoreResult
from app.services.survey_controller import SurveyController, SurveyView, new_session_id

SESSION_ID = "session_1700000000000"


class _FailingStorage:
    def __init__(self) -> None:
        self.items: dict[str, str] = {}
        self.fail = False

    def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        if self.fail:
            raise OSError("quota exceeded")
        self.items[key] = value


@pytest.fixture
def controller(customer_questions, store, clock) -> SurveyController:
    return SurveyController(customer_questions, SESSION_ID, store, reset_seconds=5, clock=clock)


def _stored(storage, key: str = SESSION_ID):
    return json.loads(storage.get_item(key))


def test_new_controller_shows_welcome(controller: SurveyController) -> None:
    assert controller.view is SurveyView.WELCOME
    assert controller.current_index == 0
    assert controller.current_question is None
    assert controller.answers == []
    assert not controller.completed
    assert not controller.thank_you


def test_start_moves_to_first_question(controller: SurveyController) -> None:
    controller.start()

    assert controller.view is SurveyView.QUESTION
    assert controller.current_index == 1
    assert controller.current_question.id == 1
    assert controller.is_first_question


def test_advance_and_retreat_are_inverse(controller: SurveyController) -> None:
    controller.start()
    for index in range(1, controller.total_questions):
        assert controller.current_index == index
        controller.advance()
        assert controller.current_index == index + 1
        controller.retreat()
        assert controller.current_index == index
        controller.advance()


def test_retreat_on_first_question_is_noop(controller: SurveyController) -> None:
    controller.start()
    controller.retreat()

    assert controller.current_index == 1
    assert controller.view is SurveyView.QUESTION


def test_advance_on_last_question_is_noop(controller: SurveyController) -> None:
    controller.start()
    for _ in range(10):
        controller.advance()

    assert controller.current_index == controller.total_questions
    assert controller.is_last_question


def test_navigation_ignored_on_welcome(controller: SurveyController) -> None:
    controller.advance()
    controller.retreat()

    assert controller.current_index == 0


def test_record_answer_upserts_by_question_id(controller: SurveyController, storage) -> None:
    controller.start()
    controller.record_answer(1, "2")
    controller.record_answer(1, "5")

    assert [(a.question_id, a.value) for a in controller.answers] == [(1, "5")]
    assert _stored(storage)["answers"] == [{"questionId": 1, "answer": "5"}]


def test_record_answer_accepts_any_string(controller: SurveyController) -> None:
    controller.start()
    result = controller.record_answer(1, "")
    controller.record_answer(2, "not a number")

    assert result.ok
    assert controller.answer_for(1) == ""
    assert controller.answer_for(2) == "not a number"


def test_record_answer_persists_in_progress_status(controller: SurveyController, storage) -> None:
    controller.start()
    controller.record_answer(1, "3")

    assert _stored(storage)["status"] == "IN_PROGRESS"


def test_answers_are_copies(controller: SurveyController) -> None:
    controller.record_answer(1, "3")
    snapshot = controller.answers
    snapshot[0].value = "changed"

    assert controller.answer_for(1) == "3"


def test_finalize_only_from_last_question(controller: SurveyController) -> None:
    controller.start()

    assert controller.finalize(lambda: True) is None
    assert controller.current_index == 1
    assert not controller.thank_you


def test_finalize_declined_leaves_state(controller: SurveyController, storage) -> None:
    controller.start()
    for _ in range(4):
        controller.advance()
    controller.record_answer(5, "fine")

    result = controller.finalize(lambda: False)

    assert result is None
    assert controller.current_index == 5
    assert not controller.completed
    assert not controller.thank_you
    assert _stored(storage)["status"] == "IN_PROGRESS"


def test_finalize_confirmed_then_resets_after_timeout(controller: SurveyController, clock) -> None:
    controller.start()
    for _ in range(4):
        controller.advance()

    result = controller.finalize(lambda: True)

    assert result == StoreResult.success()
    assert controller.view is SurveyView.THANK_YOU
    assert controller.completed
    assert controller.status is SessionStatus.COMPLETED
    assert controller.seconds_until_reset() == pytest.approx(5)

    clock.advance(4)
    assert controller.refresh() is False
    assert controller.view is SurveyView.THANK_YOU

    clock.advance(1)
    assert controller.refresh() is True
    assert controller.view is SurveyView.WELCOME
    assert controller.current_index == 0
    assert not controller.thank_you
    assert not controller.completed
    assert controller.seconds_until_reset() is None
    assert controller.refresh() is False


def test_thank_you_has_no_transitions(controller: SurveyController) -> None:
    controller.start()
    for _ in range(4):
        controller.advance()
    controller.finalize(lambda: True)

    controller.start()
    controller.advance()
    controller.retreat()

    assert controller.view is SurveyView.THANK_YOU
    assert controller.finalize(lambda: True) is None


def test_failed_answer_write_keeps_memory(customer_questions, clock) -> None:
    storage = _FailingStorage()
    controller = SurveyController(customer_questions, SESSION_ID, SessionStore(storage), clock=clock)
    controller.start()
    storage.fail = True

    result = controller.record_answer(1, "4")

    assert not result.ok
    assert "quota exceeded" in result.error
    assert controller.answer_for(1) == "4"
    assert SESSION_ID not in storage.items


def test_failed_submit_write_stays_on_last_question(customer_questions, clock) -> None:
    storage = _FailingStorage()
    controller = SurveyController(customer_questions, SESSION_ID, SessionStore(storage), clock=clock)
    controller.start()
    for _ in range(4):
        controller.advance()
    storage.fail = True

    result = controller.finalize(lambda: True)

    assert result is not None and not result.ok
    assert controller.view is SurveyView.QUESTION
    assert controller.current_index == 5
    assert not controller.completed
    assert controller.seconds_until_reset() is None


def test_controller_loads_existing_answers(customer_questions, storage, store, clock) -> None:
    storage.set_item(SESSION_ID, json.dumps([{"questionId": 2, "answer": "3"}]))

    controller = SurveyController(customer_questions, SESSION_ID, store, clock=clock)

    assert controller.answer_for(2) == "3"


def test_sessions_are_independent(customer_questions, storage, store, clock) -> None:
    first = SurveyController(customer_questions, "session_1", store, clock=clock)
    second = SurveyController(customer_questions, "session_2", store, clock=clock)

    first.record_answer(1, "5")

    assert second.answers == []
    assert json.loads(storage.get_item("session_1"))["answers"] == [{"questionId": 1, "answer": "5"}]
    assert storage.get_item("session_2") is None


def test_custom_question_set(store, clock) -> None:
    controller = SurveyController([TextQuestion(id=9, prompt="Anything else?")], SESSION_ID, store, clock=clock)
    controller.start()

    assert controller.is_first_question and controller.is_last_question
    assert controller.finalize(lambda: True).ok


def test_empty_question_set_rejected(store) -> None:
    with pytest.raises(ValueError):
        SurveyController([], SESSION_ID, store)


def test_new_session_id_uses_epoch_millis() -> None:
    assert new_session_id(lambda: 1700000000.123) == "session_1700000000123"


def test_customer_survey_walkthrough(controller: SurveyController, storage) -> None:
    controller.start()
    assert controller.current_index == 1
    assert controller.total_questions == 5

    controller.record_answer(1, "4")
    assert [(a.question_id, a.value) for a in controller.answers] == [(1, "4")]

    for _ in range(3):
        controller.advance()
    assert controller.current_index == 4

    controller.record_answer(4, "8")
    assert [a.question_id for a in controller.answers] == [1, 4]

    controller.advance()
    assert controller.current_index == 5

    controller.record_answer(5, "please improve")
    assert len(controller.answers) == 3

    controller.finalize(lambda: True)

    assert controller.view is SurveyView.THANK_YOU
    assert _stored(storage) == {
        "answers": [
            {"questionId": 1, "answer": "4"},
            {"questionId": 4, "answer": "8"},
            {"questionId": 5, "answer": "please improve"},
        ],
        "status": "COMPLETED",
    }


def test_duplicate_question_ids_rejected(store) -> None:
    questions = [TextQuestion(id=1, prompt="a"), TextQuestion(id=1, prompt="b")]

    with pytest.raises(ValueError, match="duplicate"):
        SurveyController(questions, SESSION_ID, store)


def test_answers_survive_thank_you_reset(controller: SurveyController, clock) -> None:
    controller.start()
    controller.record_answer(1, "4")
    for _ in range(4):
        controller.advance()
    controller.finalize(lambda: True)
    clock.advance(5)
    controller.refresh()

    controller.start()

    assert controller.answer_for(1) == "4"
