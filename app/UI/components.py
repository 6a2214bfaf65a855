from __future__ import annotations

from typing import Callable

import streamlit as st

from app.models.survey import Question, RatingQuestion
from app.services.survey_controller import SurveyController

from . import state

WELCOME_TITLE = "Welcome to our Customer Survey"
THANK_YOU_TITLE = "Thank you for your feedback!"
THANK_YOU_DETAIL = "You will be redirected shortly..."


def render_welcome(on_start: Callable[[], None]) -> None:
    """Display the introductory screen shown before the survey begins."""

    st.markdown(f"# {WELCOME_TITLE}")
    st.button("Start Survey", key="start_survey_button", type="primary", on_click=on_start)


def render_question_header(current_index: int, total_questions: int, prompt: str) -> None:
    """Render progress information and the active question text."""

    st.progress(current_index / total_questions)
    st.markdown(f"### {current_index}/{total_questions}: {prompt}")


def render_answer_widget(controller: SurveyController, question: Question) -> None:
    """Render the input for the question's kind, recording every change."""

    key = state.widget_key(question.id)

    if key not in st.session_state:
        stored = controller.answer_for(question.id)
        if isinstance(question, RatingQuestion):
            st.session_state[key] = _initial_rating(question, stored)
        else:
            st.session_state[key] = stored or ""

    def _record() -> None:
        value = st.session_state.get(key)
        state.note_store_result(controller.record_answer(question.id, str(value)))

    if isinstance(question, RatingQuestion) and question.minimum == question.maximum:
        st.number_input(
            "Your rating",
            min_value=question.minimum,
            max_value=question.maximum,
            step=1,
            key=key,
            on_change=_record,
        )
    elif isinstance(question, RatingQuestion):
        st.slider(
            "Your rating",
            min_value=question.minimum,
            max_value=question.maximum,
            step=1,
            key=key,
            on_change=_record,
        )
    else:
        st.text_area(
            "Your answer",
            key=key,
            placeholder="Type your answer here...",
            on_change=_record,
        )


def _initial_rating(question: RatingQuestion, stored: str | None) -> int:
    # Unanswered sliders start in the middle of the range, like a range input.
    try:
        value = int(float(stored)) if stored is not None else None
    except ValueError:
        value = None
    if value is None:
        return (question.minimum + question.maximum) // 2
    return min(max(value, question.minimum), question.maximum)


def render_store_error(message: str | None) -> None:
    if message:
        st.error(f"Your last answer could not be saved: {message}")


def render_thank_you() -> None:
    """Display the static confirmation shown after submission."""

    st.markdown(f"# {THANK_YOU_TITLE}")
    st.write(THANK_YOU_DETAIL)
