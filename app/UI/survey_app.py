from __future__ import annotations

import time

import streamlit as st

from app.UI import components, navigation, state
from app.core.config import configure_logging
from app.services.survey_controller import SurveyView


def run_app() -> None:
    """Entry point for the Streamlit-based survey UI."""

    st.set_page_config(page_title="Customer Survey", page_icon="📝", layout="centered")
    configure_logging()

    try:
        controller = state.get_controller()
    except (FileNotFoundError, ValueError) as exc:
        st.error(str(exc))
        return

    state.ensure_defaults()
    if controller.refresh():
        state.forget_widgets()

    view = controller.view

    if view is SurveyView.THANK_YOU:
        components.render_thank_you()
        _wait_for_reset(controller.seconds_until_reset() or 0.0)
        return

    if view is SurveyView.WELCOME:
        components.render_welcome(on_start=controller.start)
        return

    question = controller.current_question
    components.render_question_header(controller.current_index, controller.total_questions, question.prompt)
    components.render_answer_widget(controller, question)
    components.render_store_error(state.get_store_error())

    st.caption(f"Answered {len(controller.answers)} of {controller.total_questions} questions")

    navigation.render(controller)


def _wait_for_reset(seconds: float) -> None:
    """Hold the thank-you screen until the reset deadline, then rerun."""

    time.sleep(seconds)
    st.rerun()
