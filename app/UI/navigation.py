from __future__ import annotations

import streamlit as st

from app.services.survey_controller import SurveyController

from . import state

CONFIRM_MESSAGE = "Are you sure you want to submit the survey?"


def render(controller: SurveyController) -> None:
    """Render navigation controls for moving through the survey."""

    if state.is_confirming_submit():
        _render_confirmation(controller)
        return

    def _go_previous() -> None:
        controller.retreat()

    def _go_next() -> None:
        controller.advance()

    def _ask_to_submit() -> None:
        state.set_confirming_submit(True)

    prev_col, next_col = st.columns(2)
    with prev_col:
        st.button("Previous", key="previous_button", on_click=_go_previous, disabled=controller.is_first_question)
    with next_col:
        if controller.is_last_question:
            st.button("Submit", key="submit_button", type="primary", on_click=_ask_to_submit)
        else:
            st.button("Next", key="next_button", type="primary", on_click=_go_next)


def _render_confirmation(controller: SurveyController) -> None:
    st.warning(CONFIRM_MESSAGE)

    def _answer(confirmed: bool) -> None:
        state.set_confirming_submit(False)
        result = controller.finalize(lambda: confirmed)
        state.note_store_result(result)
        if controller.thank_you:
            state.forget_widgets()

    confirm_col, cancel_col = st.columns(2)
    with confirm_col:
        st.button("Yes, submit", key="confirm_submit_button", type="primary", on_click=_answer, args=(True,))
    with cancel_col:
        st.button("Cancel", key="cancel_submit_button", on_click=_answer, args=(False,))
