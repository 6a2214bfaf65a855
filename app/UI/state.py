from __future__ import annotations

from typing import Optional

import streamlit as st

from app.core.config import settings
from app.services.session_store import StoreResult, get_session_store
from app.services.survey_controller import SurveyController, new_session_id
from app.services.survey_loader import SurveyLoader

CONTROLLER_KEY = "survey_controller"
CONFIRMING_SUBMIT_KEY = "confirming_submit"
STORE_ERROR_KEY = "store_error"
RESPONSE_PREFIX = "response_"


@st.cache_resource
def _load_survey_loader() -> SurveyLoader:
    return SurveyLoader(settings.survey_file_path)


def get_controller() -> SurveyController:
    """Return this browser session's controller, creating it on first use."""

    controller = st.session_state.get(CONTROLLER_KEY)
    if controller is None:
        controller = SurveyController(
            _load_survey_loader().questions,
            new_session_id(),
            get_session_store(),
            reset_seconds=settings.thank_you_reset_seconds,
        )
        st.session_state[CONTROLLER_KEY] = controller
    return controller


def ensure_defaults() -> None:
    """Ensure the expected session state keys exist with sensible defaults."""

    st.session_state.setdefault(CONFIRMING_SUBMIT_KEY, False)
    st.session_state.setdefault(STORE_ERROR_KEY, None)


def widget_key(question_id: int) -> str:
    return f"{RESPONSE_PREFIX}{question_id}"


def forget_widgets() -> None:
    """Drop cached input values so each input is re-seeded from the stored answers."""

    for key in [name for name in st.session_state.keys() if name.startswith(RESPONSE_PREFIX)]:
        del st.session_state[key]


def set_confirming_submit(is_confirming: bool) -> None:
    """Persist whether the submit confirmation prompt is showing."""

    st.session_state[CONFIRMING_SUBMIT_KEY] = bool(is_confirming)


def is_confirming_submit() -> bool:
    return bool(st.session_state[CONFIRMING_SUBMIT_KEY])


def note_store_result(result: Optional[StoreResult]) -> None:
    """Remember the last persistence failure so the next render can show it."""

    if result is None:
        return
    st.session_state[STORE_ERROR_KEY] = None if result.ok else result.error


def get_store_error() -> Optional[str]:
    return st.session_state[STORE_ERROR_KEY]
