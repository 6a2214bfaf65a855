from .session_store import SessionStore, StoreResult, get_session_store
from .survey_controller import SurveyController, SurveyView, new_session_id
from .survey_loader import SurveyDefinitionError, SurveyLoader

__all__ = [
    "SessionStore",
    "StoreResult",
    "SurveyController",
    "SurveyDefinitionError",
    "SurveyLoader",
    "SurveyView",
    "get_session_store",
    "new_session_id",
]
