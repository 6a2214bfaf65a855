from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, List, Literal, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class RatingQuestion(BaseModel):
    """A question answered with a bounded numeric slider."""

    id: int
    prompt: str
    kind: Literal["rating"] = Field(default="rating", frozen=True)
    range: Tuple[int, int]

    @model_validator(mode="after")
    def _ensure_ordered_range(self) -> "RatingQuestion":
        low, high = self.range
        if low > high:
            raise ValueError("rating range minimum must not exceed its maximum")
        return self

    @property
    def minimum(self) -> int:
        return self.range[0]

    @property
    def maximum(self) -> int:
        return self.range[1]

    model_config = ConfigDict(extra="forbid", frozen=True)


class TextQuestion(BaseModel):
    """A question answered with free-form text."""

    id: int
    prompt: str
    kind: Literal["text"] = Field(default="text", frozen=True)

    model_config = ConfigDict(extra="forbid", frozen=True)


Question = Annotated[
    Union[RatingQuestion, TextQuestion],
    Field(discriminator="kind"),
]


class Survey(BaseModel):
    """An ordered, immutable sequence of survey questions."""

    questions: List[Question]

    @model_validator(mode="after")
    def _ensure_unique_ids(self) -> "Survey":
        if not self.questions:
            raise ValueError("a survey needs at least one question")

        seen: set[int] = set()
        for question in self.questions:
            if question.id in seen:
                raise ValueError(f"duplicate question id: {question.id}")
            seen.add(question.id)
        return self

    model_config = ConfigDict(extra="forbid", frozen=True)


class Answer(BaseModel):
    """The recorded response to one question within a session.

    Stored with the ``questionId``/``answer`` field names the local store has
    always used; ``value`` is the attribute name in Python code.
    """

    question_id: int = Field(alias="questionId")
    value: str = Field(default="", alias="answer")

    @field_validator("value", mode="before")
    @classmethod
    def _stringify_value(cls, value: Union[str, int, float, None]) -> str:
        if value is None:
            return ""
        return str(value)

    model_config = ConfigDict(populate_by_name=True)


class SessionStatus(str, Enum):
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


class SessionRecord(BaseModel):
    """The value persisted under a session id."""

    answers: List[Answer] = Field(default_factory=list)
    status: SessionStatus = SessionStatus.IN_PROGRESS

    @model_validator(mode="before")
    @classmethod
    def _accept_bare_answer_list(cls, value: Any) -> Any:
        # Older writes stored the answer list without the status wrapper.
        if isinstance(value, list):
            return {"answers": value}
        return value

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
