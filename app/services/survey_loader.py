from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable, Tuple

from pydantic import ValidationError

from app.models.survey import Question, RatingQuestion, Survey, TextQuestion

_RATING_PATTERN = re.compile(r"^rating\s+(-?\d+)\s*-\s*(-?\d+)$", re.IGNORECASE)


class SurveyDefinitionError(ValueError):
    """Raised when a survey file cannot be turned into a valid survey."""


class SurveyLoader:
    """Load survey questions from a simple text file.

    Each non-empty line of the file represents a question. A line may
    optionally mark itself as a rating question using the pipe character
    ("|") followed by the inclusive slider range:

        How satisfied are you with our products? | rating 1-5

    Lines without a kind segment are treated as free-text questions. Lines
    beginning with "#" or that are blank are ignored. Question ids are
    assigned from 1 in file order.
    """

    def __init__(self, source: str | Path) -> None:
        self._path = Path(source)
        if not self._path.is_file():
            raise FileNotFoundError(f"Survey file not found: {self._path}")

        questions = list(self._load_questions())
        try:
            self._survey = Survey(questions=questions)
        except ValidationError as exc:
            raise SurveyDefinitionError(f"{self._path}: {exc}") from exc

    @property
    def survey(self) -> Survey:
        """Return the full survey loaded from the file."""

        return self._survey

    @property
    def questions(self) -> Tuple[Question, ...]:
        return tuple(self._survey.questions)

    def _load_questions(self) -> Iterable[Question]:
        next_id = 1
        with self._path.open("r", encoding="utf-8") as handle:
            for lineno, raw_line in enumerate(handle, start=1):
                line = raw_line.strip()
                if not line or line.startswith("#"):
                    continue

                yield self._parse_line(line, lineno, next_id)
                next_id += 1

    def _parse_line(self, line: str, lineno: int, question_id: int) -> Question:
        if "|" not in line:
            return TextQuestion(id=question_id, prompt=line)

        prompt_part, kind_part = line.split("|", maxsplit=1)
        prompt = prompt_part.strip()
        if not prompt:
            raise SurveyDefinitionError(f"Line {lineno}: question text cannot be empty")

        kind = kind_part.strip()
        if kind.lower() == "text":
            return TextQuestion(id=question_id, prompt=prompt)

        match = _RATING_PATTERN.match(kind)
        if match is None:
            raise SurveyDefinitionError(
                f"Line {lineno}: expected 'rating MIN-MAX' or 'text', got {kind!r}"
            )

        low, high = int(match.group(1)), int(match.group(2))
        if low > high:
            raise SurveyDefinitionError(f"Line {lineno}: rating range {low}-{high} is reversed")

        return RatingQuestion(id=question_id, prompt=prompt, range=(low, high))
