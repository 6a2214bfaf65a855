from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

_APP_DIR = Path(__file__).resolve().parents[1]
DEFAULT_SURVEY_FILE = _APP_DIR / "data" / "customer_survey.txt"
DEFAULT_STORAGE_FILE = _APP_DIR / "data" / "local_storage.json"


def _strip_or_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    cleaned = value.strip()
    return cleaned or None


class Settings:

    def __init__(self) -> None:
        survey_path = _strip_or_none(os.getenv("SURVEY_FILE_PATH"))
        self.survey_file_path = (
            Path(survey_path).expanduser().resolve() if survey_path else DEFAULT_SURVEY_FILE
        )
        if not self.survey_file_path.is_file():
            raise RuntimeError(f"Survey file not found at {self.survey_file_path}")

        storage_path = _strip_or_none(os.getenv("SURVEY_STORAGE_PATH"))
        self.storage_path = (
            Path(storage_path).expanduser().resolve() if storage_path else DEFAULT_STORAGE_FILE
        )
        self.storage_path.parent.mkdir(parents=True, exist_ok=True)

        reset_seconds = _strip_or_none(os.getenv("THANK_YOU_RESET_SECONDS")) or "5"
        try:
            self.thank_you_reset_seconds = float(reset_seconds)
        except ValueError as exc:
            raise RuntimeError(f"THANK_YOU_RESET_SECONDS must be a number, got {reset_seconds!r}") from exc
        if self.thank_you_reset_seconds < 0:
            raise RuntimeError("THANK_YOU_RESET_SECONDS cannot be negative.")

        self.log_level = (_strip_or_none(os.getenv("SURVEY_LOG_LEVEL")) or "INFO").upper()


def configure_logging(level: str | None = None) -> None:
    """Apply the configured log level to the root logger."""

    logging.basicConfig(
        level=level or settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


settings = Settings()
