"""Streamlit script: ``streamlit run app/main.py`` from the project root."""

from __future__ import annotations

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]

# Streamlit puts this script's directory, not the project root, on sys.path.
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.UI import run_app  # noqa: E402


def main() -> None:
    """Launch the Streamlit customer survey UI."""

    run_app()


if __name__ == "__main__":
    main()
