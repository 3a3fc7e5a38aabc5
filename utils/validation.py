from __future__ import annotations

from typing import Optional

from utils.errors import ErrorCode, LedgerError

MAX_USER_NAME = 50
MAX_FOREST_NAME = 100
MAX_DESCRIPTION = 500
MAX_MILESTONE_TITLE = 100
MAX_CATEGORY = 50
MAX_EVIDENCE_URL = 256

MIN_DIFFICULTY = 1
MAX_DIFFICULTY = 5


def check_text(value: Optional[str], max_length: int, required: bool = False) -> None:
    """Raise InvalidParameters when a text field is missing, blank or too long."""
    if value is None:
        if required:
            raise LedgerError(ErrorCode.INVALID_PARAMETERS)
        return
    if not isinstance(value, str) or len(value) > max_length:
        raise LedgerError(ErrorCode.INVALID_PARAMETERS)
    if required and not value.strip():
        raise LedgerError(ErrorCode.INVALID_PARAMETERS)


def check_difficulty(difficulty: int) -> None:
    if isinstance(difficulty, bool) or not isinstance(difficulty, int):
        raise LedgerError(ErrorCode.INVALID_PARAMETERS)
    if not MIN_DIFFICULTY <= difficulty <= MAX_DIFFICULTY:
        raise LedgerError(ErrorCode.INVALID_PARAMETERS)
