"""
Flatten a decoded table into the canonical text representation.

Output rules (see rules.py):
- rows joined by ROW_DELIMITER, no trailing delimiter
- fields joined by FIELD_DELIMITER
- empty fields rendered as EMPTY_FIELD_PLACEHOLDER so they survive the split

Values are not escaped. A field that itself contains "$" or a newline cannot be
told apart from a structural delimiter after normalization.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from .rules import EMPTY_FIELD_PLACEHOLDER, FIELD_DELIMITER, ROW_DELIMITER


def _field(value: str) -> str:
    return value if value != "" else EMPTY_FIELD_PLACEHOLDER


def normalize_row(row: Sequence[str]) -> str:
    return FIELD_DELIMITER.join(_field(value) for value in row)


def normalize(table: Iterable[Sequence[str]]) -> str:
    return ROW_DELIMITER.join(normalize_row(row) for row in table)
