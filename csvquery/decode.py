"""
CSV decoding: raw bytes or text -> Table.

Rules:
- Comma delimited, default quoting. Quoted fields may hold commas and newlines.
- Ragged rows are kept as they are; no column count is enforced.
- Blank lines carry no row.
- Unbalanced or stray quoting is a MalformedCSV error, never a partial table.
"""

from __future__ import annotations

import csv
import io
import logging
from typing import List

from charset_normalizer import from_bytes

from .acquire import RawContent
from .errors import MalformedCSV
from .rules import INPUT_DELIMITER

logger = logging.getLogger(__name__)

Row = List[str]
Table = List[Row]

_UTF8_BOM = b"\xef\xbb\xbf"


def bytes_to_text(raw: bytes) -> str:
    """
    Decode input bytes to text.

    - A UTF-8 BOM is honoured and stripped.
    - Otherwise the encoding is detected best-effort via charset-normalizer.
    - If that decode fails, UTF-8 is tried, then UTF-8 with replacement characters.
    """
    if not raw:
        return ""
    if raw.startswith(_UTF8_BOM):
        return raw.decode("utf-8-sig")

    match = from_bytes(raw).best()
    decode_used = match.encoding if match is not None else "utf-8"

    try:
        return raw.decode(decode_used)
    except (UnicodeDecodeError, LookupError):
        pass

    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        # Last resort: keep going deterministically rather than reject the file
        logger.warning("input is not valid %s or utf-8; decoding with replacement", decode_used)
        return raw.decode("utf-8", errors="replace")


def _reject_bare_quotes(text: str) -> None:
    """
    A quote may only open a field. csv.reader takes a quote in the middle of an
    unquoted field as a literal, so those are caught here.
    """
    line = 1
    in_quotes = False
    field_start = True
    i, n = 0, len(text)
    while i < n:
        ch = text[i]
        if in_quotes:
            if ch == '"':
                if i + 1 < n and text[i + 1] == '"':
                    i += 1
                else:
                    in_quotes = False
            elif ch == "\n":
                line += 1
        elif ch == '"':
            if not field_start:
                raise MalformedCSV(f'Malformed CSV at line {line}: bare " in non-quoted field', line=line)
            in_quotes = True
        elif ch == INPUT_DELIMITER or ch == "\n":
            if ch == "\n":
                line += 1
            field_start = True
            i += 1
            continue
        field_start = False
        i += 1


def decode_text(text: str) -> Table:
    table: Table = []
    if not text:
        return table

    # CRLF inside quoted fields reads back as LF
    text = text.replace("\r\n", "\n")

    reader = csv.reader(io.StringIO(text, newline=""), delimiter=INPUT_DELIMITER, strict=True)
    try:
        for row in reader:
            if not row:
                continue
            table.append(row)
    except csv.Error as e:
        raise MalformedCSV(f"Malformed CSV at line {reader.line_num}: {e}", line=reader.line_num) from e

    if '"' in text:
        _reject_bare_quotes(text)
    return table


def decode_bytes(raw: bytes) -> Table:
    return decode_text(bytes_to_text(raw))


def decode(content: RawContent) -> Table:
    table = decode_bytes(content.data)
    logger.debug("decoded %d rows from %s (%s)", len(table), content.origin, content.provenance.value)
    return table
