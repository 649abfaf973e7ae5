"""
Upload Parsers

Turns raw uploaded bytes into a structured payload.

Two formats are recognized, chosen by file extension:
- `.json`: a single JSON value
- anything else: comma-delimited text with a header row

KNOWN LIMITATION: Delimited text is split on bare commas. There is no
quoting or escaping, so a cell can never contain a comma.
"""

import json
import re
from pathlib import PurePath
from typing import Any, Optional


DELIMITER = ","

_LINE_BREAK = re.compile(r"\r?\n")


class ParseError(Exception):
    """Uploaded content could not be parsed (bad encoding, bad JSON, empty file)."""
    pass


def decode_content(raw_content: bytes) -> str:
    """
    Decode uploaded bytes as UTF-8 (a leading BOM is dropped).

    Raises:
        ParseError: If the bytes are not valid UTF-8 or hold no text
    """
    try:
        text = raw_content.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ParseError(f"File is not valid UTF-8 text: {e.reason}") from e

    if not text.strip():
        raise ParseError("File is empty")
    return text


def _reject_constant(name: str) -> Any:
    raise ParseError(f"Invalid JSON: {name} is not a valid JSON number")


def parse_json(text: str) -> Any:
    """
    Parse a single JSON value.

    NaN and Infinity literals are rejected so every parsed payload can be
    canonicalized later.
    """
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except json.JSONDecodeError as e:
        raise ParseError(f"Invalid JSON: {e.msg} (line {e.lineno}, column {e.colno})") from e
    except RecursionError as e:
        raise ParseError("Invalid JSON: nesting is too deep") from e


def parse_delimited(text: str) -> list[dict[str, Optional[str]]]:
    """
    Parse comma-delimited text with a header row.

    The first line names the fields. Every following non-blank line
    becomes one mapping, cells matched to headers by position. Headers and
    cells are whitespace-trimmed. Short rows get None for the missing
    fields; cells past the last header are dropped. No row is rejected.

    Example:
        >>> parse_delimited("id,amount\\n1,50\\n2,60")
        [{'id': '1', 'amount': '50'}, {'id': '2', 'amount': '60'}]
    """
    lines = _LINE_BREAK.split(text.strip())
    if not lines or not lines[0].strip():
        raise ParseError("Delimited file has no header row")

    headers = [h.strip() for h in lines[0].split(DELIMITER)]

    rows = []
    for line in lines[1:]:
        if not line.strip():
            continue
        cells = [c.strip() for c in line.split(DELIMITER)]
        rows.append({
            header: cells[i] if i < len(cells) else None
            for i, header in enumerate(headers)
        })
    return rows


def is_json_filename(filename: str) -> bool:
    return PurePath(filename).suffix.lower() == ".json"


def parse_content(filename: str, raw_content: bytes) -> Any:
    """
    Parse uploaded content, picking the parser from the filename.

    Raises:
        ParseError: If the content cannot be decoded or parsed
    """
    text = decode_content(raw_content)
    if is_json_filename(filename):
        return parse_json(text)
    return parse_delimited(text)
