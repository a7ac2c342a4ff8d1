"""
Comma-separated contact lists.

The reader is line based and not a full RFC 4180 parser: a quoted field
cannot span physical lines. The header row goes through the same
quote-aware tokenizer as data rows, so a quoted header such as
`"Name, Full"` stays one column where a plain comma split would make two.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, Iterable, List

from .models import SUPPORTED_FIELDS, Contact

logger = logging.getLogger(__name__)

BOM = "\ufeff"
LINE_SPLIT = re.compile(r"\r\n|\n")
TABULAR_HEADERS = [item.label for item in SUPPORTED_FIELDS]


def _strip_quotes(value: str) -> str:
    if value.startswith('"'):
        value = value[1:]
    if value.endswith('"'):
        value = value[:-1]
    return value


def _tokenize_line(line: str) -> List[str]:
    """
    Split one physical line on commas that sit outside a quoted section.

    Quote characters stay in the raw tokens; callers strip and unescape them.
    A quoted field cannot span physical lines.
    """
    tokens: List[str] = []
    current: List[str] = []
    in_quotes = False
    for char in line:
        if char == '"':
            in_quotes = not in_quotes
            current.append(char)
        elif char == "," and not in_quotes:
            tokens.append("".join(current))
            current = []
        else:
            current.append(char)
    tokens.append("".join(current))
    return tokens


def _clean_cell(raw: str) -> str:
    return _strip_quotes(raw).replace('""', '"')


def parse_tabular(text: str) -> List[Dict[str, str]]:
    """
    Parse comma-separated text into header-keyed rows.

    The first line is the header row. Short rows are padded with empty
    strings, surplus cells are dropped and blank lines are skipped.
    """
    if not text:
        return []
    lines = LINE_SPLIT.split(text)
    header_line = lines[0]
    if header_line.startswith(BOM):
        header_line = header_line[len(BOM):]
    headers = [_strip_quotes(cell.strip()) for cell in _tokenize_line(header_line)]

    rows: List[Dict[str, str]] = []
    skipped = 0
    for raw_line in lines[1:]:
        line = raw_line.strip()
        if not line:
            skipped += 1
            continue
        values = [_clean_cell(token) for token in _tokenize_line(line)]
        row: Dict[str, str] = {}
        for index, header in enumerate(headers):
            row[header] = values[index] if index < len(values) else ""
        rows.append(row)
    logger.debug("Parsed %d tabular rows (%d blank lines skipped)", len(rows), skipped)
    return rows


def escape_cell(value: str) -> str:
    value = value or ""
    if '"' in value or "," in value or "\n" in value:
        return '"' + value.replace('"', '""') + '"'
    return value


def write_tabular(contacts: Iterable[Contact]) -> str:
    rows = [
        ",".join(escape_cell(value) for value in contact.field_values()) for contact in contacts
    ]
    logger.debug("Writing %d tabular rows", len(rows))
    return BOM + ",".join(TABULAR_HEADERS) + "\n" + "\n".join(rows)


__all__ = ["BOM", "TABULAR_HEADERS", "escape_cell", "parse_tabular", "write_tabular"]
