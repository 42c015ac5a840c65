from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator
from pathlib import Path

from sheetscript.errors import SourceNotFoundError

logger = logging.getLogger(__name__)

QUOTE = '"'
DEFAULT_SEPARATOR = ","
_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")


def _physical_lines(text: str) -> list[str]:
    if not text:
        return []
    lines = _LINE_BREAK_RE.split(text)
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def _toggles_quote_state(line: str) -> bool:
    """True when the line leaves an odd number of unescaped quotes open."""
    toggled = False
    idx = 0
    while idx < len(line):
        if line[idx] != QUOTE:
            idx += 1
            continue
        if idx + 1 < len(line) and line[idx + 1] == QUOTE:
            idx += 2
            continue
        toggled = not toggled
        idx += 1
    return toggled


def iter_logical_records(lines: Iterable[str]) -> Iterator[str]:
    buffer: list[str] = []
    in_quotes = False
    for line in lines:
        buffer.append(line)
        if _toggles_quote_state(line):
            in_quotes = not in_quotes
        if not in_quotes:
            yield "\n".join(buffer)
            buffer = []
    # an unterminated quote runs to end of input
    if buffer:
        yield "\n".join(buffer)


def split_fields(record: str, separator: str = DEFAULT_SEPARATOR) -> list[str]:
    values: list[str] = []
    current: list[str] = []
    in_quotes = False
    idx = 0
    while idx < len(record):
        char = record[idx]
        if in_quotes:
            if char == QUOTE:
                if idx + 1 < len(record) and record[idx + 1] == QUOTE:
                    current.append(QUOTE)
                    idx += 1
                else:
                    in_quotes = False
            else:
                current.append(char)
        elif char == QUOTE:
            in_quotes = True
        elif char == separator:
            values.append("".join(current))
            current = []
        else:
            current.append(char)
        idx += 1
    values.append("".join(current))
    return values


def read_records(text: str, separator: str = DEFAULT_SEPARATOR) -> Iterator[list[str]]:
    """Yield the fields of each logical record in ``text``.

    Quoted fields may hold the separator and line breaks verbatim, and ``""``
    inside a quoted field decodes to a single quote. The iterator is forward-only;
    call again with the same text to restart.
    """
    if len(separator) != 1:
        raise ValueError("separator must be a single character")
    for record in iter_logical_records(_physical_lines(text)):
        yield split_fields(record, separator)


def read_source_text(path: str | Path, *, encoding: str = "utf-8") -> str:
    source = Path(path)
    try:
        return source.read_text(encoding=encoding)
    except FileNotFoundError as exc:
        raise SourceNotFoundError(source) from exc
    except IsADirectoryError as exc:
        raise SourceNotFoundError(source, detail="path is a directory") from exc
    except PermissionError as exc:
        raise SourceNotFoundError(source, detail="permission denied") from exc
    except UnicodeDecodeError as exc:
        raise SourceNotFoundError(source, detail=f"not valid {encoding}") from exc


def load_records(
    path: str | Path,
    *,
    separator: str = DEFAULT_SEPARATOR,
    encoding: str = "utf-8",
) -> list[list[str]]:
    records = list(read_records(read_source_text(path, encoding=encoding), separator))
    logger.debug("read %d records from %s", len(records), path)
    return records
