from __future__ import annotations

import re

_INT_RE = re.compile(r"^\s*[+-]?\d+\s*$")


def parse_int(token: str | None) -> int | None:
    text = str(token or "")
    if not _INT_RE.match(text):
        return None
    return int(text.strip())


def is_blank(value: str | None) -> bool:
    return not str(value or "").strip()
