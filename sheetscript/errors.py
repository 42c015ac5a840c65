from __future__ import annotations

from pathlib import Path

NOT_FOUND = "NOT_FOUND"
MALFORMED_HEADER = "MALFORMED_HEADER"


class SheetScriptError(RuntimeError):
    def __init__(self, *, code: str, message: str) -> None:
        super().__init__(message)
        self.code = str(code)
        self.message = str(message)


class SourceNotFoundError(SheetScriptError):
    """Raised when a required sheet cannot be opened."""

    def __init__(self, path: str | Path, *, detail: str | None = None) -> None:
        message = f"required sheet not found: {path}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(code=NOT_FOUND, message=message)
        self.path = Path(path)


class MalformedHeaderError(SheetScriptError):
    def __init__(self, path: str | Path, column: str, *, detail: str | None = None) -> None:
        source = Path(path).name or str(path)
        message = f"{source}: required column '{column}' is missing from the header"
        if detail:
            message = f"{source}: {detail} (expected column '{column}')"
        super().__init__(code=MALFORMED_HEADER, message=message)
        self.path = Path(path)
        self.column = column
