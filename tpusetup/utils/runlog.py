from __future__ import annotations

import sys
from pathlib import Path
from typing import TextIO

from .log_format import colorize, failed_at_line, format_banner, format_marker, iso_now


class RunLog:
    """Append-only run transcript, tee'd to the console.

    Every write goes to both sinks in the same order and is flushed right away,
    so an interrupted run never loses or corrupts what was already written.
    Color escapes are only ever added on the console side.
    """

    def __init__(
        self,
        path: Path | None,
        *,
        console: TextIO | None = None,
        color: bool | None = None,
    ) -> None:
        self.path = path
        self._console = console if console is not None else sys.stdout
        if color is None:
            isatty = getattr(self._console, "isatty", None)
            color = bool(isatty and isatty())
        self.color = color
        self._file: TextIO | None = None

    def open(self) -> "RunLog":
        if self.path is not None and self._file is None:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._file = open(self.path, "a", encoding="utf-8")
        return self

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self) -> "RunLog":
        return self.open()

    def __exit__(self, *exc) -> None:
        self.close()

    def _emit(self, text: str, color: str | None = None) -> None:
        if self._file is not None:
            self._file.write(text)
            self._file.flush()
        shown = colorize(text, color) if (color and self.color) else text
        self._console.write(shown)
        self._console.flush()

    # File-like API so logging.StreamHandler and subprocess streaming can target us.
    def write(self, text: str) -> int:
        if text:
            self._emit(text)
        return len(text)

    def flush(self) -> None:
        if self._file is not None:
            self._file.flush()
        self._console.flush()

    def line(self, text: str = "") -> None:
        self._emit(text + "\n")

    def banner(self, title: str) -> None:
        self._emit(format_banner(title))

    def success(self, text: str) -> None:
        self._emit(format_marker("OK", text), "green")

    def warning(self, text: str) -> None:
        self._emit(format_marker("WARN", text), "yellow")

    def error(self, text: str) -> None:
        self._emit(format_marker("ERROR", text), "red")

    def failed_at(self) -> None:
        self._emit(failed_at_line(iso_now()))
