from __future__ import annotations

from datetime import datetime, timezone

BANNER_RULE = "=" * 44

_ANSI = {
    "green": "\033[32m",
    "yellow": "\033[33m",
    "red": "\033[31m",
}
_ANSI_RESET = "\033[0m"


def iso_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")


def format_banner(title: str) -> str:
    return f"{BANNER_RULE}\n{title}\n{BANNER_RULE}\n"


def format_marker(tag: str, text: str) -> str:
    """Plain marker line, e.g. ``[OK] Install Python 3.10``."""

    return f"[{tag}] {text}\n"


def colorize(text: str, color: str) -> str:
    code = _ANSI.get(color)
    if code is None:
        return text
    # Keep the trailing newline outside the escape so terminals don't bleed color.
    if text.endswith("\n"):
        return f"{code}{text[:-1]}{_ANSI_RESET}\n"
    return f"{code}{text}{_ANSI_RESET}"


def failed_at_line(ts: str | None = None) -> str:
    return f"Setup failed at {ts or iso_now()}\n"
