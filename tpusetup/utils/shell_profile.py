"""Idempotent edits to the user's shell profile.

Exports are kept in a marked block so re-running the setup updates values in
place instead of appending another copy every time.
"""

from __future__ import annotations

import os
import re
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, MutableMapping

BLOCK_BEGIN = "# >>> tpusetup >>>"
BLOCK_END = "# <<< tpusetup <<<"

_EXPORT_RE = re.compile(r'^\s*export\s+([A-Za-z_][A-Za-z0-9_]*)=(.*)$')
_VAR_RE = re.compile(r"\$(?:\{([A-Za-z_][A-Za-z0-9_]*)\}|([A-Za-z_][A-Za-z0-9_]*))")


@dataclass
class UpsertResult:
    path: Path
    added: list[str] = field(default_factory=list)
    updated: list[str] = field(default_factory=list)
    unchanged: list[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.added or self.updated)


def export_line(name: str, value: str) -> str:
    return f'export {name}="{value}"'


def _read(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return ""


def _write_atomic(path: Path, text: str) -> None:
    # Profiles are often symlinked from a dotfiles repo; write through the link.
    target = path.resolve()
    target.parent.mkdir(parents=True, exist_ok=True)
    tmp_fd, tmp_path = tempfile.mkstemp(prefix=".tpusetup.", suffix=".tmp", dir=str(target.parent))
    try:
        with os.fdopen(tmp_fd, "w", encoding="utf-8") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        if target.exists():
            os.chmod(tmp_path, target.stat().st_mode & 0o777)
        os.replace(tmp_path, target)
    finally:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)


def _split_block(lines: list[str]) -> tuple[int, int] | None:
    try:
        begin = lines.index(BLOCK_BEGIN)
    except ValueError:
        return None
    try:
        end = lines.index(BLOCK_END, begin + 1)
    except ValueError:
        # A block that lost its end marker runs to EOF.
        end = len(lines)
    return begin, end


def upsert_exports(path: Path, exports: Mapping[str, str]) -> UpsertResult:
    """Make sure *path* exports every name in *exports* exactly once.

    - an identical ``export`` line anywhere in the file counts as present
    - a managed export with a different value is rewritten in place
    - anything else is appended to the managed block (created on first use)
    """

    result = UpsertResult(path=path)
    text = _read(path)
    lines = text.splitlines()

    span = _split_block(lines)
    block: list[str] = lines[span[0] + 1 : span[1]] if span else []
    outside = lines[: span[0]] + lines[span[1] + 1 :] if span else lines
    outside_set = {ln.strip() for ln in outside}

    managed: dict[str, int] = {}
    for idx, ln in enumerate(block):
        m = _EXPORT_RE.match(ln)
        if m:
            managed[m.group(1)] = idx

    for name, value in exports.items():
        wanted = export_line(name, value)
        if name in managed:
            idx = managed[name]
            if block[idx].strip() == wanted:
                result.unchanged.append(name)
            else:
                block[idx] = wanted
                result.updated.append(name)
            continue
        if wanted in outside_set:
            result.unchanged.append(name)
            continue
        managed[name] = len(block)
        block.append(wanted)
        result.added.append(name)

    unterminated = span is not None and span[1] == len(lines)
    if not result.changed and not unterminated:
        return result

    if span:
        new_lines = lines[: span[0] + 1] + block + (lines[span[1] :] or [BLOCK_END])
    else:
        new_lines = list(lines)
        if new_lines and new_lines[-1].strip():
            new_lines.append("")
        new_lines += [BLOCK_BEGIN] + block + [BLOCK_END]

    _write_atomic(path, "\n".join(new_lines) + "\n")
    return result


def expand_value(value: str, environ: Mapping[str, str]) -> str:
    """Expand ``$NAME`` / ``${NAME}`` the way the shell would (unset -> empty)."""

    def _sub(m: re.Match[str]) -> str:
        return environ.get(m.group(1) or m.group(2), "")

    expanded = _VAR_RE.sub(_sub, value)
    # Drop empty PATH-style segments left behind by unset variables.
    if ":" in expanded:
        expanded = ":".join(p for p in expanded.split(":") if p)
    return expanded


def apply_exports(exports: Mapping[str, str], environ: MutableMapping[str, str] | None = None) -> None:
    """Apply exports to a process environment (``os.environ`` by default)."""

    env = os.environ if environ is None else environ
    for name, value in exports.items():
        env[name] = expand_value(value, env)
