#!/usr/bin/env python3
"""Unit tests for idempotent shell profile edits (utils/shell_profile.py)."""

from __future__ import annotations

from pathlib import Path

from tpusetup.utils.shell_profile import (
    BLOCK_BEGIN,
    BLOCK_END,
    apply_exports,
    expand_value,
    upsert_exports,
)

EXPORTS = {
    "PATH": "$HOME/.local/bin:/home/u/tpu_env/bin:$PATH",
    "LD_LIBRARY_PATH": "/home/u/tpu_env/lib:$LD_LIBRARY_PATH",
}


def test_first_run_appends_managed_block(tmp_path: Path):
    profile = tmp_path / ".bashrc"
    profile.write_text("alias ll='ls -l'\n", encoding="utf-8")

    result = upsert_exports(profile, EXPORTS)

    assert result.added == ["PATH", "LD_LIBRARY_PATH"]
    assert result.changed
    lines = profile.read_text(encoding="utf-8").splitlines()
    assert lines[0] == "alias ll='ls -l'"
    assert lines[lines.index(BLOCK_BEGIN) + 1] == 'export PATH="$HOME/.local/bin:/home/u/tpu_env/bin:$PATH"'
    assert lines[-1] == BLOCK_END


def test_rerun_does_not_duplicate_exports(tmp_path: Path):
    profile = tmp_path / ".bashrc"

    upsert_exports(profile, EXPORTS)
    before = profile.read_text(encoding="utf-8")
    second = upsert_exports(profile, EXPORTS)

    assert not second.changed
    assert second.unchanged == ["PATH", "LD_LIBRARY_PATH"]
    assert profile.read_text(encoding="utf-8") == before
    assert before.count("export PATH=") == 1
    assert before.count(BLOCK_BEGIN) == 1


def test_changed_value_is_rewritten_in_place(tmp_path: Path):
    profile = tmp_path / ".bashrc"
    upsert_exports(profile, EXPORTS)
    profile.write_text(profile.read_text(encoding="utf-8") + "echo after\n", encoding="utf-8")

    result = upsert_exports(profile, {"PATH": "/opt/venv/bin:$PATH"})

    text = profile.read_text(encoding="utf-8")
    assert result.updated == ["PATH"]
    assert text.count("export PATH=") == 1
    assert 'export PATH="/opt/venv/bin:$PATH"' in text
    assert 'export LD_LIBRARY_PATH="/home/u/tpu_env/lib:$LD_LIBRARY_PATH"' in text
    assert text.endswith("echo after\n")


def test_identical_line_outside_block_counts_as_present(tmp_path: Path):
    profile = tmp_path / ".bashrc"
    profile.write_text('export PATH="$HOME/.local/bin:/home/u/tpu_env/bin:$PATH"\n', encoding="utf-8")

    result = upsert_exports(profile, {"PATH": EXPORTS["PATH"]})

    assert result.unchanged == ["PATH"]
    assert not result.changed
    assert BLOCK_BEGIN not in profile.read_text(encoding="utf-8")


def test_missing_profile_is_created(tmp_path: Path):
    profile = tmp_path / "home" / ".zshrc"

    upsert_exports(profile, {"PYTHONPATH": "/srv/lib"})

    assert profile.read_text(encoding="utf-8") == f'{BLOCK_BEGIN}\nexport PYTHONPATH="/srv/lib"\n{BLOCK_END}\n'


def test_symlinked_profile_is_written_through(tmp_path: Path):
    dotfiles = tmp_path / "dotfiles"
    dotfiles.mkdir()
    real = dotfiles / "bashrc"
    real.write_text("# mine\n", encoding="utf-8")
    link = tmp_path / ".bashrc"
    link.symlink_to(real)

    upsert_exports(link, EXPORTS)

    assert link.is_symlink()
    assert BLOCK_BEGIN in real.read_text(encoding="utf-8")


def test_expand_value_follows_shell_rules():
    env = {"HOME": "/home/u", "PATH": "/usr/bin:/bin"}

    assert expand_value("$HOME/.local/bin:$PATH", env) == "/home/u/.local/bin:/usr/bin:/bin"
    assert expand_value("${HOME}/lib:$LD_LIBRARY_PATH", env) == "/home/u/lib"


def test_apply_exports_updates_given_environment():
    env = {"HOME": "/home/u", "PATH": "/usr/bin"}

    apply_exports({"PATH": "$HOME/.local/bin:$PATH", "PYTHONPATH": "/srv:$PYTHONPATH"}, env)

    assert env["PATH"] == "/home/u/.local/bin:/usr/bin"
    assert env["PYTHONPATH"] == "/srv"


def test_block_without_end_marker_is_repaired_not_duplicated(tmp_path: Path):
    profile = tmp_path / ".bashrc"
    profile.write_text(
        f"alias ll='ls -l'\n{BLOCK_BEGIN}\nexport PATH=\"/old/bin:$PATH\"\n",
        encoding="utf-8",
    )

    result = upsert_exports(profile, EXPORTS)

    assert result.updated == ["PATH"]
    assert result.added == ["LD_LIBRARY_PATH"]
    lines = profile.read_text(encoding="utf-8").splitlines()
    assert lines.count(BLOCK_BEGIN) == 1
    assert lines.count(BLOCK_END) == 1
    assert lines[-1] == BLOCK_END
    assert sum(ln.startswith("export PATH=") for ln in lines) == 1

    again = upsert_exports(profile, EXPORTS)
    assert not again.changed
