from __future__ import annotations

import io
import os
import tempfile
from pathlib import Path

import pytest

from tpusetup.utils.runlog import RunLog
from tpusetup.utils.subproc import RunResult


# Safety default: during pytest, never read the user's real tpusetup config.
os.environ.setdefault(
    "TPUSETUP_CONFIG_DIR",
    tempfile.mkdtemp(prefix="tpusetup-test-config-"),
)
os.environ.pop("TPUSETUP_CONFIG_PATH", None)


class FakeCommand:
    """Scripted stand-in for an external command.

    *exit_codes* is consumed one entry per call; the last entry repeats.
    """

    def __init__(self, name, exit_codes=(0,), *, retryable=True, journal=None):
        self.name = name
        self.exit_codes = list(exit_codes) or [0]
        self.retryable = retryable
        self.journal = journal
        self.calls = 0

    def describe(self) -> str:
        return f"fake {self.name}"

    def __call__(self, sink) -> RunResult:
        code = self.exit_codes[min(self.calls, len(self.exit_codes) - 1)]
        self.calls += 1
        if self.journal is not None:
            self.journal.append(self.name)
        sink.write(f"{self.name}: attempt {self.calls} -> exit {code}\n")
        return RunResult(command_str=self.describe(), exit_code=code, retryable=self.retryable)


@pytest.fixture
def journal() -> list[str]:
    """Names of fake commands in invocation order."""
    return []


@pytest.fixture
def fake_command(journal):
    def _make(name: str, exit_codes=(0,), *, retryable: bool = True) -> FakeCommand:
        return FakeCommand(name, exit_codes, retryable=retryable, journal=journal)

    return _make


@pytest.fixture
def console() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def run_log(tmp_path: Path, console: io.StringIO):
    log = RunLog(tmp_path / "setup_log.txt", console=console, color=False)
    with log:
        yield log


@pytest.fixture
def sleeps() -> list[float]:
    return []


@pytest.fixture
def fake_sleep(sleeps):
    return sleeps.append
