from __future__ import annotations

import logging
import os
import shlex
import subprocess
from dataclasses import dataclass, field
from typing import Mapping, Protocol, Sequence

logger = logging.getLogger(__name__)

# Exit status the shell reports for a command it could not find.
EXIT_NOT_FOUND = 127


class Sink(Protocol):
    def write(self, text: str) -> int: ...


@dataclass(frozen=True)
class RunResult:
    command_str: str
    exit_code: int
    output: str = ""
    # False when repeating the same command cannot help (missing executable, local I/O error).
    retryable: bool = True

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


def run(
    args: Sequence[str],
    *,
    sink: Sink,
    cwd: str | None = None,
    env_overrides: Mapping[str, str] | None = None,
) -> RunResult:
    """Run a command, streaming combined stdout/stderr to *sink* line by line."""

    command_str = " ".join(shlex.quote(p) for p in args)
    env = {**os.environ, **(env_overrides or {})}

    logger.debug("exec: %s", command_str)
    try:
        proc = subprocess.Popen(
            list(args),
            cwd=cwd,
            env=env,
            text=True,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            bufsize=1,
            errors="replace",
        )
    except FileNotFoundError as exc:
        message = f"{exc.filename or args[0]}: command not found\n"
        sink.write(message)
        return RunResult(command_str=command_str, exit_code=EXIT_NOT_FOUND, output=message, retryable=False)

    captured: list[str] = []
    assert proc.stdout is not None
    finished = False
    try:
        with proc.stdout:
            for line in proc.stdout:
                captured.append(line)
                sink.write(line)
        finished = True
    finally:
        if not finished:
            # Interrupted or the sink failed: do not leave the child running.
            proc.kill()
            proc.wait()
    exit_code = proc.wait()

    return RunResult(command_str=command_str, exit_code=exit_code, output="".join(captured))


@dataclass(frozen=True)
class ShellCommand:
    """An external command; call it with a sink to run it."""

    args: tuple[str, ...]
    cwd: str | None = None
    env_overrides: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def of(cls, *args: str, env_overrides: Mapping[str, str] | None = None) -> "ShellCommand":
        return cls(args=tuple(args), env_overrides=dict(env_overrides or {}))

    @classmethod
    def pipeline(cls, script: str) -> "ShellCommand":
        """A bash pipeline that fails if any stage fails."""
        return cls(args=("bash", "-o", "pipefail", "-c", script))

    def describe(self) -> str:
        if self.args[:4] == ("bash", "-o", "pipefail", "-c"):
            return self.args[4]
        return " ".join(shlex.quote(p) for p in self.args)

    def __call__(self, sink: Sink) -> RunResult:
        return run(self.args, sink=sink, cwd=self.cwd, env_overrides=self.env_overrides)
