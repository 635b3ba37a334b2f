from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Protocol

from ..utils.subproc import RunResult, Sink

ABORT = "abort"
WARN = "warn"

DEFAULT_BACKOFF_S = 5.0


class Command(Protocol):
    def describe(self) -> str: ...

    def __call__(self, sink: Sink) -> RunResult: ...


@dataclass(frozen=True)
class FailurePolicy:
    on_failure: str  # abort|warn
    attempts: int = 1
    backoff_s: float = DEFAULT_BACKOFF_S

    def __post_init__(self) -> None:
        if self.on_failure not in (ABORT, WARN):
            raise ValueError(f"Unknown failure policy: {self.on_failure!r}")
        if self.attempts < 1:
            raise ValueError("attempts must be >= 1")

    @property
    def is_abort(self) -> bool:
        return self.on_failure == ABORT


def abort() -> FailurePolicy:
    return FailurePolicy(ABORT)


def retry(attempts: int, *, backoff_s: float = DEFAULT_BACKOFF_S) -> FailurePolicy:
    """Up to *attempts* invocations; exhaustion is treated as abort."""
    return FailurePolicy(ABORT, attempts=attempts, backoff_s=backoff_s)


def warn(attempts: int = 1, *, backoff_s: float = DEFAULT_BACKOFF_S) -> FailurePolicy:
    return FailurePolicy(WARN, attempts=attempts, backoff_s=backoff_s)


@dataclass(frozen=True)
class Fallback:
    name: str
    command: Command
    policy: FailurePolicy = FailurePolicy(WARN)


@dataclass(frozen=True)
class Step:
    number: int
    name: str
    description: str
    command: Command
    policy: FailurePolicy = FailurePolicy(ABORT)
    group: str = "system"
    fallback: Optional[Fallback] = None
    # Desired-state probe: True means the step's effect is already in place.
    check: Optional[Callable[[], bool]] = None


@dataclass(frozen=True)
class StepOutcome:
    status: str  # success|skipped|warning
    exit_code: int
    attempts: int
    duration_s: float
    message: str = ""
