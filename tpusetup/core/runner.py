from __future__ import annotations

import logging
import time
from typing import Callable, Iterable, Sequence

from .errors import SetupAborted
from .model import Command, FailurePolicy, Step, StepOutcome
from ..utils.log_format import iso_now
from ..utils.runlog import RunLog
from ..utils.subproc import RunResult

logger = logging.getLogger(__name__)

Sleep = Callable[[float], None]


def _invoke(command: Command, log: RunLog, *, dry_run: bool) -> RunResult:
    if dry_run:
        log.line(f"[dry-run] {command.describe()}")
        return RunResult(command_str=command.describe(), exit_code=0)
    return command(log)


def _attempt(
    label: str,
    command: Command,
    policy: FailurePolicy,
    log: RunLog,
    *,
    dry_run: bool,
    sleep: Sleep,
) -> tuple[RunResult, int]:
    """Run *command* up to ``policy.attempts`` times; return the last result."""

    attempt = 0
    while True:
        attempt += 1
        result = _invoke(command, log, dry_run=dry_run)
        if result.ok:
            return result, attempt
        if attempt >= policy.attempts:
            return result, attempt
        if not result.retryable:
            logger.debug("%s: exit %s is not retryable", label, result.exit_code)
            return result, attempt
        log.warning(
            f"{label}: attempt {attempt}/{policy.attempts} failed (exit code {result.exit_code}), "
            f"retrying in {policy.backoff_s:g}s"
        )
        sleep(policy.backoff_s)


def _already_satisfied(step: Step) -> bool:
    if step.check is None:
        return False
    try:
        return bool(step.check())
    except OSError as exc:
        logger.debug("State check for %s failed: %s", step.name, exc)
        return False


def run_step(step: Step, log: RunLog, *, dry_run: bool = False, sleep: Sleep = time.sleep) -> StepOutcome:
    """Run one step under its failure policy.

    Raises SetupAborted when the step (or an abort-policy fallback) fails for good.
    """

    start = time.monotonic()
    log.banner(f"{step.number}. {step.name}")

    if not dry_run and _already_satisfied(step):
        log.success(f"{step.name}: already satisfied, skipping")
        return StepOutcome(status="skipped", exit_code=0, attempts=0, duration_s=time.monotonic() - start)

    result, attempts = _attempt(step.name, step.command, step.policy, log, dry_run=dry_run, sleep=sleep)

    if result.ok:
        log.success(step.name)
        return StepOutcome(status="success", exit_code=0, attempts=attempts, duration_s=time.monotonic() - start)

    if step.policy.is_abort:
        raise SetupAborted(step.name, result.exit_code)

    log.warning(f"{step.name} failed (exit code {result.exit_code}); continuing")

    message = ""
    if step.fallback is not None:
        fb = step.fallback
        log.line(f"Trying fallback: {fb.name}")
        fb_result, _ = _attempt(fb.name, fb.command, fb.policy, log, dry_run=dry_run, sleep=sleep)
        if fb_result.ok:
            log.success(f"{fb.name} (fallback for {step.name})")
            message = "recovered by fallback"
        elif fb.policy.is_abort:
            raise SetupAborted(fb.name, fb_result.exit_code)
        else:
            log.warning(f"{fb.name} failed (exit code {fb_result.exit_code}); continuing")
            message = "fallback failed"

    return StepOutcome(
        status="warning",
        exit_code=result.exit_code,
        attempts=attempts,
        duration_s=time.monotonic() - start,
        message=message,
    )


def run(
    steps: Sequence[Step],
    *,
    log: RunLog,
    dry_run: bool = False,
    sleep: Sleep = time.sleep,
    notes: Iterable[str] = (),
) -> int:
    """Run *steps* strictly in order. Returns the process exit code."""

    log.line(f"Starting TPU setup at {iso_now()}")
    if log.path is not None:
        logger.debug("Run log: %s", log.path)

    for step in steps:
        try:
            run_step(step, log, dry_run=dry_run, sleep=sleep)
        except SetupAborted as exc:
            log.error(f"{exc.step_name} failed (exit code {exc.exit_code})")
            log.failed_at()
            return 1

    log.banner("Setup Complete!")
    log.line(f"TPU environment setup completed at {iso_now()}")
    for note in notes:
        log.line(note)
    return 0
