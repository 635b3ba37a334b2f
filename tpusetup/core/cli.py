from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Iterable

from .. import __version__
from .config import Config, explicit_config_path
from .errors import ConfigError
from .model import Step
from .profiles import PROFILES
from .runner import run
from ..steps.step_defs import completion_notes, steps as all_steps
from ..utils.log_format import iso_now
from ..utils.runlog import RunLog

logger = logging.getLogger(__name__)

EXIT_CONFIG_ERROR = 1
EXIT_NO_STEPS = 2
EXIT_INTERRUPTED = 130


def _parse_csv(raw: str | None) -> list[str] | None:
    if raw is None:
        return None
    raw = raw.strip()
    if not raw:
        return []
    # Commas win over spaces so multi-word step names can be selected.
    parts = raw.split(",") if "," in raw else raw.split()
    return [p.strip() for p in parts if p.strip()]


def _list_profiles() -> None:
    print("Available profiles:")
    for name, profile in sorted(PROFILES.items()):
        print(f"  {name:<8} - {profile.description}")


def _list_steps(steps: list[Step]) -> None:
    for s in steps:
        print(f"  {s.number:>2}  {s.name:<40} [{s.group}] {s.description}")


def _select_steps(
    steps: list[Step],
    run_steps: list[str] | None,
    skip_steps: list[str] | None,
    profile: str | None,
) -> list[Step]:
    by_number = {str(s.number): s for s in steps}
    by_name = {s.name.lower(): s for s in steps}

    selected: list[Step] = []

    if run_steps is not None:
        for token in run_steps:
            if token in by_number:
                selected.append(by_number[token])
                continue
            s = by_name.get(token.lower())
            if s is not None:
                selected.append(s)
                continue
            raise SystemExit(f"Unknown step selector: {token!r}")
    elif profile is not None:
        include = set(PROFILES[profile].include_groups)
        selected = [s for s in steps if s.group in include]
    else:
        selected = list(steps)

    if skip_steps:
        skip = {t.lower() for t in skip_steps}
        selected = [s for s in selected if str(s.number) not in skip and s.name.lower() not in skip]

    # Deduplicate, then restore declaration order.
    seen: set[int] = set()
    uniq: list[Step] = []
    for s in selected:
        if s.number in seen:
            continue
        seen.add(s.number)
        uniq.append(s)

    return sorted(uniq, key=lambda s: s.number)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tpu-setup",
        description="Provision this machine for TPU machine learning.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", help="Path to a JSON config file")
    parser.add_argument("--log-file", help="Append the run transcript to this file (default: setup_log.txt)")
    parser.add_argument("--profile", choices=sorted(PROFILES.keys()), help="Run a predefined profile")
    parser.add_argument("--list-profiles", action="store_true", help="List profiles and exit")
    parser.add_argument("--list-steps", action="store_true", help="List steps and exit")
    parser.add_argument("--run-steps", help="Comma/space-separated list of step numbers or names")
    parser.add_argument("--skip-steps", help="Comma/space-separated list of step numbers or names")
    parser.add_argument("--dry-run", action="store_true", help="Print commands instead of running them")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--no-color", action="store_true", help="Disable colored markers")
    return parser


def _configure_logging(log: RunLog, *, verbose: bool) -> logging.Handler:
    handler = logging.StreamHandler(log)
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    root = logging.getLogger()
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if verbose else logging.INFO)
    return handler


def main(argv: Iterable[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    if args.list_profiles:
        _list_profiles()
        return 0

    config_path = Path(args.config) if args.config else explicit_config_path()
    try:
        config = Config(config_path, required=config_path is not None)
    except ConfigError as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return EXIT_CONFIG_ERROR
    steps = all_steps(config)

    if args.list_steps:
        _list_steps(steps)
        return 0

    selected = _select_steps(
        steps,
        run_steps=_parse_csv(args.run_steps),
        skip_steps=_parse_csv(args.skip_steps),
        profile=args.profile,
    )

    if not selected:
        print("No steps selected.")
        return EXIT_NO_STEPS

    log_path = Path(args.log_file) if args.log_file else config.log_file
    log = RunLog(log_path, color=False if args.no_color else None)

    with log:
        handler = _configure_logging(log, verbose=args.verbose)
        logger.debug("Selected %d of %d steps", len(selected), len(steps))
        try:
            return run(selected, log=log, dry_run=args.dry_run, notes=completion_notes(config))
        except KeyboardInterrupt:
            log.line("")
            log.error("Interrupted by user")
            log.line(f"Setup interrupted at {iso_now()}")
            return EXIT_INTERRUPTED
        finally:
            logging.getLogger().removeHandler(handler)
