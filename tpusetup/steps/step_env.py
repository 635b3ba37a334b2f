from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from ..core.config import Config
from ..core.model import Step, abort
from ..utils.shell_profile import apply_exports, upsert_exports
from ..utils.subproc import RunResult, Sink

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProfileExportsCommand:
    """Upsert ``export`` lines into the shell profile and apply them to this process."""

    profile: Path
    exports: dict[str, str] = field(default_factory=dict)

    def describe(self) -> str:
        names = ", ".join(self.exports) or "(nothing)"
        return f"upsert exports {names} into {self.profile}"

    def __call__(self, sink: Sink) -> RunResult:
        try:
            result = upsert_exports(self.profile, self.exports)
        except OSError as exc:
            sink.write(f"Cannot update {self.profile}: {exc}\n")
            return RunResult(command_str=self.describe(), exit_code=1, retryable=False)

        for name in result.added:
            sink.write(f"added {name} to {self.profile}\n")
        for name in result.updated:
            sink.write(f"updated {name} in {self.profile}\n")
        for name in result.unchanged:
            sink.write(f"{name} already set in {self.profile}\n")

        # Later steps (kernel registration, verification) run as children of this process.
        apply_exports(self.exports)
        logger.debug("Applied exports to the current process: %s", ", ".join(self.exports))
        return RunResult(command_str=self.describe(), exit_code=0)


def steps(config: Config) -> list[Step]:
    return [
        Step(
            number=0,
            name="Set up shell environment",
            description=f"PATH and library exports in {config.profile_file}",
            command=ProfileExportsCommand(profile=config.profile_file, exports=config.profile_exports),
            policy=abort(),
            group="env",
        ),
    ]
