from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Profile:
    name: str
    description: str
    include_groups: list[str]  # by Step.group


PROFILES: dict[str, Profile] = {
    "full": Profile(
        name="full",
        description="Complete provisioning (system, TPU runtime, venv, packages, kernel, verification)",
        include_groups=["system", "python", "tpu", "env", "packages", "kernel", "verify"],
    ),
    "system": Profile(
        name="system",
        description="OS-level steps (apt repositories, Python, TPU runtime) plus the venv the libtpu fallback installs into",
        include_groups=["system", "python", "tpu"],
    ),
    "python": Profile(
        name="python",
        description="User-level steps (venv, shell environment, packages, kernel)",
        include_groups=["python", "env", "packages", "kernel"],
    ),
    "verify": Profile(
        name="verify",
        description="Diagnostics only (versions and device enumeration)",
        include_groups=["verify"],
    ),
}
