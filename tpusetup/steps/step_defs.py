from __future__ import annotations

from dataclasses import replace

from ..core.config import Config
from ..core.model import Step
from . import step_env, step_python, step_system, step_tpu, step_verify


def steps(config: Config) -> list[Step]:
    """The full provisioning sequence, numbered in execution order."""

    sequence: list[Step] = [
        *step_system.steps(config),
        *step_python.venv_steps(config),
        *step_tpu.steps(config),
        *step_env.steps(config),
        *step_python.package_steps(config),
        step_python.kernel_step(config),
        *step_verify.steps(config),
    ]
    return [replace(step, number=i) for i, step in enumerate(sequence, 1)]


def completion_notes(config: Config) -> list[str]:
    return [
        f"Please run: source {config.profile_file}",
        f"Activate the environment with: source {config.venv_dir / 'bin' / 'activate'}",
        f"Use the '{config.kernel_display_name}' kernel in Jupyter",
    ]
