from __future__ import annotations

from ..core.config import Config
from ..core.model import Step, abort, retry
from ..utils.paths import sudo_prefix
from ..utils.subproc import ShellCommand
from .checks import apt_packages_installed, has_executable, ppa_listed


def apt_get(config: Config, *args: str) -> ShellCommand:
    # sudo resets the environment; DEBIAN_FRONTEND has to go through env.
    return ShellCommand.of(
        *sudo_prefix(config.use_sudo),
        "env",
        "DEBIAN_FRONTEND=noninteractive",
        "apt-get",
        *args,
    )


def refresh_index_step(config: Config, name: str = "Refresh package index") -> Step:
    return Step(
        number=0,
        name=name,
        description="apt-get update (network-bound, retried)",
        command=apt_get(config, "update"),
        policy=retry(config.retry_attempts, backoff_s=config.retry_backoff_s),
        group="system",
    )


def steps(config: Config) -> list[Step]:
    py = config.python_bin
    return [
        refresh_index_step(config),
        Step(
            number=0,
            name="Install base system packages",
            description="software-properties-common, curl and gnupg",
            command=apt_get(config, "install", "-y", "software-properties-common", "curl", "gnupg"),
            policy=retry(config.retry_attempts, backoff_s=config.retry_backoff_s),
            group="system",
        ),
        Step(
            number=0,
            name="Add Python repository",
            description=f"Register {config.python_repository}",
            command=ShellCommand.of(*sudo_prefix(config.use_sudo), "add-apt-repository", "-y", config.python_repository),
            policy=abort(),
            group="system",
            check=lambda: ppa_listed(config.python_repository),
        ),
        refresh_index_step(config, "Refresh package index (Python repository)"),
        Step(
            number=0,
            name=f"Install Python {config.python_version}",
            description=f"{py} with venv and headers",
            command=apt_get(config, "install", "-y", py, f"{py}-venv", f"{py}-dev"),
            policy=retry(config.retry_attempts, backoff_s=config.retry_backoff_s),
            group="system",
            check=lambda: has_executable(py) and apt_packages_installed(py, f"{py}-venv", f"{py}-dev"),
        ),
    ]
