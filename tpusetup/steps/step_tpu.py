from __future__ import annotations

import shlex

from ..core.config import Config
from ..core.model import Fallback, Step, abort, retry, warn
from ..utils.paths import sudo_prefix
from ..utils.subproc import ShellCommand
from .checks import file_contains_line
from .step_system import apt_get, refresh_index_step


def _as_root(config: Config, command: str) -> str:
    return " ".join([*sudo_prefix(config.use_sudo), command])


def signing_key_command(config: Config) -> ShellCommand:
    return ShellCommand.pipeline(
        f"curl -fsSL {shlex.quote(config.tpu_key_url)} "
        "| " + _as_root(config, f"gpg --dearmor --yes -o {shlex.quote(str(config.tpu_keyring))}")
    )


def source_entry_command(config: Config) -> ShellCommand:
    return ShellCommand.pipeline(
        f"echo {shlex.quote(config.tpu_source_line)} "
        "| " + _as_root(config, f"tee -a {shlex.quote(str(config.tpu_source_list))}") + " > /dev/null"
    )


def libtpu_fallback_command(config: Config) -> ShellCommand:
    return ShellCommand.of(
        str(config.venv_python),
        "-m",
        "pip",
        "install",
        config.libtpu_fallback_package,
        "-f",
        config.libtpu_find_links,
    )


def steps(config: Config) -> list[Step]:
    attempts = config.retry_attempts
    backoff = config.retry_backoff_s
    return [
        Step(
            number=0,
            name="Add TPU signing key",
            description=f"Install the package signing key into {config.tpu_keyring}",
            command=signing_key_command(config),
            policy=retry(attempts, backoff_s=backoff),
            group="tpu",
            check=lambda: config.tpu_keyring.exists(),
        ),
        Step(
            number=0,
            name="Add TPU package source",
            description=f"Register the TPU apt source in {config.tpu_source_list}",
            command=source_entry_command(config),
            policy=abort(),
            group="tpu",
            check=lambda: file_contains_line(config.tpu_source_list, config.tpu_source_line),
        ),
        refresh_index_step(config, "Refresh package index (TPU repository)"),
        Step(
            number=0,
            name="Install TPU runtime",
            description=f"apt-get install {config.tpu_runtime_package} (falls back to the libtpu wheel)",
            command=apt_get(config, "install", "-y", config.tpu_runtime_package),
            policy=warn(),
            group="tpu",
            fallback=Fallback(
                name=f"Install {config.libtpu_fallback_package} wheel",
                command=libtpu_fallback_command(config),
                policy=retry(attempts, backoff_s=backoff),
            ),
        ),
    ]
