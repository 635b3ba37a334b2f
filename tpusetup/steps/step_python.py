from __future__ import annotations

from ..core.config import Config, PackageSpec
from ..core.model import Step, abort, retry, warn
from ..utils.subproc import ShellCommand


def venv_pip(config: Config, *args: str) -> ShellCommand:
    return ShellCommand.of(str(config.venv_python), "-m", "pip", *args)


def package_install_command(config: Config, package: PackageSpec) -> ShellCommand:
    args = ["install", package.name]
    if package.find_links:
        args += ["-f", package.find_links]
    return venv_pip(config, *args)


def package_steps(config: Config) -> list[Step]:
    """One step per package so a failure never discards packages already installed."""

    attempts = config.package_retry_attempts
    backoff = config.retry_backoff_s
    out: list[Step] = []
    for package in config.packages:
        policy = warn(attempts, backoff_s=backoff) if package.optional else retry(attempts, backoff_s=backoff)
        out.append(
            Step(
                number=0,
                name=f"Install {package.name}",
                description="optional package" if package.optional else "required package",
                command=package_install_command(config, package),
                policy=policy,
                group="packages",
            )
        )
    return out


def venv_steps(config: Config) -> list[Step]:
    return [
        Step(
            number=0,
            name="Create virtual environment",
            description=f"{config.python_bin} -m venv {config.venv_dir}",
            command=ShellCommand.of(config.python_bin, "-m", "venv", str(config.venv_dir)),
            policy=abort(),
            group="python",
            check=lambda: config.venv_python.exists(),
        ),
        Step(
            number=0,
            name="Upgrade pip",
            description="pip install --upgrade pip inside the venv",
            command=venv_pip(config, "install", "--upgrade", "pip"),
            policy=retry(config.retry_attempts, backoff_s=config.retry_backoff_s),
            group="python",
        ),
    ]


def kernel_step(config: Config) -> Step:
    return Step(
        number=0,
        name="Register Jupyter kernel",
        description=f"ipykernel install --name {config.kernel_name}",
        command=ShellCommand.of(
            str(config.venv_python),
            "-m",
            "ipykernel",
            "install",
            "--user",
            "--name",
            config.kernel_name,
            "--display-name",
            config.kernel_display_name,
        ),
        policy=abort(),
        group="kernel",
    )
