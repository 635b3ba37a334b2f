from __future__ import annotations


class SetupAborted(Exception):
    """A step with an abort policy failed; nothing after it may run."""

    def __init__(self, step_name: str, exit_code: int, message: str = "") -> None:
        self.step_name = step_name
        self.exit_code = exit_code
        super().__init__(message or f"{step_name} failed (exit code {exit_code})")


class ConfigError(Exception):
    """A config file was named but cannot be read or parsed."""
