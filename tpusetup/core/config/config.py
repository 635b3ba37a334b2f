"""tpusetup Config implementation."""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from .defaults import DEFAULTS as _DEFAULTS
from .file_storage import load_config_settings
from .paths import config_file_path
from ._props import bool_prop, float_prop, int_prop, str_prop, str_value
from ...utils.paths import default_shell_profile, expand_path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PackageSpec:
    name: str
    find_links: Optional[str] = None
    # Optional packages only warn when they cannot be installed.
    optional: bool = False


def _parse_package(entry: Any) -> PackageSpec | None:
    if isinstance(entry, str):
        name = entry.strip()
        return PackageSpec(name=name) if name else None
    if isinstance(entry, dict):
        name = str(entry.get("name") or "").strip()
        if not name:
            return None
        find_links = entry.get("find_links") or None
        return PackageSpec(name=name, find_links=find_links, optional=bool(entry.get("optional", False)))
    return None


class Config:
    """Read-only provisioning settings (JSON file merged over DEFAULTS)."""

    DEFAULTS = _DEFAULTS

    def __init__(
        self,
        config_file: Path | None = None,
        *,
        required: bool = False,
        overrides: dict[str, Any] | None = None,
    ):
        # Recompute at runtime so test harnesses can set env vars in conftest.
        self.CONFIG_FILE = config_file if config_file is not None else config_file_path()
        self._settings: dict[str, Any] = load_config_settings(
            config_file=self.CONFIG_FILE,
            defaults=copy.deepcopy(self.DEFAULTS),
            required=required,
        )
        if overrides:
            self._settings.update(overrides)

    python_version = str_prop("python_version", default="3.10")
    kernel_name = str_prop("kernel_name", default="tpu_kernel")
    python_repository = str_prop("python_repository", default="ppa:deadsnakes/ppa")
    tpu_runtime_package = str_prop("tpu_runtime_package", default="libtpu1")
    tpu_key_url = str_prop("tpu_key_url", default=_DEFAULTS["tpu_key_url"])
    tpu_source_line = str_prop("tpu_source_line", default=_DEFAULTS["tpu_source_line"])
    libtpu_fallback_package = str_prop("libtpu_fallback_package", default="libtpu")
    libtpu_find_links = str_prop("libtpu_find_links", default=_DEFAULTS["libtpu_find_links"])

    retry_attempts = int_prop("retry_attempts", default=3, min_v=1, max_v=20)
    package_retry_attempts = int_prop("package_retry_attempts", default=3, min_v=1, max_v=20)
    retry_backoff_s = float_prop("retry_backoff_s", default=5.0, min_v=0.0)
    use_sudo = bool_prop("use_sudo", default=True)

    @property
    def python_bin(self) -> str:
        return f"python{self.python_version}"

    @property
    def kernel_display_name(self) -> str:
        v = self._settings.get("kernel_display_name")
        if isinstance(v, str) and v.strip():
            return v
        return f"Python {self.python_version} (TPU)"

    @property
    def log_file(self) -> Path:
        return expand_path(str_value(self._settings, "log_file", "setup_log.txt"))

    @property
    def venv_dir(self) -> Path:
        return expand_path(str_value(self._settings, "venv_dir", "~/tpu_env"))

    @property
    def venv_python(self) -> Path:
        return self.venv_dir / "bin" / "python"

    @property
    def profile_file(self) -> Path:
        v = self._settings.get("profile_file")
        if isinstance(v, str) and v.strip():
            return expand_path(v)
        return default_shell_profile()

    @property
    def tpu_keyring(self) -> Path:
        return Path(str_value(self._settings, "tpu_keyring", _DEFAULTS["tpu_keyring"]))

    @property
    def tpu_source_list(self) -> Path:
        return Path(str_value(self._settings, "tpu_source_list", _DEFAULTS["tpu_source_list"]))

    @property
    def packages(self) -> list[PackageSpec]:
        raw = self._settings.get("packages")
        if not isinstance(raw, list):
            logger.warning("Config 'packages' must be a list; using defaults")
            raw = _DEFAULTS["packages"]
        out: list[PackageSpec] = []
        for entry in raw:
            spec = _parse_package(entry)
            if spec is None:
                logger.warning("Ignoring invalid package entry: %r", entry)
                continue
            out.append(spec)
        return out

    @property
    def profile_exports(self) -> dict[str, str]:
        raw = self._settings.get("profile_exports")
        if not isinstance(raw, dict):
            raw = _DEFAULTS["profile_exports"]
        out: dict[str, str] = {}
        for k, v in raw.items():
            if v is None:
                continue
            # Only {venv_dir} and {python_version} are substituted; ${VARS} are left for the shell.
            out[str(k)] = str(v).replace("{venv_dir}", str(self.venv_dir)).replace("{python_version}", self.python_version)
        return out
