"""Config path helpers."""

from __future__ import annotations

import os
from pathlib import Path


def config_dir() -> Path:
    """Return the directory used for tpusetup configuration.

    Priority:
    - TPUSETUP_CONFIG_DIR
    - XDG_CONFIG_HOME/tpusetup
    - ~/.config/tpusetup
    """

    p = os.environ.get("TPUSETUP_CONFIG_DIR")
    if p:
        return Path(p)

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "tpusetup"

    return Path.home() / ".config" / "tpusetup"


def explicit_config_path() -> Path | None:
    """The file named by TPUSETUP_CONFIG_PATH, if set. It must exist."""

    p = os.environ.get("TPUSETUP_CONFIG_PATH")
    return Path(p) if p else None


def config_file_path() -> Path:
    """Return the tpusetup config.json path.

    Priority:
    - TPUSETUP_CONFIG_PATH (explicit file override)
    - config_dir()/config.json
    """

    return explicit_config_path() or config_dir() / "config.json"
