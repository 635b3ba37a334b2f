"""tpusetup configuration.

Settings come from a JSON file merged over DEFAULTS; every key is optional.
"""

from __future__ import annotations

from .config import Config, PackageSpec
from .file_storage import load_config_settings
from .paths import config_dir, config_file_path, explicit_config_path

__all__ = [
    "Config",
    "PackageSpec",
    "config_dir",
    "config_file_path",
    "explicit_config_path",
    "load_config_settings",
]
