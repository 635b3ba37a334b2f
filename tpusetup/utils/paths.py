from __future__ import annotations

import os
from pathlib import Path


def home_dir() -> Path:
    return Path(os.path.expanduser("~"))


def expand_path(raw: str | os.PathLike[str]) -> Path:
    return Path(os.path.expandvars(os.path.expanduser(str(raw))))


def default_shell_profile() -> Path:
    """Return the interactive shell profile for the current user.

    Priority:
    - ~/.zshrc when $SHELL is zsh
    - ~/.bashrc when $SHELL is bash (or unset)
    - ~/.profile otherwise
    """

    shell = os.path.basename(os.environ.get("SHELL", "") or "bash")
    if shell == "zsh":
        return home_dir() / ".zshrc"
    if shell == "bash":
        return home_dir() / ".bashrc"
    return home_dir() / ".profile"


def is_root() -> bool:
    geteuid = getattr(os, "geteuid", None)
    return geteuid is not None and geteuid() == 0


def sudo_prefix(use_sudo: bool) -> list[str]:
    if not use_sudo or is_root():
        return []
    return ["sudo"]
