"""Desired-state probes used to skip steps whose effect is already in place."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

APT_SOURCES_DIR = Path("/etc/apt/sources.list.d")


def has_executable(name: str) -> bool:
    return shutil.which(name) is not None


def apt_packages_installed(*packages: str) -> bool:
    """True if dpkg reports every one of *packages* as installed."""

    try:
        proc = subprocess.run(
            ["dpkg-query", "-W", "-f", "${Status}\\n", *packages],
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            text=True,
            timeout=30,
        )
    except (OSError, subprocess.TimeoutExpired):
        return False
    if proc.returncode != 0:
        return False
    statuses = proc.stdout.splitlines()
    return len(statuses) == len(packages) and all(s.strip() == "install ok installed" for s in statuses)


def file_contains_line(path: Path, line: str) -> bool:
    try:
        text = path.read_text(encoding="utf-8", errors="ignore")
    except FileNotFoundError:
        return False
    wanted = line.strip()
    return any(ln.strip() == wanted for ln in text.splitlines())


def ppa_listed(ppa: str, sources_dir: Path = APT_SOURCES_DIR) -> bool:
    """True if an apt source for ``ppa:owner/name`` is already configured."""

    spec = ppa[len("ppa:"):] if ppa.startswith("ppa:") else ppa
    owner, _, name = spec.partition("/")
    if not owner:
        return False
    needle = f"ppa.launchpadcontent.net/{owner}/{name}" if name else f"/{owner}/"
    legacy = f"ppa.launchpad.net/{owner}/{name}" if name else needle

    if not sources_dir.is_dir():
        return False
    for entry in sorted(sources_dir.iterdir()):
        if entry.suffix not in {".list", ".sources"} or not entry.is_file():
            continue
        text = entry.read_text(encoding="utf-8", errors="ignore")
        if needle in text or legacy in text:
            return True
    return False
