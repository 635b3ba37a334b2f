#!/usr/bin/env python3
"""tpusetup launcher for a fresh machine.

Runs the provisioning sequence straight from a checkout, before anything is
pip-installed (the system python3 is enough).

Usage:
  python3 scripts/tpu-setup.py
  python3 scripts/tpu-setup.py --profile=verify
  python3 scripts/tpu-setup.py --run-steps=1,2 --dry-run
  python3 scripts/tpu-setup.py --list-steps
"""

from __future__ import annotations

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from tpusetup.core.cli import main  # noqa: E402

if __name__ == "__main__":
    raise SystemExit(main())
