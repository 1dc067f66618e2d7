#!/usr/bin/env python3
"""Console-script wrappers for the trend scan scripts.

After an editable install (``pip install -e .``) the following commands become
available system-wide:

* ``trend-scan``      – fetch live sources, aggregate and write reports
* ``trend-sessions``  – list / create / clean up scan sessions

Extra command-line arguments are forwarded unchanged, e.g.
``trend-scan --input mentions.csv --region US``.
"""
from __future__ import annotations

import sys
from pathlib import Path
from subprocess import run
from typing import List, Optional

PYTHON = sys.executable
ROOT = Path(__file__).resolve().parents[1]  # Repository root


def _exec(cmd: list[str]) -> None:  # noqa: WPS421 (subprocess wrapper)
    """Execute *cmd* and propagate its exit status."""
    run(cmd, check=True)


def _forwarded(argv: Optional[List[str]]) -> List[str]:
    return list(sys.argv[1:] if argv is None else argv)


# ---------------------------------------------------------------------------
# Entry-points
# ---------------------------------------------------------------------------

def scan(argv: Optional[List[str]] = None) -> None:
    """Run a full trend scan (``scripts/scan_trends.py``)."""
    _exec([PYTHON, str(ROOT / "scripts/scan_trends.py"), *_forwarded(argv)])


def sessions(argv: Optional[List[str]] = None) -> None:
    """Manage scan sessions (``scripts/session_manager.py``)."""
    _exec([PYTHON, str(ROOT / "scripts/session_manager.py"), *_forwarded(argv)])
