"""
Centralised path constants for the LifeSim engine.

Content tables ship inside the package so the engine works regardless of
the working directory, whether launched via the CLI, the FastAPI dev
server, or a packaged build.
"""

from __future__ import annotations

import sys
from pathlib import Path


def _find_project_root() -> Path:
    """Directory that holds the save folder: the bundle directory when frozen, else the repo root."""
    if getattr(sys, "frozen", False):
        return Path(sys._MEIPASS)  # type: ignore[attr-defined]
    return Path(__file__).parent.parent


# ── Root ──────────────────────────────────────────────────────────────────────

PROJECT_ROOT: Path = _find_project_root()

# ── Input directories ─────────────────────────────────────────────────────────

CONFIG_DIR: Path = Path(__file__).parent / "config"

# ── Output directories ────────────────────────────────────────────────────────

# Character snapshots written by the save-slot store
SAVE_DIR: Path = PROJECT_ROOT / "saves"
