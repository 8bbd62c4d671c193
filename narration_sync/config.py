"""Configuration constants and .env loading.

WHY: Centralizes the few values an operator may want to change (fetch
timeouts, exporter frame rate, log level) so they are easy to find and
override without touching code.

HOW: python-dotenv loads the .env file on import. Constants are
module-level values read from the environment with defaults.

RULES:
- Every value can be overridden via an environment variable
- Malformed numeric values fail fast with a ValueError naming the variable
- Layout thresholds (column split, line tolerance) are NOT here; they are
  fixed constants in core/runs.py because run boundaries must match the
  source image's visual lines
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

# Load .env from the project root (where the script is run from)
load_dotenv()


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError("{} must be a number, got {!r}".format(name, raw)) from None
    if value <= 0:
        raise ValueError("{} must be positive, got {!r}".format(name, raw))
    return value


# ---------------------------------------------------------------------------
# Asset fetching
# ---------------------------------------------------------------------------

FETCH_TIMEOUT_S = _env_float("NARRATION_SYNC_FETCH_TIMEOUT_S", 30.0)
CONNECT_TIMEOUT_S = _env_float("NARRATION_SYNC_CONNECT_TIMEOUT_S", 10.0)

# ---------------------------------------------------------------------------
# Exporters and logging
# ---------------------------------------------------------------------------

DEFAULT_TRACK_FPS = int(_env_float("NARRATION_SYNC_TRACK_FPS", 30))
"""Sample rate of the progress_track exporter, in frames per second."""

LOG_LEVEL = os.getenv("NARRATION_SYNC_LOG_LEVEL", "WARNING").strip().upper() or "WARNING"
