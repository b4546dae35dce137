"""
Environment variable loading and validation for Fleet Vitality.

- VITALITY_VERSION_DECAY: strict | graduated (default: strict)
- VITALITY_UPTIME_MIDPOINT_DAYS: sigmoid midpoint in days (default: 7)
- VITALITY_UPTIME_STEEPNESS: sigmoid steepness (default: 0.2)
- VITALITY_NEW_NODE_CAP: uptime score cap for pods younger than a day (default: 20)
- VITALITY_SCORING_CONCURRENCY: phase-2 worker threads (default: 1)
- API_HOST / API_PORT: API server bind (default: 0.0.0.0 / 8000)
- Loads .env from project root when available.

Bad values never raise: they fall back to the default and log a warning.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

from fleet_vitality.logging import get_logger

logger = get_logger(__name__)

# Project root: config is fleet_vitality/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_PACKAGE_DIR = _CONFIG_DIR.parent
_ROOT = _PACKAGE_DIR.parent
_ENV_PATH = _ROOT / ".env"

DECAY_STRICT = "strict"
DECAY_GRADUATED = "graduated"
DECAY_POLICIES = (DECAY_STRICT, DECAY_GRADUATED)

DEFAULT_VERSION_DECAY = DECAY_STRICT
DEFAULT_UPTIME_MIDPOINT_DAYS = 7.0
DEFAULT_UPTIME_STEEPNESS = 0.2
DEFAULT_NEW_NODE_CAP = 20.0
DEFAULT_SCORING_CONCURRENCY = 1
DEFAULT_API_HOST = "0.0.0.0"
DEFAULT_API_PORT = 8000


def load_vitality_env() -> None:
    """Load .env from project root. Safe to call multiple times; existing env wins."""
    load_dotenv(_ENV_PATH, override=False)


def _env_float(name: str, default: float, *, minimum: float | None = None) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("config_invalid_value", variable=name, value=raw, fallback=default)
        return default
    if value != value or (minimum is not None and value < minimum):
        logger.warning("config_out_of_range", variable=name, value=raw, fallback=default)
        return default
    return value


def _env_int(name: str, default: int, *, minimum: int = 1) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("config_invalid_value", variable=name, value=raw, fallback=default)
        return default
    if value < minimum:
        logger.warning("config_out_of_range", variable=name, value=raw, fallback=default)
        return default
    return value


def get_version_decay_policy() -> str:
    """
    Return VITALITY_VERSION_DECAY from env: strict | graduated.
    Default: strict.
    """
    load_vitality_env()
    raw = (os.getenv("VITALITY_VERSION_DECAY") or DEFAULT_VERSION_DECAY).strip().lower()
    if raw in DECAY_POLICIES:
        return raw
    logger.warning(
        "config_invalid_value",
        variable="VITALITY_VERSION_DECAY",
        value=raw,
        fallback=DEFAULT_VERSION_DECAY,
    )
    return DEFAULT_VERSION_DECAY


def get_uptime_midpoint_days() -> float:
    load_vitality_env()
    return _env_float("VITALITY_UPTIME_MIDPOINT_DAYS", DEFAULT_UPTIME_MIDPOINT_DAYS, minimum=0.0)


def get_uptime_steepness() -> float:
    load_vitality_env()
    return _env_float("VITALITY_UPTIME_STEEPNESS", DEFAULT_UPTIME_STEEPNESS, minimum=0.0)


def get_new_node_cap() -> float:
    load_vitality_env()
    return min(100.0, _env_float("VITALITY_NEW_NODE_CAP", DEFAULT_NEW_NODE_CAP, minimum=0.0))


def get_scoring_concurrency() -> int:
    """Return VITALITY_SCORING_CONCURRENCY (>= 1); 1 means phase 2 runs sequentially."""
    load_vitality_env()
    return _env_int("VITALITY_SCORING_CONCURRENCY", DEFAULT_SCORING_CONCURRENCY)


def get_api_host() -> str:
    load_vitality_env()
    return (os.getenv("API_HOST") or DEFAULT_API_HOST).strip() or DEFAULT_API_HOST


def get_api_port() -> int:
    load_vitality_env()
    return _env_int("API_PORT", DEFAULT_API_PORT)
