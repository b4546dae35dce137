"""
Scoring settings assembled from the environment.

get_settings() returns a frozen Settings object shared by the scorer, the
pipeline and the API server. Tests call reset_settings_cache() after
changing env vars.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from fleet_vitality.config import env


@dataclass(frozen=True)
class Settings:
    """
    Tunables for one scoring pass.

    version_decay: "strict" or "graduated" version-lag table.
    uptime_midpoint_days / uptime_steepness: uptime sigmoid parameters.
    new_node_uptime_cap: max uptime score for pods up less than one day.
    scoring_concurrency: threads used for per-node scoring (1 = sequential).
    """

    version_decay: str = env.DEFAULT_VERSION_DECAY
    uptime_midpoint_days: float = env.DEFAULT_UPTIME_MIDPOINT_DAYS
    uptime_steepness: float = env.DEFAULT_UPTIME_STEEPNESS
    new_node_uptime_cap: float = env.DEFAULT_NEW_NODE_CAP
    scoring_concurrency: int = env.DEFAULT_SCORING_CONCURRENCY
    api_host: str = env.DEFAULT_API_HOST
    api_port: int = env.DEFAULT_API_PORT


DEFAULT_SETTINGS = Settings()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the current settings, read once from env (and .env)."""
    return Settings(
        version_decay=env.get_version_decay_policy(),
        uptime_midpoint_days=env.get_uptime_midpoint_days(),
        uptime_steepness=env.get_uptime_steepness(),
        new_node_uptime_cap=env.get_new_node_cap(),
        scoring_concurrency=env.get_scoring_concurrency(),
        api_host=env.get_api_host(),
        api_port=env.get_api_port(),
    )


def reset_settings_cache() -> None:
    get_settings.cache_clear()
