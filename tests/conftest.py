"""
Pytest fixtures for Fleet Vitality tests. Settings are re-read from a clean env per test.
"""

from __future__ import annotations

import pytest

GIB = 1024 ** 3
DAY = 86400


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Drop VITALITY_* overrides and reset the cached settings around every test."""
    for name in (
        "VITALITY_VERSION_DECAY",
        "VITALITY_UPTIME_MIDPOINT_DAYS",
        "VITALITY_UPTIME_STEEPNESS",
        "VITALITY_NEW_NODE_CAP",
        "VITALITY_SCORING_CONCURRENCY",
    ):
        monkeypatch.delenv(name, raising=False)

    from fleet_vitality.config import reset_settings_cache

    reset_settings_cache()
    yield
    reset_settings_cache()


@pytest.fixture
def raw_fleet() -> list[dict]:
    """Five pods as the fetch layer hands them over: one identity on both networks, one anonymous."""
    return [
        {
            "pubkey": "Alpha111",
            "address": "10.0.0.1:9001",
            "network": "MAINNET",
            "version": "1.5.0",
            "uptime": 40 * DAY,
            "storage_committed": 400 * GIB,
            "storage_used": 40 * GIB,
            "credits": 12000,
            "is_public": True,
        },
        {
            "pubkey": "Alpha111",
            "address": "10.0.0.1:9002",
            "network": "DEVNET",
            "version": "1.5.0-trynet",
            "uptime": 3 * DAY,
            "storage_committed": 100 * GIB,
            "storage_used": 0,
            "credits": 300,
        },
        {
            "pubkey": "Bravo222",
            "address": "10.0.0.2:9001",
            "network": "MAINNET",
            "version": "1.4.0",
            "uptime": 10 * DAY,
            "storage_committed": 200 * GIB,
            "storage_used": 1 * GIB,
            "credits": 8000,
        },
        {
            "pubkey": "Charlie3",
            "address": "10.0.0.3:9001",
            "network": "MAINNET",
            "version": "1.5.0",
            "uptime": "7200",
            "storage_committed": "0",
            "storage_used": None,
            "credits": None,
        },
        {
            "pubkey": None,
            "address": "10.0.0.4:9001",
            "network": "DEVNET",
            "version": "",
            "uptime": 5 * DAY,
            "storage_committed": 50 * GIB,
            "storage_used": 5 * GIB,
            "credits": 100,
        },
    ]


@pytest.fixture
def client():
    """FastAPI TestClient over the scoring API."""
    from fastapi.testclient import TestClient

    from fleet_vitality.api_server.server import app

    return TestClient(app)
