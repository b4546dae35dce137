"""
Tests for folding upstream anomaly penalties into the net score.
"""

from __future__ import annotations

import pytest

from fleet_vitality.scoring.models import PenaltyAdjustment, PenaltyBreakdown
from fleet_vitality.scoring.penalties import apply_penalties, frozen_penalty, restart_penalty


@pytest.mark.parametrize(
    "restarts_7d, restarts_24h, expected",
    [
        (0, 0, 0),
        (3, 0, 9),
        (6, 0, 36),
        (7, 0, 36),
        (2, 6, 6),
        (7, 6, 50),
        (7, 5, 36),
    ],
)
def test_restart_penalty(restarts_7d, restarts_24h, expected):
    """Quadratic, capped at 36; more than five restarts in 24h multiplies by 1.5 (cap 50)."""
    assert restart_penalty(restarts_7d, restarts_24h) == expected


@pytest.mark.parametrize(
    "hours, points, cap",
    [
        (0, 0, 100),
        (0.5, 5, 100),
        (1, 11, 100),
        (5.7, 15, 100),
        (30, 50, 100),
        (72, 50, 10),
        (200, 50, 10),
    ],
)
def test_frozen_penalty(hours, points, cap):
    assert frozen_penalty(hours) == (points, cap)


def test_no_penalty_is_neutral():
    applied = apply_penalties(80.0, None)
    assert applied.net_score == 80.0
    assert applied.breakdown == PenaltyBreakdown(restarts=0, consistency=1.0, restarts_7d_count=0)


def test_combined_penalties():
    """(80 - 9 restart - 12 frozen) * 0.5 consistency."""
    applied = apply_penalties(
        80.0,
        PenaltyAdjustment(restarts_7d=3, frozen_duration_hours=2.5, consistency=0.5),
    )
    assert applied.net_score == pytest.approx(29.5)
    assert applied.breakdown.restarts == 21
    assert applied.breakdown.consistency == 0.5
    assert applied.breakdown.restarts_7d_count == 3


def test_long_freeze_caps_total():
    applied = apply_penalties(90.0, PenaltyAdjustment(frozen_duration_hours=100))
    assert applied.net_score == 10.0


def test_net_score_clamped_to_zero():
    applied = apply_penalties(20.0, PenaltyAdjustment(restarts_7d=10, restarts_24h=8))
    assert applied.net_score == 0.0


def test_consistency_out_of_range_is_clamped():
    assert apply_penalties(60.0, PenaltyAdjustment(consistency=3.0)).net_score == 60.0
    assert apply_penalties(60.0, PenaltyAdjustment(consistency=-1.0)).net_score == 0.0


def test_penalty_from_mapping_coerces():
    penalty = PenaltyAdjustment.from_mapping(
        {
            "restarts_7d": "4",
            "restarts_24h": None,
            "consistency_score": 0.81,
            "yield_velocity_24h": "0",
            "frozen_duration_hours": -3,
        }
    )
    assert penalty == PenaltyAdjustment(
        restarts_7d=4,
        restarts_24h=0,
        consistency=0.81,
        yield_velocity_24h=0.0,
        frozen_duration_hours=0.0,
    )
    assert PenaltyAdjustment.from_mapping({}) == PenaltyAdjustment()
