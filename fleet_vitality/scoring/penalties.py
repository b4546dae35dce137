"""
Folding pre-computed anomaly penalties into a raw vitality total.

The penalties are produced upstream (restart detection, frozen-uptime
detection, consistency tracking); this module only applies them:

- Restarts: quadratic in the 7-day restart count, capped at 36; more than
  five restarts in 24h multiplies by 1.5 (cap 50).
- Frozen uptime: 5 points under an hour, 10 + hours under a day, 50 beyond;
  frozen for three days or more also caps the total at 10.
- Consistency: multiplier in [0, 1] applied to the net score.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from fleet_vitality.scoring.models import (
    NO_PENALTY,
    PenaltyAdjustment,
    PenaltyBreakdown,
    round_score,
)

RESTART_PENALTY_CAP = 36.0
TRAUMA_RESTARTS_24H = 5
TRAUMA_MULTIPLIER = 1.5
TRAUMA_PENALTY_CAP = 50.0

FROZEN_SHORT_PENALTY = 5.0
FROZEN_DAY_BASE_PENALTY = 10.0
FROZEN_LONG_PENALTY = 50.0
FROZEN_CAP_AFTER_HOURS = 72.0
FROZEN_TOTAL_CAP = 10.0


@dataclass(frozen=True)
class AppliedPenalty:
    net_score: float
    breakdown: PenaltyBreakdown


def restart_penalty(restarts_7d: int, restarts_24h: int) -> float:
    penalty = min(RESTART_PENALTY_CAP, float(restarts_7d) ** 2)
    if restarts_24h > TRAUMA_RESTARTS_24H:
        penalty = min(TRAUMA_PENALTY_CAP, penalty * TRAUMA_MULTIPLIER)
    return penalty


def frozen_penalty(frozen_hours: float) -> tuple[float, float]:
    """(points, total cap) for an uptime counter stuck for frozen_hours."""
    if frozen_hours <= 0:
        return 0.0, 100.0
    if frozen_hours < 1:
        points = FROZEN_SHORT_PENALTY
    elif frozen_hours < 24:
        points = FROZEN_DAY_BASE_PENALTY + math.floor(frozen_hours)
    else:
        points = FROZEN_LONG_PENALTY
    cap = FROZEN_TOTAL_CAP if frozen_hours >= FROZEN_CAP_AFTER_HOURS else 100.0
    return points, cap


def apply_penalties(raw_total: float, penalty: PenaltyAdjustment | None) -> AppliedPenalty:
    """Subtract restart/frozen points, scale by consistency, cap and clamp to [0, 100]."""
    p = penalty or NO_PENALTY
    restarts = restart_penalty(p.restarts_7d, p.restarts_24h)
    frozen, cap = frozen_penalty(p.frozen_duration_hours)
    consistency = max(0.0, min(1.0, p.consistency))

    net = (raw_total - restarts - frozen) * consistency
    net = min(net, cap)
    net = max(0.0, min(100.0, net))
    return AppliedPenalty(
        net_score=net,
        breakdown=PenaltyBreakdown(
            restarts=round_score(restarts + frozen),
            consistency=round(consistency, 2),
            restarts_7d_count=p.restarts_7d,
        ),
    )
