"""
Reputation pillar and the composite weight table.

Three mutually exclusive states, each carrying its own weights:

- ReputationAvailable: credits known and the fleet median is positive.
- ReputationZeroKnown: the credits feed is up but has nothing for this pod
  (or the median is zero); reputation is a real 0.
- ReputationSourceDown: the credits feed is unreachable; reputation is None
  and its weight is redistributed over the remaining pillars.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Weights:
    uptime: float
    storage: float
    version: float
    reputation: float = 0.0

    def combine(self, uptime: float, storage: float, version: float, reputation: float | None) -> float:
        return (
            uptime * self.uptime
            + storage * self.storage
            + version * self.version
            + (reputation or 0.0) * self.reputation
        )


FULL_WEIGHTS = Weights(uptime=0.35, storage=0.30, version=0.15, reputation=0.20)
DEGRADED_WEIGHTS = Weights(uptime=0.45, storage=0.35, version=0.20)

# Yield velocity of exactly zero caps reputation here.
STAGNANT_REPUTATION_CAP = 50.0


@dataclass(frozen=True)
class ReputationAvailable:
    score: float
    weights: Weights = FULL_WEIGHTS


@dataclass(frozen=True)
class ReputationZeroKnown:
    score: float = 0.0
    weights: Weights = FULL_WEIGHTS


@dataclass(frozen=True)
class ReputationSourceDown:
    score: None = None
    weights: Weights = DEGRADED_WEIGHTS


Reputation = Union[ReputationAvailable, ReputationZeroKnown, ReputationSourceDown]


def credits_ratio_score(credits: float, median_credits: float) -> float:
    """Pods earning twice the median or more get the full 100."""
    return max(0.0, min(100.0, (credits / (median_credits * 2)) * 100))


def resolve_reputation(
    credits: float | None,
    median_credits: float,
    credits_source_online: bool,
    *,
    yield_velocity_24h: float | None = None,
) -> Reputation:
    """Pick the reputation state for one pod; the source-down check wins over everything."""
    if not credits_source_online:
        return ReputationSourceDown()
    if credits is not None and median_credits > 0:
        score = credits_ratio_score(credits, median_credits)
        if yield_velocity_24h is not None and yield_velocity_24h == 0:
            score = min(STAGNANT_REPUTATION_CAP, score)
        return ReputationAvailable(score=score)
    return ReputationZeroKnown()
