"""
Vitality score computation — four pillars and a weighted composite.

Responsibilities:
- Gatekeeper: a pod with no committed storage scores 0 across the board.
- Uptime: sigmoid around a one-week midpoint, capped for pods younger than a day.
- Storage: log-elastic against the fleet median plus a capped utilization bonus.
- Version: ladder distance behind consensus (see version_rank).
- Reputation: credits against the median, re-weighted when the feed is down.
- Optional upstream penalties folded into the net score.

Pure functions; no I/O. Same inputs always give the same output.
"""

from __future__ import annotations

import math

from fleet_vitality.config import DEFAULT_SETTINGS, Settings
from fleet_vitality.logging import get_logger
from fleet_vitality.scoring.models import (
    FleetAggregates,
    NodeSnapshot,
    PenaltyAdjustment,
    ScoreBreakdown,
    VitalityResult,
    coerce_amount,
    coerce_credits,
    round_score,
)
from fleet_vitality.scoring.penalties import apply_penalties
from fleet_vitality.scoring.reputation import resolve_reputation
from fleet_vitality.scoring.version_rank import get_version_score_by_rank

logger = get_logger(__name__)

SECONDS_PER_DAY = 86400
BYTES_PER_GIB = 1024 ** 3

STORAGE_CURVE_SCALE = 50.0
UTILIZATION_BONUS_CAP = 15.0
UTILIZATION_BONUS_SCALE = 5.0


def sigmoid_score(value: float, midpoint: float, steepness: float) -> float:
    """100 / (1 + e^(-steepness * (value - midpoint))), overflow-safe."""
    exponent = -steepness * (value - midpoint)
    if exponent > 700:
        return 0.0
    return 100.0 / (1.0 + math.exp(exponent))


def uptime_score(uptime_seconds: float, settings: Settings = DEFAULT_SETTINGS) -> float:
    days = coerce_amount(uptime_seconds) / SECONDS_PER_DAY
    score = sigmoid_score(days, settings.uptime_midpoint_days, settings.uptime_steepness)
    if days < 1:
        score = min(settings.new_node_uptime_cap, score)
    return score


def storage_score(storage_committed: float, storage_used: float, median_storage: float) -> float:
    """
    Capacity score relative to the fleet median, plus up to 15 points for data actually stored.

    Committing the median scores 50; three times the median reaches 100.
    A zero median (empty or all-zero fleet) gives full marks to any pod
    with capacity.
    """
    committed = coerce_amount(storage_committed)
    used = coerce_amount(storage_used)
    median = coerce_amount(median_storage)
    if median > 0:
        base = min(100.0, STORAGE_CURVE_SCALE * math.log2(committed / median + 1))
    else:
        base = 100.0 if committed > 0 else 0.0
    bonus = 0.0
    if used > 0:
        bonus = min(
            UTILIZATION_BONUS_CAP,
            UTILIZATION_BONUS_SCALE * math.log2(used / BYTES_PER_GIB + 2),
        )
    return min(100.0, base + bonus)


def calculate_vitality_score(
    storage_committed: float,
    storage_used: float,
    uptime_seconds: float,
    version: str | None,
    consensus_version: str | None,
    sorted_versions: list[str],
    median_credits: float,
    credits: float | None,
    median_storage: float,
    credits_source_online: bool = True,
    penalty: PenaltyAdjustment | None = None,
    settings: Settings | None = None,
) -> VitalityResult:
    """
    Compute the 0–100 vitality score and its breakdown for one pod.

    Args:
        storage_committed: Bytes the pod has committed to the network.
        storage_used: Bytes actually stored.
        uptime_seconds: Current process uptime.
        version: Raw version string reported by the pod.
        consensus_version: Most common cleaned version in the fleet.
        sorted_versions: Distinct cleaned versions, newest first.
        median_credits: Median credits of the pod's network.
        credits: Pod credits; None when the feed has no entry for it.
        median_storage: Median committed storage across the fleet.
        credits_source_online: False when the credits feed was unreachable.
        penalty: Optional upstream anomaly penalties.
        settings: Scoring tunables; defaults when None.

    Returns:
        VitalityResult with total in [0, 100] and integer pillar scores.
    """
    cfg = settings or DEFAULT_SETTINGS

    if coerce_amount(storage_committed) <= 0:
        return VitalityResult.zero()

    uptime = uptime_score(uptime_seconds, cfg)
    storage = storage_score(storage_committed, storage_used, median_storage)
    version_points = get_version_score_by_rank(
        version, consensus_version, sorted_versions, cfg.version_decay
    )

    reputation = resolve_reputation(
        coerce_credits(credits),
        coerce_amount(median_credits),
        credits_source_online,
        yield_velocity_24h=penalty.yield_velocity_24h if penalty else None,
    )
    reputation_points = reputation.score

    raw_total = reputation.weights.combine(uptime, storage, version_points, reputation_points)
    applied = apply_penalties(raw_total, penalty)

    return VitalityResult(
        total=max(0, min(100, round_score(applied.net_score))),
        breakdown=ScoreBreakdown(
            uptime=round_score(uptime),
            version=round_score(version_points),
            storage=round_score(storage),
            reputation=None if reputation_points is None else round_score(reputation_points),
            penalties=applied.breakdown,
        ),
    )


def score_node(
    snapshot: NodeSnapshot,
    aggregates: FleetAggregates,
    penalty: PenaltyAdjustment | None = None,
    settings: Settings | None = None,
) -> VitalityResult:
    """Score one pod against the phase-1 fleet aggregates."""
    result = calculate_vitality_score(
        snapshot.storage_committed_bytes,
        snapshot.storage_used_bytes,
        snapshot.uptime_seconds,
        snapshot.version,
        aggregates.consensus_version,
        aggregates.sorted_versions,
        aggregates.median_credits_for(snapshot.network),
        snapshot.credits,
        aggregates.median_storage_committed,
        aggregates.credits_source_online,
        penalty=penalty,
        settings=settings,
    )
    if coerce_amount(snapshot.storage_committed_bytes) <= 0:
        logger.debug(
            "node_gatekeeper_zero_storage",
            node_id=snapshot.pubkey,
            network=snapshot.network.value,
        )
    return result
