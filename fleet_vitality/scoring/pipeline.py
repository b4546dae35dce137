"""
Scoring pipeline: run one full cycle over a fleet snapshot.

Phase 1 (aggregates) -> phase 2 (per-pod vitality, optionally threaded)
-> phase 3 (ranking, cluster counts, fleet summary). Single entrypoint for
the API server and for batch callers. A pod whose record breaks scoring is
logged and scored 0; one bad record never aborts the cycle.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Iterable, Mapping

from fleet_vitality.config import Settings, get_settings
from fleet_vitality.logging import bind_node, get_logger
from fleet_vitality.scoring.aggregates import compute_fleet_aggregates
from fleet_vitality.scoring.models import (
    AnnotatedNode,
    AverageBreakdown,
    FleetAggregates,
    FleetReport,
    FleetSummary,
    NodeSnapshot,
    PenaltyAdjustment,
    ScoredNode,
    VitalityResult,
    round_score,
)
from fleet_vitality.scoring.ranking import rank_fleet
from fleet_vitality.scoring.versions import classify_version
from fleet_vitality.scoring.vitality import score_node

logger = get_logger(__name__)


def _score_one(
    snapshot: NodeSnapshot,
    aggregates: FleetAggregates,
    penalty: PenaltyAdjustment | None,
    settings: Settings,
) -> ScoredNode:
    """Score one pod. Never raises: failures are logged and scored as 0."""
    status = classify_version(
        snapshot.version, aggregates.consensus_version, aggregates.sorted_versions
    )
    try:
        result = score_node(snapshot, aggregates, penalty=penalty, settings=settings)
    except Exception as e:
        bind_node(snapshot.pubkey, snapshot.network.value).warning(
            "node_scoring_failed",
            error=str(e),
            exc_info=True,
        )
        result = VitalityResult.zero()
    return ScoredNode(snapshot=snapshot, result=result, version_status=status)


def score_fleet(
    snapshots: list[NodeSnapshot],
    aggregates: FleetAggregates,
    penalties: Mapping[str, PenaltyAdjustment] | None = None,
    settings: Settings | None = None,
) -> list[ScoredNode]:
    """
    Phase 2: score every pod against the same aggregates.

    Runs sequentially when settings.scoring_concurrency is 1, otherwise on a
    thread pool. Results keep input order and are identical either way.
    """
    cfg = settings or get_settings()
    lookup = penalties or {}

    def penalty_for(snap: NodeSnapshot) -> PenaltyAdjustment | None:
        return lookup.get(snap.pubkey) if snap.pubkey else None

    if cfg.scoring_concurrency <= 1 or len(snapshots) <= 1:
        return [_score_one(s, aggregates, penalty_for(s), cfg) for s in snapshots]

    results: list[ScoredNode | None] = [None] * len(snapshots)
    with ThreadPoolExecutor(max_workers=cfg.scoring_concurrency) as executor:
        futures = {
            executor.submit(_score_one, s, aggregates, penalty_for(s), cfg): i
            for i, s in enumerate(snapshots)
        }
        for fut in as_completed(futures):
            results[futures[fut]] = fut.result()
    return [r for r in results if r is not None]


def summarize_fleet(nodes: list[AnnotatedNode], aggregates: FleetAggregates) -> FleetSummary:
    """Fleet averages per pillar; reputation averages only pods that have one."""
    count = len(nodes)
    divisor = count or 1
    totals = {"total": 0, "uptime": 0, "version": 0, "storage": 0}
    reputation_sum = 0
    reputation_count = 0
    for node in nodes:
        result = node.scored.result
        totals["total"] += result.total
        totals["uptime"] += result.breakdown.uptime
        totals["version"] += result.breakdown.version
        totals["storage"] += result.breakdown.storage
        if result.breakdown.reputation is not None:
            reputation_sum += result.breakdown.reputation
            reputation_count += 1

    return FleetSummary(
        consensus_version=aggregates.consensus_version,
        median_credits=aggregates.median_credits,
        median_storage=aggregates.median_storage_committed,
        total_nodes=count,
        credits_source_online=aggregates.credits_source_online,
        avg_breakdown=AverageBreakdown(
            total=round_score(totals["total"] / divisor),
            uptime=round_score(totals["uptime"] / divisor),
            version=round_score(totals["version"] / divisor),
            storage=round_score(totals["storage"] / divisor),
            reputation=(
                round_score(reputation_sum / reputation_count) if reputation_count else None
            ),
        ),
    )


def run_scoring_cycle(
    snapshots: Iterable[NodeSnapshot | Mapping[str, Any]],
    *,
    credits_source_online: bool = True,
    penalties: Mapping[str, PenaltyAdjustment] | None = None,
    settings: Settings | None = None,
) -> FleetReport:
    """
    Run phases 1–3 over one fleet snapshot.

    Args:
        snapshots: NodeSnapshot objects or raw pod mappings (coerced via from_mapping).
        credits_source_online: Whether the credits feed answered this cycle.
        penalties: Upstream penalties keyed by pubkey.
        settings: Scoring tunables; get_settings() when None.

    Returns:
        FleetReport with annotated pods (input order) and the fleet summary.
    """
    cfg = settings or get_settings()
    pods = [
        s if isinstance(s, NodeSnapshot) else NodeSnapshot.from_mapping(s) for s in snapshots
    ]

    aggregates = compute_fleet_aggregates(pods, credits_source_online)
    scored = score_fleet(pods, aggregates, penalties, cfg)
    annotated = rank_fleet(scored)
    summary = summarize_fleet(annotated, aggregates)

    logger.info(
        "fleet_scoring_complete",
        total_nodes=summary.total_nodes,
        consensus_version=summary.consensus_version,
        avg_health=summary.avg_breakdown.total,
        credits_online=summary.credits_source_online,
        concurrency=cfg.scoring_concurrency,
    )
    return FleetReport(nodes=annotated, summary=summary, aggregates=aggregates)
