"""
Scoring package — pod vitality scores and fleet ranking.

Consumes fleet snapshots from the fetch layer, computes phase-1 aggregates,
scores every pod (uptime, storage, version, reputation) and ranks the fleet
per network with identity cluster counts.
"""

from fleet_vitality.scoring.versions import (
    VersionStatus,
    classify_version,
    clean_version,
    compare_versions,
    sort_versions_desc,
)
from fleet_vitality.scoring.version_rank import get_version_score_by_rank
from fleet_vitality.scoring.models import (
    AnnotatedNode,
    ClusterStats,
    FleetAggregates,
    FleetReport,
    FleetSummary,
    Network,
    NodeSnapshot,
    PenaltyAdjustment,
    RankEntry,
    ScoreBreakdown,
    ScoredNode,
    VitalityResult,
)
from fleet_vitality.scoring.reputation import (
    ReputationAvailable,
    ReputationSourceDown,
    ReputationZeroKnown,
    resolve_reputation,
)
from fleet_vitality.scoring.vitality import calculate_vitality_score, score_node
from fleet_vitality.scoring.aggregates import compute_fleet_aggregates
from fleet_vitality.scoring.ranking import rank_fleet
from fleet_vitality.scoring.pipeline import run_scoring_cycle, score_fleet

__all__ = [
    "VersionStatus",
    "classify_version",
    "clean_version",
    "compare_versions",
    "sort_versions_desc",
    "get_version_score_by_rank",
    "AnnotatedNode",
    "ClusterStats",
    "FleetAggregates",
    "FleetReport",
    "FleetSummary",
    "Network",
    "NodeSnapshot",
    "PenaltyAdjustment",
    "RankEntry",
    "ScoreBreakdown",
    "ScoredNode",
    "VitalityResult",
    "ReputationAvailable",
    "ReputationSourceDown",
    "ReputationZeroKnown",
    "resolve_reputation",
    "calculate_vitality_score",
    "score_node",
    "compute_fleet_aggregates",
    "rank_fleet",
    "run_scoring_cycle",
    "score_fleet",
]
