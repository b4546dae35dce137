"""
Phase 1: fleet-wide aggregates every per-pod score is judged against.

Computed once per cycle, before any pod is scored:
- median committed storage (upper median, all pods)
- median credits, overall and per network (pods with a credits entry only)
- consensus version (most common cleaned version; ties go to the newest)
- distinct cleaned versions, newest first
- the credits feed status supplied by the caller
"""

from __future__ import annotations

import statistics
from collections import Counter, defaultdict
from typing import Iterable

from fleet_vitality.logging import get_logger
from fleet_vitality.scoring.models import FleetAggregates, Network, NodeSnapshot
from fleet_vitality.scoring.versions import (
    EMPTY_VERSION,
    clean_version,
    sort_versions_desc,
)

logger = get_logger(__name__)


def upper_median(values: Iterable[float]) -> float:
    """High median (always an observed value); 0 for an empty input."""
    data = list(values)
    if not data:
        return 0.0
    return float(statistics.median_high(data))


def consensus_version(snapshots: list[NodeSnapshot]) -> str:
    counts = Counter(clean_version(s.version) for s in snapshots)
    if not counts:
        return EMPTY_VERSION
    top = max(counts.values())
    return sort_versions_desc(v for v, c in counts.items() if c == top)[0]


def compute_fleet_aggregates(
    snapshots: Iterable[NodeSnapshot],
    credits_source_online: bool = True,
) -> FleetAggregates:
    """
    Build the read-only aggregates for one scoring pass.

    Args:
        snapshots: Every live pod in this cycle.
        credits_source_online: Whether the credits feed answered. Pods without a
            credits entry do not change it; they score a known 0.

    Returns:
        FleetAggregates for score_node / run_scoring_cycle.
    """
    pods = list(snapshots)
    credits_by_network: dict[Network, list[float]] = defaultdict(list)
    all_credits: list[float] = []
    for pod in pods:
        if pod.credits is None:
            continue
        all_credits.append(pod.credits)
        credits_by_network[pod.network].append(pod.credits)

    online = bool(credits_source_online)
    if not online:
        logger.warning("credits_source_offline", total_nodes=len(pods))

    aggregates = FleetAggregates(
        median_storage_committed=upper_median(p.storage_committed_bytes for p in pods),
        median_credits=upper_median(all_credits),
        consensus_version=consensus_version(pods),
        sorted_versions=sort_versions_desc(p.version for p in pods),
        credits_source_online=online,
        median_credits_by_network={
            network: upper_median(values) for network, values in credits_by_network.items()
        },
    )
    logger.debug(
        "fleet_aggregates_computed",
        total_nodes=len(pods),
        consensus_version=aggregates.consensus_version,
        distinct_versions=len(aggregates.sorted_versions),
        median_storage=aggregates.median_storage_committed,
        median_credits=aggregates.median_credits,
        credits_online=online,
    )
    return aggregates
