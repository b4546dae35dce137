"""
Phase 3: leaderboard ranks and identity cluster counts.

- Per-network rank: credits desc (missing = 0), health desc, pubkey asc.
  Each network is ranked on its own, so one identity can hold rank 3 on
  MAINNET and rank 40 on DEVNET.
- Health rank: fleet-wide competition ranking by health (ties share a rank).
- Cluster stats: live instances per pubkey on MAINNET and DEVNET.
- Storage usage percentage string for display.

Pods without a pubkey stay in the output with rank 0 and empty cluster stats.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Iterable

from fleet_vitality.logging import get_logger
from fleet_vitality.scoring.models import (
    AnnotatedNode,
    ClusterStats,
    Network,
    RankEntry,
    ScoredNode,
    coerce_amount,
    coerce_credits,
)

logger = get_logger(__name__)

USAGE_ZERO = "0%"
USAGE_TINY = "< 0.01%"
USAGE_TINY_THRESHOLD = 0.01

EMPTY_CLUSTER = ClusterStats()


def leaderboard_key(node: ScoredNode) -> tuple[float, int, str]:
    """Sort key: credits desc, health desc, pubkey asc."""
    return (-(coerce_credits(node.snapshot.credits) or 0.0), -node.health, node.pubkey or "")


def storage_usage_percent(storage_committed: float, storage_used: float) -> str:
    committed = coerce_amount(storage_committed)
    used = coerce_amount(storage_used)
    if committed > 0 and used > 0:
        raw = (used / committed) * 100
        if raw < USAGE_TINY_THRESHOLD:
            return USAGE_TINY
        return f"{raw:.2f}%"
    return USAGE_ZERO


def compute_network_ranks(nodes: list[ScoredNode]) -> list[int]:
    """1-based rank of every node within its own network; 0 for unidentified nodes."""
    ranks = [0] * len(nodes)
    by_network: dict[Network, list[int]] = defaultdict(list)
    for i, node in enumerate(nodes):
        if node.pubkey is None:
            continue
        by_network[node.network].append(i)
    for indices in by_network.values():
        indices.sort(key=lambda i: leaderboard_key(nodes[i]))
        for position, i in enumerate(indices, start=1):
            ranks[i] = position
    return ranks


def rank_lookup(nodes: list[ScoredNode], ranks: list[int]) -> dict[tuple[str, Network], int]:
    """(pubkey, network) -> best rank held by that identity on that network."""
    lookup: dict[tuple[str, Network], int] = {}
    for node, rank in zip(nodes, ranks):
        if node.pubkey is None:
            continue
        key = (node.pubkey, node.network)
        if key not in lookup or rank < lookup[key]:
            lookup[key] = rank
    return lookup


def compute_health_ranks(nodes: list[ScoredNode]) -> list[int]:
    """Competition ranking by health across all networks (100, 90, 90, 80 -> 1, 2, 2, 4)."""
    ranks = [0] * len(nodes)
    order = sorted(
        (i for i, n in enumerate(nodes) if n.pubkey is not None),
        key=lambda i: -nodes[i].health,
    )
    current = 0
    for position, i in enumerate(order, start=1):
        if position == 1 or nodes[i].health < nodes[order[position - 2]].health:
            current = position
        ranks[i] = current
    return ranks


def compute_cluster_stats(nodes: Iterable[ScoredNode]) -> dict[str, ClusterStats]:
    mainnet: dict[str, int] = defaultdict(int)
    devnet: dict[str, int] = defaultdict(int)
    identities: set[str] = set()
    for node in nodes:
        if node.pubkey is None:
            continue
        identities.add(node.pubkey)
        if node.network == Network.MAINNET:
            mainnet[node.pubkey] += 1
        elif node.network == Network.DEVNET:
            devnet[node.pubkey] += 1
    return {
        pubkey: ClusterStats(mainnet_count=mainnet[pubkey], devnet_count=devnet[pubkey])
        for pubkey in identities
    }


def rank_fleet(scored_nodes: Iterable[ScoredNode]) -> list[AnnotatedNode]:
    """
    Annotate every scored pod with rank, usage percentage and cluster stats.

    Output order matches input order; sorting for display is the caller's job.
    """
    nodes = list(scored_nodes)
    ranks = compute_network_ranks(nodes)
    health_ranks = compute_health_ranks(nodes)
    clusters = compute_cluster_stats(nodes)

    annotated: list[AnnotatedNode] = []
    unranked = 0
    for node, rank, health_rank in zip(nodes, ranks, health_ranks):
        snap = node.snapshot
        if node.pubkey is None:
            unranked += 1
        annotated.append(
            AnnotatedNode(
                scored=node,
                rank_entry=RankEntry(
                    rank=rank,
                    storage_usage_percent=storage_usage_percent(
                        snap.storage_committed_bytes, snap.storage_used_bytes
                    ),
                ),
                cluster_stats=clusters.get(node.pubkey, EMPTY_CLUSTER) if node.pubkey else EMPTY_CLUSTER,
                health_rank=health_rank,
            )
        )
    if unranked:
        logger.debug("fleet_unranked_nodes", count=unranked)
    logger.debug(
        "fleet_ranked",
        total_nodes=len(nodes),
        identities=len(clusters),
        siblings=sum(1 for c in clusters.values() if c.total_global > 1),
    )
    return annotated
