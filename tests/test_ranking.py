"""
Tests for phase-3 ranking: per-network leaderboard, health ranks, cluster stats
and storage usage strings.
"""

from __future__ import annotations

import pytest

from fleet_vitality.scoring.models import (
    Network,
    NodeSnapshot,
    ScoreBreakdown,
    ScoredNode,
    VitalityResult,
)
from fleet_vitality.scoring.ranking import (
    compute_cluster_stats,
    compute_health_ranks,
    compute_network_ranks,
    rank_fleet,
    rank_lookup,
    storage_usage_percent,
)


def _node(pubkey, network=Network.MAINNET, credits=None, health=50, committed=100.0, used=0.0):
    snap = NodeSnapshot(
        pubkey=pubkey,
        network=network,
        credits=credits,
        storage_committed_bytes=committed,
        storage_used_bytes=used,
    )
    return ScoredNode(snapshot=snap, result=VitalityResult(total=health, breakdown=ScoreBreakdown()))


@pytest.mark.parametrize(
    "committed, used, expected",
    [
        (0, 0, "0%"),
        (100, 0, "0%"),
        (0, 50, "0%"),
        (1_000_000, 1, "< 0.01%"),
        (400, 100, "25.00%"),
        (3, 1, "33.33%"),
        (100, 100, "100.00%"),
    ],
)
def test_storage_usage_percent(committed, used, expected):
    assert storage_usage_percent(committed, used) == expected


def test_rank_by_credits_then_health_then_pubkey():
    nodes = [
        _node("ccc", credits=100, health=90),
        _node("bbb", credits=500, health=10),
        _node("ddd", credits=100, health=95),
        _node("aaa", credits=100, health=90),
    ]
    assert compute_network_ranks(nodes) == [4, 1, 2, 3]


def test_pubkey_breaks_full_ties():
    nodes = [_node("bbb", credits=10, health=70), _node("aaa", credits=10, health=70)]
    assert compute_network_ranks(nodes) == [2, 1]


def test_missing_credits_rank_as_zero():
    nodes = [_node("aaa", credits=None, health=99), _node("bbb", credits=1, health=1)]
    assert compute_network_ranks(nodes) == [2, 1]


def test_networks_ranked_independently():
    nodes = [
        _node("Alpha111", Network.MAINNET, credits=10),
        _node("Alpha111", Network.DEVNET, credits=1),
        _node("Bravo222", Network.MAINNET, credits=20),
        _node("Bravo222", Network.DEVNET, credits=50),
    ]
    ranks = compute_network_ranks(nodes)
    assert ranks == [2, 2, 1, 1]
    lookup = rank_lookup(nodes, ranks)
    assert lookup[("Alpha111", Network.MAINNET)] == 2
    assert lookup[("Bravo222", Network.DEVNET)] == 1


def test_rank_lookup_keeps_best_rank():
    nodes = [_node("Alpha111", credits=1), _node("Alpha111", credits=9), _node("Bravo222", credits=5)]
    ranks = compute_network_ranks(nodes)
    assert ranks == [3, 1, 2]
    assert rank_lookup(nodes, ranks) == {("Alpha111", Network.MAINNET): 1, ("Bravo222", Network.MAINNET): 2}


def test_unidentified_pods_rank_zero():
    nodes = [_node(None, credits=1_000_000), _node("  ", credits=5), _node("aaa", credits=1)]
    assert compute_network_ranks(nodes) == [0, 0, 1]
    assert compute_health_ranks(nodes) == [0, 0, 1]


def test_health_ranks_competition_style():
    nodes = [
        _node("a", health=90),
        _node("b", health=100),
        _node("c", health=80),
        _node("d", health=90, network=Network.DEVNET),
    ]
    assert compute_health_ranks(nodes) == [2, 1, 4, 2]


def test_cluster_stats():
    nodes = [
        _node("Alpha111", Network.MAINNET),
        _node("Alpha111", Network.MAINNET),
        _node("Alpha111", Network.DEVNET),
        _node("Bravo222", Network.UNKNOWN),
        _node(None, Network.MAINNET),
    ]
    stats = compute_cluster_stats(nodes)
    assert set(stats) == {"Alpha111", "Bravo222"}
    assert stats["Alpha111"].to_dict() == {"total_global": 3, "mainnet_count": 2, "devnet_count": 1}
    assert stats["Bravo222"].total_global == 0


def test_rank_fleet_preserves_input_order():
    nodes = [
        _node("low", credits=1, committed=400, used=100),
        _node(None, credits=50),
        _node("high", credits=99),
    ]
    annotated = rank_fleet(nodes)
    assert [a.scored.snapshot.pubkey for a in annotated] == ["low", None, "high"]
    assert [a.rank for a in annotated] == [2, 0, 1]
    assert annotated[0].rank_entry.storage_usage_percent == "25.00%"
    assert annotated[1].cluster_stats.total_global == 0
    assert annotated[2].cluster_stats.mainnet_count == 1


def test_annotated_to_dict_shape():
    row = rank_fleet([_node("aaa", credits=3)])[0].to_dict()
    for key in (
        "pubkey",
        "network",
        "health",
        "health_breakdown",
        "version_status",
        "rank",
        "health_rank",
        "storage_usage_percentage",
        "cluster_stats",
    ):
        assert key in row
    assert row["network"] == "MAINNET"
    assert row["rank"] == 1
