"""
Data models for one scoring cycle: input snapshots, phase-1 aggregates,
per-node vitality results and the ranked leaderboard rows.

Nothing here is persisted; every structure is rebuilt from the current
fleet snapshot on each cycle.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

from fleet_vitality.scoring.versions import EMPTY_VERSION, VersionStatus


class Network(str, Enum):
    MAINNET = "MAINNET"
    DEVNET = "DEVNET"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, value: Any) -> "Network":
        if isinstance(value, Network):
            return value
        raw = str(value or "").strip().upper()
        for member in cls:
            if member.value == raw:
                return member
        return cls.UNKNOWN


def coerce_amount(value: Any) -> float:
    """Non-negative finite float; missing, non-numeric, NaN, infinite or negative -> 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number) or number < 0:
        return 0.0
    return number


def coerce_credits(value: Any) -> float | None:
    """Credits as float, or None when there is no usable signal."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str) and not value.strip():
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def round_score(value: float) -> int:
    """Round half up (2.5 -> 3), unlike round()'s banker's rounding."""
    return int(math.floor(value + 0.5))


def _coerce_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


@dataclass
class NodeSnapshot:
    """
    Telemetry for one live pod instance, as handed over by the fetch layer.

    pubkey is the stable identity; None (or blank) makes the pod unrankable.
    credits is None when the credits feed has no entry for this pod.
    Fields are coalesced on construction: missing or non-numeric amounts
    become 0, so scoring and ranking never see None or strings.
    """

    pubkey: str | None
    address: str = ""
    network: Network = Network.UNKNOWN
    version: str = ""
    uptime_seconds: float = 0.0
    storage_committed_bytes: float = 0.0
    storage_used_bytes: float = 0.0
    credits: float | None = None
    is_public: bool = False

    def __post_init__(self) -> None:
        if self.pubkey is not None:
            self.pubkey = str(self.pubkey).strip() or None
        self.address = str(self.address or "")
        self.network = Network.parse(self.network)
        self.version = str(self.version or "")
        self.uptime_seconds = coerce_amount(self.uptime_seconds)
        self.storage_committed_bytes = coerce_amount(self.storage_committed_bytes)
        self.storage_used_bytes = coerce_amount(self.storage_used_bytes)
        self.credits = coerce_credits(self.credits)
        self.is_public = _coerce_bool(self.is_public)

    @property
    def has_identity(self) -> bool:
        return bool(self.pubkey)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "NodeSnapshot":
        """Build a snapshot from a raw pod record; accepts the fetch layer's key aliases."""
        return cls(
            pubkey=raw.get("pubkey") or raw.get("public_key") or None,
            address=raw.get("address"),
            network=raw.get("network"),
            version=raw.get("version"),
            uptime_seconds=raw.get("uptime", raw.get("uptime_seconds")),
            storage_committed_bytes=raw.get("storage_committed", raw.get("storage_committed_bytes")),
            storage_used_bytes=raw.get("storage_used", raw.get("storage_used_bytes")),
            credits=raw.get("credits"),
            is_public=raw.get("is_public", False),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "pubkey": self.pubkey,
            "address": self.address,
            "network": self.network.value,
            "version": self.version,
            "uptime": self.uptime_seconds,
            "storage_committed": self.storage_committed_bytes,
            "storage_used": self.storage_used_bytes,
            "credits": self.credits,
            "is_public": self.is_public,
        }


@dataclass(frozen=True)
class PenaltyAdjustment:
    """
    Pre-computed anomaly inputs supplied by the upstream detector.

    restarts_7d / restarts_24h: restart counts in the trailing windows.
    consistency: reporting-consistency multiplier, 1.0 = perfectly regular.
    yield_velocity_24h: credits earned in the last 24h; None = not observed.
    frozen_duration_hours: how long uptime has been stuck (0 = not frozen).
    """

    restarts_7d: int = 0
    restarts_24h: int = 0
    consistency: float = 1.0
    yield_velocity_24h: float | None = None
    frozen_duration_hours: float = 0.0

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "PenaltyAdjustment":
        consistency = raw.get("consistency", raw.get("consistency_score"))
        return cls(
            restarts_7d=int(coerce_amount(raw.get("restarts_7d"))),
            restarts_24h=int(coerce_amount(raw.get("restarts_24h"))),
            consistency=1.0 if consistency is None else min(1.0, coerce_amount(consistency)),
            yield_velocity_24h=coerce_credits(raw.get("yield_velocity_24h")),
            frozen_duration_hours=coerce_amount(raw.get("frozen_duration_hours")),
        )


NO_PENALTY = PenaltyAdjustment()


@dataclass(frozen=True)
class PenaltyBreakdown:
    restarts: int = 0
    """Points subtracted for restarts and frozen uptime."""
    consistency: float = 1.0
    restarts_7d_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "restarts": self.restarts,
            "consistency": self.consistency,
            "restarts_7d_count": self.restarts_7d_count,
        }


@dataclass(frozen=True)
class ScoreBreakdown:
    """
    Per-pillar scores behind a vitality total.

    reputation is None only when the credits source was unreachable for the
    whole pass; a pod with no credits while the source is up scores 0.
    """

    uptime: int = 0
    version: int = 0
    storage: int = 0
    reputation: int | None = 0
    penalties: PenaltyBreakdown = field(default_factory=PenaltyBreakdown)

    def to_dict(self) -> dict[str, Any]:
        return {
            "uptime": self.uptime,
            "version": self.version,
            "reputation": self.reputation,
            "storage": self.storage,
            "penalties": self.penalties.to_dict(),
        }


@dataclass(frozen=True)
class VitalityResult:
    total: int
    breakdown: ScoreBreakdown

    @property
    def health(self) -> int:
        return self.total

    @classmethod
    def zero(cls) -> "VitalityResult":
        return cls(total=0, breakdown=ScoreBreakdown())

    def to_dict(self) -> dict[str, Any]:
        return {"health": self.total, "health_breakdown": self.breakdown.to_dict()}


@dataclass
class FleetAggregates:
    """
    Phase-1 fleet-wide inputs, read-only during per-node scoring.

    median_credits_by_network lets each sub-network be judged against its own
    credit economy; networks without an entry fall back to median_credits.
    """

    median_storage_committed: float = 0.0
    median_credits: float = 0.0
    consensus_version: str = EMPTY_VERSION
    sorted_versions: list[str] = field(default_factory=list)
    credits_source_online: bool = True
    median_credits_by_network: dict[Network, float] = field(default_factory=dict)

    def median_credits_for(self, network: Network) -> float:
        return self.median_credits_by_network.get(network, self.median_credits)

    def to_dict(self) -> dict[str, Any]:
        return {
            "median_storage_committed": self.median_storage_committed,
            "median_credits": self.median_credits,
            "median_credits_by_network": {
                n.value: v for n, v in self.median_credits_by_network.items()
            },
            "consensus_version": self.consensus_version,
            "sorted_versions": list(self.sorted_versions),
            "credits_source_online": self.credits_source_online,
        }


@dataclass(frozen=True)
class ScoredNode:
    snapshot: NodeSnapshot
    result: VitalityResult
    version_status: VersionStatus = VersionStatus.LATEST

    @property
    def pubkey(self) -> str | None:
        return self.snapshot.pubkey if self.snapshot.has_identity else None

    @property
    def network(self) -> Network:
        return self.snapshot.network

    @property
    def health(self) -> int:
        return self.result.total


@dataclass(frozen=True)
class RankEntry:
    rank: int
    """1-based position within the pod's network; 0 when the pod has no identity."""
    storage_usage_percent: str


@dataclass(frozen=True)
class ClusterStats:
    mainnet_count: int = 0
    devnet_count: int = 0

    @property
    def total_global(self) -> int:
        return self.mainnet_count + self.devnet_count

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_global": self.total_global,
            "mainnet_count": self.mainnet_count,
            "devnet_count": self.devnet_count,
        }


@dataclass(frozen=True)
class AnnotatedNode:
    """A scored pod with its leaderboard position and identity cluster counts."""

    scored: ScoredNode
    rank_entry: RankEntry
    cluster_stats: ClusterStats
    health_rank: int = 0

    @property
    def rank(self) -> int:
        return self.rank_entry.rank

    def to_dict(self) -> dict[str, Any]:
        out = self.scored.snapshot.to_dict()
        out.update(self.scored.result.to_dict())
        out["version_status"] = self.scored.version_status.value
        out["rank"] = self.rank_entry.rank
        out["health_rank"] = self.health_rank
        out["storage_usage_percentage"] = self.rank_entry.storage_usage_percent
        out["cluster_stats"] = self.cluster_stats.to_dict()
        return out


@dataclass(frozen=True)
class AverageBreakdown:
    total: int = 0
    uptime: int = 0
    version: int = 0
    storage: int = 0
    reputation: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "uptime": self.uptime,
            "version": self.version,
            "reputation": self.reputation,
            "storage": self.storage,
        }


@dataclass(frozen=True)
class FleetSummary:
    consensus_version: str
    median_credits: float
    median_storage: float
    total_nodes: int
    credits_source_online: bool
    avg_breakdown: AverageBreakdown

    def to_dict(self) -> dict[str, Any]:
        return {
            "consensus_version": self.consensus_version,
            "median_credits": self.median_credits,
            "median_storage": self.median_storage,
            "total_nodes": self.total_nodes,
            "system_status": {"credits": self.credits_source_online},
            "avg_breakdown": self.avg_breakdown.to_dict(),
        }


@dataclass(frozen=True)
class FleetReport:
    nodes: list[AnnotatedNode]
    summary: FleetSummary
    aggregates: FleetAggregates

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "stats": self.summary.to_dict(),
        }
