"""
FastAPI server — scoring endpoints for the dashboard's data-fetch layer.

The fetch layer posts the fleet snapshot it collected; the server runs one
scoring cycle synchronously and returns scores, ranks and cluster counts.
No state is kept between requests.
"""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from fleet_vitality import __version__
from fleet_vitality.config import get_settings
from fleet_vitality.logging import get_logger
from fleet_vitality.scoring import (
    FleetAggregates,
    Network,
    NodeSnapshot,
    PenaltyAdjustment,
    run_scoring_cycle,
    score_node,
)
from fleet_vitality.scoring.versions import EMPTY_VERSION

logger = get_logger(__name__)

MAX_FLEET_SIZE = 20000


# -----------------------------------------------------------------------------
# Request models
# -----------------------------------------------------------------------------

class NodeIn(BaseModel):
    """One pod record as collected by the fetch layer. Numeric fields are coalesced, not rejected."""

    pubkey: str | None = Field(None, max_length=128, description="Pod identity (base58)")
    address: str = Field("", max_length=256, description="host:port")
    network: str = Field("UNKNOWN", description="MAINNET | DEVNET | UNKNOWN")
    version: str | None = Field(None, description="Raw software version")
    uptime: float | str | None = Field(None, description="Uptime in seconds")
    storage_committed: float | str | None = Field(None, description="Committed bytes")
    storage_used: float | str | None = Field(None, description="Used bytes")
    credits: float | str | None = Field(None, description="Earned credits; null when untracked")
    is_public: bool = Field(False, description="Pod exposes a public RPC")


class PenaltyIn(BaseModel):
    """Pre-computed anomaly penalties for one pod."""

    restarts_7d: int = Field(0, ge=0)
    restarts_24h: int = Field(0, ge=0)
    consistency: float = Field(1.0, ge=0, le=1)
    yield_velocity_24h: float | None = Field(None, description="Credits earned in the last 24h")
    frozen_duration_hours: float = Field(0.0, ge=0)

    def to_adjustment(self) -> PenaltyAdjustment:
        return PenaltyAdjustment(**self.model_dump())


class FleetScoreRequest(BaseModel):
    """POST /fleet/score body."""

    nodes: list[NodeIn] = Field(..., max_length=MAX_FLEET_SIZE)
    credits_source_online: bool = Field(
        True, description="False when the credits feed was unreachable this cycle"
    )
    penalties: dict[str, PenaltyIn] = Field(default_factory=dict, description="Penalties keyed by pubkey")


class AggregatesIn(BaseModel):
    median_storage_committed: float = Field(0.0, ge=0)
    median_credits: float = Field(0.0, ge=0)
    median_credits_by_network: dict[str, float] = Field(default_factory=dict)
    consensus_version: str = Field(EMPTY_VERSION)
    sorted_versions: list[str] = Field(default_factory=list, description="Distinct cleaned versions, newest first")
    credits_source_online: bool = True

    def to_aggregates(self) -> FleetAggregates:
        return FleetAggregates(
            median_storage_committed=self.median_storage_committed,
            median_credits=self.median_credits,
            consensus_version=self.consensus_version,
            sorted_versions=list(self.sorted_versions),
            credits_source_online=self.credits_source_online,
            median_credits_by_network={
                Network.parse(k): v for k, v in self.median_credits_by_network.items()
            },
        )


class NodeScoreRequest(BaseModel):
    """POST /node/score body: one pod plus caller-computed fleet aggregates."""

    node: NodeIn
    aggregates: AggregatesIn
    penalty: PenaltyIn | None = None


# -----------------------------------------------------------------------------
# App and routes
# -----------------------------------------------------------------------------

app = FastAPI(
    title="Fleet Vitality API",
    description="Vitality scores and per-network leaderboard for storage pods.",
    version=__version__,
)


@app.get("/health")
def health() -> dict[str, str]:
    """Liveness check: API is up."""
    return {"status": "ok"}


@app.post("/fleet/score")
def score_fleet_snapshot(body: FleetScoreRequest) -> dict[str, Any]:
    """
    Run a full scoring cycle over the posted fleet.

    Returns nodes (input order) with health, health_breakdown, rank,
    storage_usage_percentage and cluster_stats, plus fleet stats.
    """
    if not body.nodes:
        raise HTTPException(status_code=400, detail="nodes must be non-empty")
    snapshots = [NodeSnapshot.from_mapping(n.model_dump()) for n in body.nodes]
    penalties = {k: p.to_adjustment() for k, p in body.penalties.items()}
    logger.info(
        "fleet_score_called",
        node_count=len(snapshots),
        penalty_count=len(penalties),
        credits_source_online=body.credits_source_online,
    )
    report = run_scoring_cycle(
        snapshots,
        credits_source_online=body.credits_source_online,
        penalties=penalties,
        settings=get_settings(),
    )
    return report.to_dict()


@app.post("/node/score")
def score_single_node(body: NodeScoreRequest) -> dict[str, Any]:
    """Score one pod against caller-supplied aggregates: {health, health_breakdown}."""
    snapshot = NodeSnapshot.from_mapping(body.node.model_dump())
    penalty = body.penalty.to_adjustment() if body.penalty else None
    result = score_node(snapshot, body.aggregates.to_aggregates(), penalty=penalty, settings=get_settings())
    logger.info("node_score_called", node_id=snapshot.pubkey, health=result.total)
    return result.to_dict()


@app.exception_handler(HTTPException)
def http_exception_handler(request: Any, exc: HTTPException) -> JSONResponse:
    """Consistent JSON error response for HTTPException."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
    )
