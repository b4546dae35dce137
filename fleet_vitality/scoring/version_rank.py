"""
Version score: 0–100 from a pod's ordinal distance behind the consensus version.

Distance is measured on the fleet's ladder of distinct cleaned versions
(newest first), not on semver arithmetic, so a fleet that skipped releases
is not punished for releases nobody ran.

Two decay tables:
- strict (default): one release behind 80, two behind 70, three or more 0.
- graduated: 90 / 70 / 50 / 30 / 10, then one point less per extra release.
"""

from __future__ import annotations

from fleet_vitality.config.env import DECAY_GRADUATED, DECAY_STRICT
from fleet_vitality.logging import get_logger
from fleet_vitality.scoring.versions import version_distance

logger = get_logger(__name__)

SCORE_CURRENT = 100
SCORE_OFF_LADDER = 0

STRICT_DECAY = {1: 80, 2: 70}
GRADUATED_DECAY = {1: 90, 2: 70, 3: 50, 4: 30, 5: 10}

DECAY_TABLES = {
    DECAY_STRICT: STRICT_DECAY,
    DECAY_GRADUATED: GRADUATED_DECAY,
}


def decay_score(distance: int, policy: str = DECAY_STRICT) -> int:
    """Score for a pod `distance` releases behind consensus under the given policy."""
    if distance <= 0:
        return SCORE_CURRENT
    table = DECAY_TABLES.get(policy, STRICT_DECAY)
    if distance in table:
        return table[distance]
    if policy == DECAY_GRADUATED:
        tail = max(table)
        return max(0, table[tail] - (distance - tail))
    return 0


def get_version_score_by_rank(
    node_version: str | None,
    consensus_version: str | None,
    sorted_versions: list[str],
    policy: str = DECAY_STRICT,
) -> int:
    """
    Version score for one pod.

    Args:
        node_version: Raw version reported by the pod.
        consensus_version: Most common version across the fleet.
        sorted_versions: Distinct cleaned versions, newest first.
        policy: "strict" or "graduated" decay table.

    Returns:
        100 at or ahead of consensus, 0 when the version is not on the ladder,
        otherwise the decay table value for the distance.
    """
    distance = version_distance(node_version, consensus_version, sorted_versions)
    if distance is None:
        logger.debug("version_off_ladder", version=node_version, consensus=consensus_version)
        return SCORE_OFF_LADDER
    return decay_score(distance, policy)
