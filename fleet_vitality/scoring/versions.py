"""
Software version normalization and comparison.

Pod versions are free-form strings ("1.5.0-beta", "v2.0.1-trynet", "").
Everything here degrades instead of raising: an unparseable version becomes
"0.0.0" and compares equal to any other unparseable version.
"""

from __future__ import annotations

import re
from enum import Enum
from functools import cmp_to_key
from typing import Iterable

EMPTY_VERSION = "0.0.0"

_NON_VERSION_CHARS = re.compile(r"[^0-9.]")


class VersionStatus(str, Enum):
    LATEST = "latest"
    LAGGING = "lagging"
    OBSOLETE = "obsolete"


def clean_version(version: str | None) -> str:
    """
    Strip pre-release/build suffixes and non-numeric noise.

    "1.5.0-beta" -> "1.5.0", "v2.0.1-trynet" -> "2.0.1", "" / None -> "0.0.0".
    """
    if not version:
        return EMPTY_VERSION
    main = str(version).split("-", 1)[0]
    return _NON_VERSION_CHARS.sub("", main)


def _segments(version: str | None) -> list[int]:
    out: list[int] = []
    for part in clean_version(version).split("."):
        out.append(int(part) if part.isdigit() else 0)
    return out


def compare_versions(v1: str | None, v2: str | None) -> int:
    """Return 1 if v1 > v2, -1 if v1 < v2, 0 if equal (segment by segment, missing = 0)."""
    p1 = _segments(v1)
    p2 = _segments(v2)
    for i in range(max(len(p1), len(p2))):
        n1 = p1[i] if i < len(p1) else 0
        n2 = p2[i] if i < len(p2) else 0
        if n1 > n2:
            return 1
        if n1 < n2:
            return -1
    return 0


def sort_versions_desc(versions: Iterable[str | None]) -> list[str]:
    """Distinct cleaned versions, newest first. Ties (e.g. "1.0" vs "1.0.0") keep lexical order."""
    distinct = sorted({clean_version(v) for v in versions})
    return sorted(distinct, key=cmp_to_key(lambda a, b: compare_versions(b, a)))


def version_distance(
    node_version: str | None,
    consensus_version: str | None,
    sorted_versions: list[str],
) -> int | None:
    """
    Ladder distance of the node behind consensus in the descending version list.

    0 when the node is at or ahead of consensus; None when the node's cleaned
    version is not on the ladder.
    """
    clean_node = clean_version(node_version)
    clean_consensus = clean_version(consensus_version)
    if compare_versions(clean_node, clean_consensus) >= 0:
        return 0
    if clean_node not in sorted_versions:
        return None
    node_index = sorted_versions.index(clean_node)
    # Consensus missing from the ladder sits just above its head.
    consensus_index = (
        sorted_versions.index(clean_consensus) if clean_consensus in sorted_versions else -1
    )
    return max(0, node_index - consensus_index)


def classify_version(
    node_version: str | None,
    consensus_version: str | None,
    sorted_versions: list[str],
) -> VersionStatus:
    """
    Upgrade status badge: LATEST at/ahead of consensus, LAGGING within two
    releases, OBSOLETE three or more behind (or off the ladder entirely).
    A missing version is LAGGING.
    """
    if not node_version:
        return VersionStatus.LAGGING
    distance = version_distance(node_version, consensus_version, sorted_versions)
    if distance is None or distance >= 3:
        return VersionStatus.OBSOLETE
    if distance > 0:
        return VersionStatus.LAGGING
    return VersionStatus.LATEST
