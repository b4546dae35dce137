"""
Tests for version normalization, comparison, ladder ordering and upgrade status.
"""

from __future__ import annotations

import pytest

from fleet_vitality.scoring.versions import (
    EMPTY_VERSION,
    VersionStatus,
    classify_version,
    clean_version,
    compare_versions,
    sort_versions_desc,
    version_distance,
)

LADDER = ["1.5.0", "1.4.0", "1.3.0", "1.2.0", "1.1.0", "1.0.0"]


def test_clean_version_strips_suffixes():
    assert clean_version("1.5.0-beta") == "1.5.0"
    assert clean_version("2.0.1-trynet") == "2.0.1"
    assert clean_version("v1.2.3") == "1.2.3"
    assert clean_version("1.2.3-rc.1+build") == "1.2.3"


def test_clean_version_empty_and_none():
    assert clean_version("") == EMPTY_VERSION
    assert clean_version(None) == EMPTY_VERSION


@pytest.mark.parametrize(
    "v1, v2, expected",
    [
        ("1.5.0", "1.4.9", 1),
        ("1.2.0", "1.2.0", 0),
        ("2.0.0", "1.9.99", 1),
        ("1.4.9", "1.5.0", -1),
        ("1.10.0", "1.9.0", 1),
        ("1.2", "1.2.0", 0),
        ("1.2.0.1", "1.2.0", 1),
        ("1.5.0-beta", "1.5.0", 0),
    ],
)
def test_compare_versions(v1, v2, expected):
    assert compare_versions(v1, v2) == expected


def test_compare_versions_malformed_never_raises():
    """Garbage degrades to 0.0.0 and compares equal to other garbage."""
    assert compare_versions("garbage", "") == 0
    assert compare_versions(None, "nonsense-1.2") == 0
    assert compare_versions("..", "0") == 0
    assert compare_versions("1.0.0", "garbage") == 1


def test_sort_versions_desc_dedupes_cleaned():
    versions = ["1.3.0", "1.5.0-beta", "1.5.0", "1.10.0", None, "1.4.0-trynet"]
    assert sort_versions_desc(versions) == ["1.10.0", "1.5.0", "1.4.0", "1.3.0", "0.0.0"]


def test_version_distance():
    assert version_distance("1.5.0", "1.5.0", LADDER) == 0
    assert version_distance("1.6.0", "1.5.0", LADDER) == 0
    assert version_distance("1.4.0", "1.5.0", LADDER) == 1
    assert version_distance("1.0.0", "1.5.0", LADDER) == 5
    assert version_distance("0.9.0", "1.5.0", LADDER) is None


def test_version_distance_consensus_off_ladder():
    """A consensus missing from the ladder counts as sitting just above its head."""
    assert version_distance("1.4.0", "1.9.0", LADDER) == 2


def test_classify_version():
    assert classify_version("1.5.0", "1.5.0", LADDER) == VersionStatus.LATEST
    assert classify_version("1.6.0", "1.5.0", LADDER) == VersionStatus.LATEST
    assert classify_version("1.4.0", "1.5.0", LADDER) == VersionStatus.LAGGING
    assert classify_version("1.3.0-trynet", "1.5.0", LADDER) == VersionStatus.LAGGING
    assert classify_version("1.2.0", "1.5.0", LADDER) == VersionStatus.OBSOLETE
    assert classify_version("0.1.0", "1.5.0", LADDER) == VersionStatus.OBSOLETE
    assert classify_version("", "1.5.0", LADDER) == VersionStatus.LAGGING
