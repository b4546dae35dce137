"""
Fleet Vitality — scoring and ranking engine for distributed storage pods.

Reduces raw pod telemetry (uptime, committed/used storage, software version,
earned credits) into a 0–100 vitality score with an auditable breakdown, and
a per-network leaderboard with identity cluster counts. Pure computation:
fetching, persistence and rendering belong to the callers.
"""

__version__ = "0.1.0"
