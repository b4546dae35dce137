"""
Structured logging for Fleet Vitality.

JSON logs with timestamp, node_id, event_type and scoring context.
Use get_logger() in all engine modules for aggregation-friendly output.
"""

from fleet_vitality.logging.logger import bind_node, get_logger

__all__ = ["bind_node", "get_logger"]
