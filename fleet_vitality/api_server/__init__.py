"""
API server package — HTTP surface over the scoring engine.

Exposes the fleet scoring cycle and single-pod scoring to the dashboard's
data-fetch layer. Stateless; every request is an independent cycle.
"""
