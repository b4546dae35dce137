"""
FastAPI/ASGI application entrypoint.

Run with: uvicorn fleet_vitality.api_server.app:app --host 0.0.0.0 --port 8000
"""

from fleet_vitality.api_server.server import app

__all__ = ["app"]
