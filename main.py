"""
Main entrypoint: Fleet Vitality API server.

The scoring engine itself is stateless; the fetch/poll cadence belongs to the
dashboard's data layer, which posts each fleet snapshot to POST /fleet/score.

Env: API_HOST, API_PORT, LOG_LEVEL, LOG_FORMAT, VITALITY_* (see fleet_vitality.config.env).

Equivalent: uvicorn fleet_vitality.api_server.app:app --host 0.0.0.0 --port 8000
"""

# Configure structured JSON logging before other imports that may log
from fleet_vitality.logging import get_logger

logger = get_logger("main")


def main() -> None:
    """Run the FastAPI server in the main thread."""
    import os

    import uvicorn

    from fleet_vitality.api_server.app import app
    from fleet_vitality.config import get_settings

    settings = get_settings()
    logger.info(
        "main_server_starting",
        host=settings.api_host,
        port=settings.api_port,
        version_decay=settings.version_decay,
        scoring_concurrency=settings.scoring_concurrency,
    )
    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )


if __name__ == "__main__":
    main()
