"""Entry point for the Market Admin API.

Builds the settings from the environment, creates the FastAPI
application and serves it with Uvicorn.  Intended to be executed from
the project root, for example in a container where you only specify a
single Python file to run.

Configuration such as SUPABASE_URL, SUPABASE_SERVICE_ROLE_KEY and the
protected vendor ids is read from environment variables; see
``market_admin_api/app/core/config.py`` for the full list.

Usage:
    python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from market_admin_api.app.core.config import Settings
from market_admin_api.app.core.logging_config import setup_logging
from market_admin_api.app.main import create_app

logger = logging.getLogger(__name__)


async def run_api(settings: Settings) -> None:
    """Start the API using Uvicorn on ``API_HOST``/``API_PORT``."""
    app = create_app(settings)
    config = Config(
        app=app,
        host=settings.api_host,
        port=settings.api_port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    await server.serve()


async def main() -> None:
    settings = Settings()
    setup_logging(settings.log_level, settings.log_file or None, secrets=(settings.service_role_key,))
    problems = settings.validate()
    if problems:
        for problem in problems:
            logger.error("Configuration problem: %s", problem)
        raise SystemExit(1)
    await run_api(settings)


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
