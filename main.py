"""
FastAPI Application Entry Point

Integrates:
  - Messenger webhook (verification + callbacks)
  - Health checks
  - Middleware for logging & error handling

Run: uvicorn main:app --host 0.0.0.0 --port 3000
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from bot.handler import MessengerBot
from config import Config, ConfigError, get_config
from infra.bootstrap import build_bot, configure_page
from transport.messenger.webhook import router as messenger_router

logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan: startup and shutdown handlers.

    Startup fails when a required credential is missing.
    """
    config: Config = app.state.config

    # Startup
    if app.state.bot is None:
        try:
            config.validate()
        except ConfigError as e:
            logger.error(str(e))
            raise
        app.state.bot = build_bot(config)
        if config.configure_page:
            await configure_page(app.state.bot.sender)

    logger.info("=" * 60)
    logger.info("Messenger bot starting up...")
    logger.info(f"Environment: {config.environment}")
    logger.info(f"NLU Backend: {config.nlu_backend}")
    logger.info("=" * 60)

    yield

    # Shutdown
    logger.info("Messenger bot shutting down...")
    await app.state.bot.aclose()


def create_app(config: Optional[Config] = None, bot: Optional[MessengerBot] = None) -> FastAPI:
    """
    Build the FastAPI app.

    Args:
        config: Configuration (defaults to the environment)
        bot: Prebuilt bot; when omitted it is built at startup
    """
    app = FastAPI(
        title="Messenger Forecast Bot",
        description="Messenger Platform webhook with keyword replies and Wit.ai forecasts",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.config = config or get_config()
    app.state.bot = bot
    setup_logging(app.state.config.log_level)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log all requests."""
        logger.debug(f"{request.method} {request.url.path}")
        try:
            return await call_next(request)
        except Exception as e:
            logger.error(f"Request error: {str(e)}", exc_info=True)
            return JSONResponse(
                status_code=500,
                content={"detail": "Internal server error"},
            )

    app.include_router(messenger_router)

    @app.get("/health/live")
    async def health_live():
        """Liveness health check."""
        return {"status": "alive"}

    @app.get("/health/ready")
    async def health_ready(request: Request):
        """Readiness health check."""
        missing = request.app.state.config.missing_required()
        if missing:
            return {"status": "not_ready", "reason": f"Missing config values: {', '.join(missing)}"}
        if request.app.state.bot is None:
            return {"status": "not_ready", "reason": "Bot not started"}
        return {"status": "ready"}

    @app.get("/")
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Messenger Forecast Bot",
            "version": "1.0.0",
            "status": "running",
            "endpoints": {
                "webhook_verify": "GET /webhook",
                "webhook": "POST /webhook",
                "health_live": "GET /health/live",
                "health_ready": "GET /health/ready",
            },
        }

    return app


app = create_app()


def main() -> None:
    import uvicorn

    config = get_config()
    setup_logging(config.log_level)
    try:
        config.validate()
    except ConfigError as e:
        logger.error(str(e))
        sys.exit(1)

    uvicorn.run(
        create_app(config),
        host="0.0.0.0",
        port=config.port,
        log_level=config.log_level.lower(),
    )


if __name__ == "__main__":
    main()
