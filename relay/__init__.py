from contextlib import asynccontextmanager

from fastapi import FastAPI

from config.settings import Settings
from relay.handler import RelayHandler
from relay.metrics import MetricsMiddleware, metrics
from relay.routes import router as relay_router
from relay.utils import setup_logger


def create_app(config: Settings, transport=None) -> FastAPI:
    """Build the relay application around ``config``.

    Args:
        config: Settings loaded once at process start.
        transport: Optional httpx transport for the outbound client.

    Returns:
        FastAPI: Application with the relay, health and metrics routes.
    """
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await app.state.relay_handler.client.aclose()

    app = FastAPI(lifespan=lifespan)

    # Set up logging
    setup_logger(level_name=config.LOG_LEVEL)

    app.state.settings = config
    app.state.relay_handler = RelayHandler.from_settings(config, transport=transport)

    app.add_middleware(MetricsMiddleware)

    # Register routes
    app.include_router(relay_router)

    @app.get("/")
    async def health_check() -> dict:
        """Health check endpoint used by monitoring systems.

        Returns:
            dict: Service status message.
        """
        return {"status": "running", "message": "Webhook relay ready"}

    @app.get("/metrics")
    async def metrics_endpoint():
        """Expose Prometheus metrics collected by the ``MetricsMiddleware``.

        Returns:
            Any: Text metrics in Prometheus format.
        """
        return metrics()

    return app
