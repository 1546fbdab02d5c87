"""FastAPI application factory."""

from fastapi import FastAPI

from recipe_discovery.api.engagement import router as engagement_router
from recipe_discovery.api.recipes import router as recipes_router
from recipe_discovery.app_logging import configure_logging
from recipe_discovery.containers import AppContainer


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()

    app = FastAPI(title="Recipe Discovery")
    app.state.container = container

    app.include_router(recipes_router)
    app.include_router(engagement_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
