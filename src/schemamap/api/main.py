"""FastAPI application serving the schema overview."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from schemamap import __version__
from schemamap.api.routes import router
from schemamap.config import Settings, settings
from schemamap.graph.layout import SpringLayout
from schemamap.overview import SchemaOverview

logger = logging.getLogger(__name__)


def create_overview(app_settings: Settings) -> SchemaOverview:
    """Create the overview configured by settings."""
    return SchemaOverview(
        endpoints=app_settings.endpoint_list,
        show_metadata=app_settings.show_metadata,
        rich=app_settings.rich_overview,
        layout=SpringLayout(
            iterations=app_settings.layout_iterations,
            seed=app_settings.layout_seed,
            scale=app_settings.cluster_radius,
        ),
    )


def create_app(overview: SchemaOverview | None = None, load_on_startup: bool = True) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        overview: Pre-built overview (tests); created from settings otherwise
        load_on_startup: Fetch endpoint statistics during startup
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Manage application lifespan - startup and shutdown."""
        logger.info("Starting schemamap API...")
        current = overview or create_overview(settings)
        app.state.overview = current

        if load_on_startup:
            logger.info(f"Loading statistics from {', '.join(current.endpoint_urls)}")
            report = await current.load()
            if report is not None and not report.usable:
                logger.warning("Overview has no usable data")

        yield

        logger.info("Shutting down schemamap API...")
        await current.client.close()

    app = FastAPI(
        title="schemamap",
        description="Overview of the classes and predicates of SPARQL endpoints",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)

    return app


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    uvicorn.run(
        create_app(),
        host=settings.api_host,
        port=settings.api_port,
    )
