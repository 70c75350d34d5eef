import logging

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from generate_metadata import MetadataAdapter, __version__
from generate_metadata.config import Settings, settings
from generate_metadata.exception_handlers import register_exception_handlers

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)


def create_app(app_settings: Settings = settings, client: MetadataAdapter | None = None) -> FastAPI:
    """Create the example application serving metadata and the revalidation webhook."""
    client = client or MetadataAdapter.from_settings(app_settings)

    app = FastAPI(
        title="generate-metadata",
        description="Example application for the generate-metadata client",
        debug=app_settings.debug,
        version=__version__,
    )
    app.state.metadata_client = client

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    app.include_router(client.revalidate_webhook_handler().router)

    page_metadata = client.get_metadata(
        lambda path: {
            "path": path,
            "fallback": {"title": "generate-metadata", "description": "Page metadata"},
        }
    )

    @app.get("/", tags=["Root"])
    async def root():
        return {"message": "generate-metadata example", "version": __version__}

    @app.get("/metadata", tags=["Metadata"])
    async def read_metadata(path: str = "/"):
        return await page_metadata(path)

    @app.get("/metadata/cache", tags=["Metadata"])
    async def read_cache_stats():
        return client.cache.get_stats()

    if client.core.resolver.development_mode:
        logger.info("Running without a DSN, generated metadata is disabled")

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=settings.debug)
