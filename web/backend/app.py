import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from web.backend.routers import sync

logger = logging.getLogger("telofy.web")


def create_app() -> FastAPI:
    app = FastAPI(title="Telofy Sync API", version="1.0")

    raw_origins = os.getenv("TELOFY_ALLOWED_ORIGINS", "*")
    allow_origins = [o.strip() for o in raw_origins.split(",") if o.strip()]
    allow_credentials = "*" not in allow_origins

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health_check():
        return {"status": "ok", "service": "Telofy Sync"}

    app.include_router(sync.router, prefix="/api/v1/sync", tags=["sync"])
    logger.info("Sync API routes registered")

    return app


app = create_app()
