import logging
import os
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ordertrack.core.sources import api_base_url, api_timeout
from ordertrack.infrastructure import DirectorySourceClient, HttpSourceClient, configure_source_client
from ordertrack.routes import orders


def create_app() -> FastAPI:
    app = FastAPI(title="Order Tracking Board API", version="0.1.0")

    logging.getLogger("ordertrack").setLevel(os.getenv("LOG_LEVEL", "INFO").upper())

    source_dir = os.getenv("ORDER_SOURCE_DIR")
    if source_dir:
        configure_source_client(DirectorySourceClient(Path(source_dir).expanduser()))
    else:
        configure_source_client(HttpSourceClient(api_base_url(), timeout=api_timeout()))

    origins_env = os.getenv("API_CORS_ORIGINS", "")
    origins = [origin.strip() for origin in origins_env.split(",") if origin.strip()]
    if not origins:
        origins = ["http://localhost:3000", "http://127.0.0.1:3000"]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(orders.router, prefix="/api")

    @app.get("/", include_in_schema=False)
    async def root() -> JSONResponse:
        """Provide a lightweight landing page for container checks."""
        return JSONResponse(
            {
                "message": "Order Tracking Board API",
                "docs": "/docs",
                "health": "/api/orders/status",
            }
        )

    return app


app = create_app()
