import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from timegrid.infrastructure import ClickUpClient, configure_entry_source
from timegrid.routes import plans, timing


def create_app() -> FastAPI:
    app = FastAPI(title="Timegrid Utilization API", version="0.1.0")

    logging.basicConfig(level=os.getenv("TIMEGRID_LOG_LEVEL", "INFO").upper())

    api_base = os.getenv("CLICKUP_API_BASE")
    if api_base:
        configure_entry_source(ClickUpClient(api_base=api_base))

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

    app.include_router(timing.router, prefix="/api")
    app.include_router(plans.router, prefix="/api")

    @app.get("/", include_in_schema=False)
    async def root() -> JSONResponse:
        """Provide a lightweight landing page for container checks."""
        return JSONResponse(
            {
                "message": "Timegrid Utilization API",
                "docs": "/docs",
                "timing": "/api/timing",
            }
        )

    return app


app = create_app()
