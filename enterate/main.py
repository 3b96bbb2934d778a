from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from typing import Optional
import logging
import uvicorn

from . import routers
from .context import AppContext, build_app_context

logger = logging.getLogger(__name__)


def create_app(context: Optional[AppContext] = None) -> FastAPI:
    """Build the API; the storage context is created at startup unless given"""
    app = FastAPI(
        title="Entérate API",
        description="Community events with Supabase storage and an offline fallback",
        version="1.0.0",
    )
    app.state.context = context

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:5173", "http://127.0.0.1:5173"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.on_event("startup")
    async def startup_event():
        """Probe storage once and load (or migrate) the event collection"""
        logger.info("🚀 Starting Entérate API...")
        if app.state.context is None:
            app.state.context = build_app_context()
        app.state.context.load()

    # Include routers
    app.include_router(routers.events.router, prefix="/api/events", tags=["events"])
    app.include_router(routers.auth.router, prefix="/api/auth", tags=["authentication"])
    app.include_router(routers.admin.router, prefix="/api/admin", tags=["admin"])
    app.include_router(routers.images.router, prefix="/api/images", tags=["images"])
    app.include_router(routers.system.router, prefix="/api", tags=["system"])

    @app.get("/")
    async def root():
        return {"message": "Welcome to Entérate API", "status": "running"}

    @app.get("/health")
    async def health_check():
        context = app.state.context
        return {
            "status": "healthy",
            "service": "enterate-api",
            "version": "1.0.0",
            "backend": context.backend.kind.value if context else None,
        }

    return app


app = create_app()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    uvicorn.run(app, host="0.0.0.0", port=8000)
