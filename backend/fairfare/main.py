"""
FastAPI application entry point.

WHAT: Main application setup and wiring
WHY: Build provider, store and pipeline once and inject them
HOW: Create FastAPI app, register middleware, routers, handlers
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.v1.router import api_router
from .core.config import settings
from .core.database import close_db, create_db_engine, create_session_factory, init_db
from .llm.provider_factory import create_provider
from .middleware.error_handler import register_exception_handlers
from .services.negotiation_pipeline import NegotiationPipeline
from .services.plan_store import SqlPlanStore
from .utils.logger import get_logger, setup_logging

# Setup logging
setup_logging(settings)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    WHAT: Startup and shutdown logic
    WHY: Construct the provider and pipeline once, close connections cleanly
    HOW: Async context manager for FastAPI lifespan, objects kept on app.state
    """
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")

    provider = create_provider(settings)
    engine = None
    plan_store = None
    if settings.PERSIST_PLANS:
        engine = create_db_engine(settings.DATABASE_URL, echo=settings.DEBUG)
        init_db(engine)
        plan_store = SqlPlanStore(create_session_factory(engine))

    app.state.settings = settings
    app.state.provider = provider
    app.state.engine = engine
    app.state.pipeline = NegotiationPipeline(
        provider,
        temperature=settings.LLM_DEFAULT_TEMPERATURE,
        max_tokens=settings.LLM_DEFAULT_MAX_TOKENS,
        structured_output=settings.LLM_STRUCTURED_OUTPUT,
        plan_store=plan_store,
    )
    logger.info("Application startup complete")

    yield

    logger.info("Shutting down application")
    await provider.close()
    if engine is not None:
        close_db(engine)
    logger.info("Application shutdown complete")


# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register exception handlers
register_exception_handlers(app)

# Include API router
app.include_router(api_router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "fairfare.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG
    )
