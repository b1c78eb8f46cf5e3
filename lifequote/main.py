"""
FastAPI application entry point.
Life Insurance Advisor Chat API
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pymongo.errors import PyMongoError

from lifequote import __version__
from lifequote.config import get_settings
from lifequote.api.routes import router
from lifequote.core.mongodb_client import ping, ensure_indexes, close_mongodb_client


# Configure logging
logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.
    Handles startup and shutdown events.
    """
    # Startup
    logger.info("Starting Life Insurance Advisor API...")
    settings = get_settings()
    logger.info(f"API Version: {__version__}")
    logger.info(f"LLM model: {settings.fireworks_llm_model}")
    if not settings.llm_configured:
        logger.warning("FIREWORKS_API_KEY is not set; chat turns will fail")

    if ping():
        try:
            ensure_indexes()
            logger.info("MongoDB connection established")
        except PyMongoError as e:
            logger.warning(f"Could not create MongoDB indexes: {e}")
    else:
        logger.warning("API will start but conversations and leads will not be stored")

    yield

    # Shutdown
    logger.info("Shutting down Life Insurance Advisor API...")
    close_mongodb_client()
    logger.info("Cleanup complete")


# Create FastAPI application
app = FastAPI(
    title="Life Insurance Advisor API",
    description="""
    Conversational life insurance shopping assistant

    - **Fireworks AI** (Llama 3.3 70B) drives the advisor dialogue
    - A rule-based engine extracts the shopper's profile and sizes coverage
    - Mock carriers price term-life quotes once age and income are known
    - **MongoDB** stores conversations, quotes and leads

    ## Quick Start

    1. POST the conversation to `/api/chat` with a `sessionId`
    2. Pass the returned `user_profile` back on the next turn
    3. POST the lead form to `/api/leads` once quotes are shown
    """,
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routes
app.include_router(router)


# Root endpoint
@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information."""
    return {
        "name": "Life Insurance Advisor API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
    }


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "lifequote.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=True,
    )
