"""
FastAPI Application

Main FastAPI application for CardioChat with:
- Lifespan management for orchestrator initialization/cleanup
- CORS middleware for frontend integration
- Exception handlers mapping core errors to HTTP responses
- Health, conversation, and chat endpoints

Usage:
    uvicorn cardiochat.api.main:app --reload --port 8000
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cardiochat import __version__
from cardiochat.api.routes import chat, conversations, health
from cardiochat.config import get_settings
from cardiochat.errors import ConversationNotFoundError, PersistenceError
from cardiochat.pipeline.orchestrator import ChatOrchestrator, create_orchestrator

logger = logging.getLogger(__name__)

# Global state for the orchestrator
app_state: dict[str, ChatOrchestrator | None] = {
    "orchestrator": None,
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Lifespan context manager for startup and shutdown.

    Loads the persisted session state and builds the orchestrator.
    """
    logger.info("Starting CardioChat API server...")
    try:
        app_state["orchestrator"] = create_orchestrator(get_settings())
    except Exception as e:
        logger.error(f"Failed to initialize orchestrator: {e}")
        app_state["orchestrator"] = None

    yield

    logger.info("Shutting down CardioChat API server...")
    orchestrator = app_state["orchestrator"]
    if orchestrator is not None:
        try:
            await orchestrator.aclose()
        except Exception as e:
            logger.error(f"Error closing completion client: {e}")
        app_state["orchestrator"] = None
    logger.info("CardioChat API server shut down complete")


config = get_settings()

# Create FastAPI app
app = FastAPI(
    title="CardioChat API",
    description="Multi-conversation cardiology assistant chat sessions",
    version=__version__,
    debug=config.debug,
    lifespan=lifespan,
)

# CORS middleware for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Exception handlers
@app.exception_handler(ConversationNotFoundError)
async def conversation_not_found_handler(
    request: Request, exc: ConversationNotFoundError
) -> JSONResponse:
    """Unknown conversation ids are a client error."""
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={
            "error": "conversation_not_found",
            "message": exc.message,
            "conversation_id": exc.conversation_id,
        },
    )


@app.exception_handler(PersistenceError)
async def persistence_error_handler(request: Request, exc: PersistenceError) -> JSONResponse:
    """Handle storage write failures."""
    logger.error(f"Persistence error: {exc}", extra={"context": exc.context})
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "error": "persistence_error",
            "message": "Session state could not be saved. Please try again later.",
        },
    )


# Include routers
app.include_router(health.router, prefix="/api/v1", tags=["health"])
app.include_router(conversations.router, prefix="/api/v1", tags=["conversations"])
app.include_router(chat.router, prefix="/api/v1", tags=["chat"])


# Root endpoint
@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with API information."""
    return {
        "name": "CardioChat API",
        "version": __version__,
        "docs": "/docs",
    }
