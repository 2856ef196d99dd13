"""Lifecycle management for the application."""
from contextlib import asynccontextmanager
from fastapi import FastAPI
from newsbot.core.config import settings
from newsbot.core.logging import get_logger
from newsbot.core.container import create_container

logger = get_logger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle."""
    logger.info("Starting news chat service...")

    container = create_container()

    try:
        await container.initialize(settings)

        # Store container in app state for route access
        app.state.container = container

        # Warms once right away, then on the configured interval
        container.warmer.start()

        logger.info("News chat service started successfully")

    except Exception as e:
        logger.error("Failed to initialize services: %s", e)
        raise

    yield

    logger.info("Shutting down news chat service...")

    # Stops the warmer after its in-flight pass, then releases the store
    await container.shutdown()

    logger.info("News chat service shut down")
