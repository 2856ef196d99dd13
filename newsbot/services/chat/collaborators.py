"""Timeout and error boundary around retrieval and generation calls."""

import asyncio
from typing import Awaitable, TypeVar

from newsbot.core.errors import CollaboratorError
from newsbot.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

RETRIEVAL = "retrieval"
GENERATION = "generation"


async def call_collaborator(name: str, call: Awaitable[T], timeout: float) -> T:
    """Await a collaborator call bounded by ``timeout`` seconds.

    Timeouts and failures become ``CollaboratorError``; nothing is retried.
    """
    try:
        return await asyncio.wait_for(call, timeout=timeout)
    except asyncio.TimeoutError as e:
        logger.error("%s timed out after %.1fs", name.capitalize(), timeout)
        raise CollaboratorError(
            f"{name.capitalize()} timed out after {timeout:.1f}s",
            collaborator=name,
            timed_out=True,
        ) from e
    except CollaboratorError:
        raise
    except Exception as e:
        logger.error("%s failed: %s", name.capitalize(), e, exc_info=True)
        raise CollaboratorError(f"{name.capitalize()} failed: {e}", collaborator=name) from e
