"""Health check endpoint."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from newsbot.api.deps import get_service_container
from newsbot.core.container import ServiceContainer
from newsbot.core.errors import StoreUnavailableError
from newsbot.core.logging import get_logger
from newsbot.models.query import HealthResponse

logger = get_logger(__name__)
router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check(
    container: ServiceContainer = Depends(get_service_container),
) -> HealthResponse:
    """Liveness plus a store ping; a failed ping reports ``degraded``."""
    backend = container.backend
    try:
        connected = await backend.ping()
    except StoreUnavailableError as e:
        logger.warning("Health check: store ping failed: %s", e.message)
        connected = False

    return HealthResponse(
        status="healthy" if connected else "degraded",
        message="Server is running",
        store={"backend": type(backend).__name__, "connected": connected},
        timestamp=datetime.now(timezone.utc).isoformat(),
    )
