from fastapi import Request, Depends
from newsbot.core.container import ServiceContainer
from newsbot.services.cache.result_cache import ResultCache
from newsbot.services.cache.warmer import CacheWarmer
from newsbot.services.chat.orchestrator import ChatOrchestrator
from newsbot.services.session_store import SessionStore

def get_service_container(request: Request) -> ServiceContainer:
    """Get the service container created by the application lifespan."""
    return request.app.state.container

def get_result_cache(
    container: ServiceContainer = Depends(get_service_container)
) -> ResultCache:
    return container.result_cache

def get_session_store(
    container: ServiceContainer = Depends(get_service_container)
) -> SessionStore:
    return container.session_store

def get_orchestrator(
    container: ServiceContainer = Depends(get_service_container)
) -> ChatOrchestrator:
    return container.orchestrator

def get_warmer(
    container: ServiceContainer = Depends(get_service_container)
) -> CacheWarmer:
    return container.warmer
