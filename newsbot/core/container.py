"""Service container owning the chat service's stateful components.

Every component is constructed here and handed its collaborators by
reference; there are no module-level clients. The container owns the store
connection, so it is also the only place that connects and disconnects it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, TYPE_CHECKING

from newsbot.core.logging import get_logger

if TYPE_CHECKING:
    from newsbot.core.config import Settings
    from newsbot.core.interfaces import IAnswerGenerator, IRetrievalStore
    from newsbot.services.cache.backends.base import ICacheBackend
    from newsbot.services.cache.result_cache import ResultCache
    from newsbot.services.cache.warmer import CacheWarmer
    from newsbot.services.chat.orchestrator import ChatOrchestrator
    from newsbot.services.session_store import SessionStore

logger = get_logger(__name__)


class ServiceNotInitializedError(Exception):
    """Raised when accessing a service that hasn't been initialized."""

    def __init__(self, service_name: str):
        super().__init__(f"Service '{service_name}' has not been initialized. "
                         f"Call container.initialize() first.")
        self.service_name = service_name


@dataclass
class ServiceContainer:
    """Container for the store, caches and chat services.

    Usage:
        container = ServiceContainer()
        await container.initialize(settings)

        orchestrator = container.orchestrator
        container.warmer.start()

        await container.shutdown()
    """

    _backend: Optional[ICacheBackend] = field(default=None, repr=False)
    _result_cache: Optional[ResultCache] = field(default=None, repr=False)
    _session_store: Optional[SessionStore] = field(default=None, repr=False)
    _retriever: Optional[IRetrievalStore] = field(default=None, repr=False)
    _answer_generator: Optional[IAnswerGenerator] = field(default=None, repr=False)
    _orchestrator: Optional[ChatOrchestrator] = field(default=None, repr=False)
    _warmer: Optional[CacheWarmer] = field(default=None, repr=False)
    _initialized: bool = field(default=False, repr=True)
    _settings: Optional[Settings] = field(default=None, repr=False)

    async def initialize(self, settings: Settings) -> None:
        """Connect the store and build every service.

        Raises:
            StoreUnavailableError: The store could not be reached within the
                connect timeout.
        """
        if self._initialized:
            logger.warning("Container already initialized, skipping")
            return

        self._settings = settings
        logger.info("Initializing service container...")

        try:
            from newsbot.core.vectorstore import VectorStoreManager
            from newsbot.services.cache.backends import create_backend
            from newsbot.services.chat.answer_generator import AnswerGenerator

            self._backend = create_backend(settings)
            await self._backend.connect()
            logger.info("Key-value store connected")

            vector_store_manager = VectorStoreManager(settings)
            await vector_store_manager.initialize()
            self._retriever = vector_store_manager
            logger.info("Vector store initialized")

            self._answer_generator = AnswerGenerator.from_settings(settings)
            logger.info("Answer generator initialized")

            self.wire(settings)

            self._initialized = True
            logger.info("Service container initialized successfully")

        except Exception as e:
            logger.error("Failed to initialize service container: %s", e)
            await self.shutdown()
            raise

    def wire(self, settings: Settings) -> None:
        """Build the stateful services on top of the backend and collaborators."""
        from newsbot.services.cache.result_cache import CacheConfig, ResultCache
        from newsbot.services.cache.warmer import CacheWarmer
        from newsbot.services.chat.orchestrator import ChatOrchestrator
        from newsbot.services.session_store import SessionStore

        self._settings = settings
        self._result_cache = ResultCache(self.backend, CacheConfig.from_settings(settings))
        self._session_store = SessionStore(self.backend, session_ttl=settings.session_ttl)
        self._orchestrator = ChatOrchestrator(
            cache=self._result_cache,
            sessions=self._session_store,
            retriever=self.retriever,
            generator=self.answer_generator,
            top_k=settings.retrieval_top_k,
            retrieval_timeout=settings.retrieval_timeout,
            generation_timeout=settings.generation_timeout,
        )
        self._warmer = CacheWarmer.from_settings(
            settings, self._result_cache, self.retriever, self.answer_generator
        )

    async def shutdown(self) -> None:
        """Stop background work and release connections."""
        logger.info("Shutting down service container...")

        if self._warmer:
            try:
                await self._warmer.stop()
            except Exception as e:
                logger.error("Error stopping cache warmer: %s", e)

        if self._backend:
            try:
                await self._backend.disconnect()
                logger.info("Key-value store disconnected")
            except Exception as e:
                logger.error("Error disconnecting store: %s", e)

        close = getattr(self._retriever, "close", None)
        if close is not None:
            try:
                await close()
                logger.info("Vector store closed")
            except Exception as e:
                logger.error("Error closing vector store: %s", e)

        self._initialized = False
        logger.info("Service container shut down")

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            raise ServiceNotInitializedError("settings")
        return self._settings

    @property
    def backend(self) -> ICacheBackend:
        if self._backend is None:
            raise ServiceNotInitializedError("backend")
        return self._backend

    @property
    def result_cache(self) -> ResultCache:
        if self._result_cache is None:
            raise ServiceNotInitializedError("result_cache")
        return self._result_cache

    @property
    def session_store(self) -> SessionStore:
        if self._session_store is None:
            raise ServiceNotInitializedError("session_store")
        return self._session_store

    @property
    def retriever(self) -> IRetrievalStore:
        if self._retriever is None:
            raise ServiceNotInitializedError("retriever")
        return self._retriever

    @property
    def answer_generator(self) -> IAnswerGenerator:
        if self._answer_generator is None:
            raise ServiceNotInitializedError("answer_generator")
        return self._answer_generator

    @property
    def orchestrator(self) -> ChatOrchestrator:
        if self._orchestrator is None:
            raise ServiceNotInitializedError("orchestrator")
        return self._orchestrator

    @property
    def warmer(self) -> CacheWarmer:
        if self._warmer is None:
            raise ServiceNotInitializedError("warmer")
        return self._warmer

    def set_backend(self, backend: ICacheBackend) -> None:
        """Set the store backend (for testing)."""
        self._backend = backend

    def set_retriever(self, retriever: IRetrievalStore) -> None:
        """Set the retrieval collaborator (for testing)."""
        self._retriever = retriever

    def set_answer_generator(self, generator: IAnswerGenerator) -> None:
        """Set the generation collaborator (for testing)."""
        self._answer_generator = generator


def create_container() -> ServiceContainer:
    """Create a new, empty service container."""
    return ServiceContainer()
