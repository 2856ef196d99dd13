"""Background warming of the result cache for popular queries."""

import asyncio
from typing import List, Optional, Sequence

from newsbot.core.config import Settings
from newsbot.core.interfaces import IAnswerGenerator, IRetrievalStore
from newsbot.core.logging import get_logger
from newsbot.models.cache import WarmingReport
from newsbot.services.cache.result_cache import ResultCache
from newsbot.services.chat.collaborators import GENERATION, RETRIEVAL, call_collaborator

logger = get_logger(__name__)


class CacheWarmer:
    """Keeps answers for a fixed list of queries pre-computed.

    ``start()`` spawns one asyncio task that warms immediately and then once
    per interval; ``stop()`` lets an in-flight pass finish and waits for the
    task to exit. The warmer shares no lock with request handling.
    """

    def __init__(
        self,
        cache: ResultCache,
        retriever: IRetrievalStore,
        generator: IAnswerGenerator,
        queries: Sequence[str],
        interval_seconds: float = 3600,
        enabled: bool = False,
        top_k: int = 3,
        retrieval_timeout: float = 10.0,
        generation_timeout: float = 30.0,
    ):
        self.cache = cache
        self.retriever = retriever
        self.generator = generator
        self.queries: List[str] = list(queries)
        self.interval_seconds = interval_seconds
        self.enabled = enabled
        self.top_k = top_k
        self.retrieval_timeout = retrieval_timeout
        self.generation_timeout = generation_timeout

        self._task: Optional[asyncio.Task] = None
        self._stop_event: Optional[asyncio.Event] = None

        logger.info(
            "CacheWarmer: warming %s, interval %ss, %d queries",
            "enabled" if enabled else "disabled",
            interval_seconds,
            len(self.queries),
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        cache: ResultCache,
        retriever: IRetrievalStore,
        generator: IAnswerGenerator,
    ) -> "CacheWarmer":
        return cls(
            cache=cache,
            retriever=retriever,
            generator=generator,
            queries=settings.popular_query_list,
            interval_seconds=settings.cache_warming_interval_seconds,
            enabled=settings.enable_cache_warming,
            top_k=settings.retrieval_top_k,
            retrieval_timeout=settings.retrieval_timeout,
            generation_timeout=settings.generation_timeout,
        )

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def warm(self) -> WarmingReport:
        """Run one warming pass over every configured query."""
        logger.info("Cache warming: Starting pass over %d queries", len(self.queries))
        report = WarmingReport()

        for query in self.queries:
            try:
                await self._warm_query(query, report)
            except Exception as e:
                # One bad query must not stop the rest of the pass
                report.failed += 1
                logger.error("Cache warming: Error processing query %r: %s", query, e)

        logger.info(
            "Cache warming: Pass completed (warmed=%d cached=%d empty=%d failed=%d)",
            report.warmed,
            report.already_cached,
            report.empty,
            report.failed,
        )
        return report

    async def _warm_query(self, query: str, report: WarmingReport) -> None:
        if await self.cache.is_query_cached(query):
            logger.debug("Cache warming: Query %r already cached", query)
            report.already_cached += 1
            return

        logger.info("Cache warming: Processing query %r", query)
        chunks = await call_collaborator(
            RETRIEVAL, self.retriever.retrieve(query, self.top_k), self.retrieval_timeout
        )
        if not chunks:
            # Not cached, so the next pass retrieves again
            report.empty += 1
            return

        result = await call_collaborator(
            GENERATION, self.generator.answer(query, chunks), self.generation_timeout
        )
        if await self.cache.cache_answer(query, result.answer, result.sources, warmed=True):
            report.warmed += 1
        else:
            report.failed += 1

    def start(self) -> Optional[asyncio.Task]:
        """Start periodic warming; returns the task, or None when disabled."""
        if not self.enabled:
            logger.info("Cache warming is disabled")
            return None

        if self.running:
            return self._task

        logger.info("Starting cache warming every %ss", self.interval_seconds)
        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(self._run(self._stop_event), name="cache-warmer")
        return self._task

    async def _run(self, stop_event: asyncio.Event) -> None:
        while not stop_event.is_set():
            try:
                await self.warm()
            except Exception as e:
                logger.error("Cache warming: Error during warming pass: %s", e, exc_info=True)

            try:
                await asyncio.wait_for(stop_event.wait(), timeout=self.interval_seconds)
            except asyncio.TimeoutError:
                continue

    async def stop(self) -> None:
        """Stop periodic warming after the in-flight pass, if any."""
        if self._task is None:
            return

        if self._stop_event is not None:
            self._stop_event.set()

        try:
            await self._task
        except asyncio.CancelledError:
            pass
        finally:
            self._task = None
            self._stop_event = None
            logger.info("Cache warming stopped")
