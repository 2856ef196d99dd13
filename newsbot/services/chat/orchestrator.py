"""Per-request chat flow: session append, cache lookup, retrieval and generation."""

from typing import List, Optional

from newsbot.core.errors import ValidationError
from newsbot.core.interfaces import IAnswerGenerator, IRetrievalStore
from newsbot.core.logging import get_logger
from newsbot.models.query import ChatResponse, ChunkOrigin, Source
from newsbot.models.session import Message, MessageRole
from newsbot.services.cache.result_cache import ResultCache
from newsbot.services.chat.collaborators import GENERATION, RETRIEVAL, call_collaborator
from newsbot.services.session_store import SessionStore

logger = get_logger(__name__)

FALLBACK_ANSWER = (
    "I couldn't find any relevant information in the news articles to answer your question."
)


class ChatOrchestrator:
    """Runs one chat turn as a fixed sequence of stages.

    1. validate the request
    2. record the user message (fatal on failure)
    3. look up the answer cache
    4. on a miss, retrieve and generate, then cache the answer
    5. record the assistant message
    6. build the response

    Errors raised after stage 2 reach the caller unchanged. The user message
    stays in the session, so retrying the request does not lose the question.
    """

    def __init__(
        self,
        cache: ResultCache,
        sessions: SessionStore,
        retriever: IRetrievalStore,
        generator: IAnswerGenerator,
        top_k: int = 3,
        retrieval_timeout: float = 10.0,
        generation_timeout: float = 30.0,
    ):
        self.cache = cache
        self.sessions = sessions
        self.retriever = retriever
        self.generator = generator
        self.top_k = top_k
        self.retrieval_timeout = retrieval_timeout
        self.generation_timeout = generation_timeout

    @staticmethod
    def _validate(query: Optional[str], session_id: Optional[str]) -> str:
        if query is None or not query.strip():
            raise ValidationError("Query is required", field="query")
        if not session_id:
            raise ValidationError("Session ID is required", field="sessionId")
        return query.strip()

    async def handle(self, query: Optional[str], session_id: Optional[str]) -> ChatResponse:
        """Answer ``query`` within the session ``session_id``."""
        query = self._validate(query, session_id)

        await self.sessions.add_message(
            session_id, Message(role=MessageRole.USER, content=query)
        )

        from_cache = False
        retrieved_chunks = 0
        sources: List[Source]

        cached = await self.cache.get_cached_answer(query)
        if cached is not None:
            logger.info("Serving cached answer for session %s", session_id)
            answer, sources = cached.answer, cached.sources
            from_cache = True
            origin = ChunkOrigin.CACHE
        else:
            chunks = await call_collaborator(
                RETRIEVAL, self.retriever.retrieve(query, self.top_k), self.retrieval_timeout
            )
            if not chunks:
                logger.info("No relevant chunks found for %r", query)
                answer, sources = FALLBACK_ANSWER, []
                origin = ChunkOrigin.NONE
            else:
                result = await call_collaborator(
                    GENERATION, self.generator.answer(query, chunks), self.generation_timeout
                )
                answer, sources = result.answer, result.sources
                retrieved_chunks = len(chunks)
                origin = ChunkOrigin.FRESH
                await self.cache.cache_answer(query, answer, sources)

        await self.sessions.add_message(
            session_id,
            Message(role=MessageRole.ASSISTANT, content=answer, sources=sources),
        )

        return ChatResponse(
            query=query,
            answer=answer,
            sources=sources,
            from_cache=from_cache,
            chunk_origin=origin,
            retrieved_chunks=retrieved_chunks,
            session_id=session_id,
        )
