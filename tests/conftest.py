"""Shared test fixtures for the news chat service tests."""

import pytest
from typing import List
from unittest.mock import AsyncMock, MagicMock

from newsbot.models.query import ChunkMetadata, GeneratedAnswer, RetrievedChunk, Source
from newsbot.services.cache.backends.memory_backend import MemoryBackend
from newsbot.services.cache.result_cache import CacheConfig, ResultCache
from newsbot.services.chat.orchestrator import ChatOrchestrator
from newsbot.services.session_store import SessionStore


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# ============================================================================
# Store Fixtures
# ============================================================================

@pytest.fixture
def clock():
    """Create a controllable clock."""
    return FakeClock()


@pytest.fixture
def memory_backend(clock):
    """Create a fresh memory backend driven by the fake clock."""
    return MemoryBackend(clock=clock)


@pytest.fixture
async def connected_memory_backend(memory_backend):
    """Create a connected memory backend."""
    await memory_backend.connect()
    yield memory_backend
    await memory_backend.disconnect()


@pytest.fixture
def cache_config():
    """Create a test cache configuration."""
    return CacheConfig(
        session_ttl=120,
        vector_ttl=90,
        query_ttl=60,
        default_ttl=30,
    )


@pytest.fixture
def result_cache(connected_memory_backend, cache_config):
    """Create a result cache with memory backend."""
    return ResultCache(connected_memory_backend, cache_config)


@pytest.fixture
def session_store(connected_memory_backend):
    """Create a session store sharing the memory backend."""
    return SessionStore(connected_memory_backend, session_ttl=120)


# ============================================================================
# Collaborator Fixtures
# ============================================================================

@pytest.fixture
def sample_chunks() -> List[RetrievedChunk]:
    """Retrieval results for a news question."""
    return [
        RetrievedChunk(
            text="Markets rallied on Monday after the central bank held rates.",
            metadata=ChunkMetadata(
                title="Markets rally as rates hold",
                link="https://news.example.com/markets",
                pub_date="Mon, 06 Oct 2025 09:00:00 GMT",
            ),
            distance=0.12,
        ),
        RetrievedChunk(
            text="The city council approved the new transit budget.",
            metadata=ChunkMetadata(
                title="Transit budget approved",
                link="https://news.example.com/transit",
            ),
            distance=0.31,
        ),
    ]


@pytest.fixture
def generated_answer():
    """Answer returned by the mocked generator."""
    return GeneratedAnswer(
        answer="Markets rallied after rates were held, and a transit budget passed.",
        sources=[
            Source(title="Markets rally as rates hold", link="https://news.example.com/markets"),
            Source(title="Transit budget approved", link="https://news.example.com/transit"),
        ],
    )


@pytest.fixture
def mock_retriever(sample_chunks):
    """Create a mock retrieval store."""
    mock = MagicMock()
    mock.retrieve = AsyncMock(return_value=sample_chunks)
    mock.store = AsyncMock(return_value=len(sample_chunks))
    mock.close = AsyncMock()
    return mock


@pytest.fixture
def mock_generator(generated_answer):
    """Create a mock answer generator."""
    mock = MagicMock()
    mock.answer = AsyncMock(return_value=generated_answer)
    mock.generate = AsyncMock(return_value=generated_answer.answer)
    return mock


@pytest.fixture
def orchestrator(result_cache, session_store, mock_retriever, mock_generator):
    """Create a chat orchestrator over the memory store and mocked collaborators."""
    return ChatOrchestrator(
        cache=result_cache,
        sessions=session_store,
        retriever=mock_retriever,
        generator=mock_generator,
        top_k=3,
        retrieval_timeout=1.0,
        generation_timeout=1.0,
    )
