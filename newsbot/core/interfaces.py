"""Protocol definitions for the external collaborators.

The orchestrator and the cache warmer depend on these interfaces only, so
tests can substitute in-memory fakes.
"""

from typing import Protocol, List, Sequence, runtime_checkable

from newsbot.models.query import GeneratedAnswer, RetrievedChunk


@runtime_checkable
class IRetrievalStore(Protocol):
    """Interface for the embedding/retrieval store."""

    async def initialize(self) -> None:
        """Open the collection."""
        ...

    async def close(self) -> None:
        """Release client resources."""
        ...

    async def store(self, chunks: Sequence[RetrievedChunk]) -> int:
        """Embed and store chunks, returning how many were written."""
        ...

    async def retrieve(self, query: str, k: int = 3) -> List[RetrievedChunk]:
        """Most similar chunks first; an empty list is a valid answer."""
        ...


@runtime_checkable
class IAnswerGenerator(Protocol):
    """Interface for the generative model."""

    async def generate(self, prompt: str) -> str:
        """Raw completion for a prompt."""
        ...

    async def answer(self, query: str, chunks: Sequence[RetrievedChunk]) -> GeneratedAnswer:
        """Answer a question grounded on retrieved chunks."""
        ...
