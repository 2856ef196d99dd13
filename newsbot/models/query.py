"""Chat, search and retrieval models."""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ChunkOrigin(str, Enum):
    """Where the answer's grounding came from for one request."""
    CACHE = "cache"
    FRESH = "fresh"
    NONE = "none"


class Source(BaseModel):
    """Source reference attached to an answer."""
    title: Optional[str] = Field(None, description="Article title")
    link: Optional[str] = Field(None, description="Article URL")


class ChunkMetadata(BaseModel):
    """Metadata stored alongside a chunk in the vector store."""
    title: Optional[str] = Field(None, description="Source article title")
    link: Optional[str] = Field(None, description="Source article URL")
    pub_date: Optional[str] = Field(None, alias="pubDate", description="Publication date")

    model_config = ConfigDict(populate_by_name=True)


class RetrievedChunk(BaseModel):
    """One ranked retrieval result."""
    text: str = Field(..., description="Chunk text")
    metadata: ChunkMetadata = Field(default_factory=ChunkMetadata)
    distance: Optional[float] = Field(None, description="Distance to the query (lower is closer)")


class ChatRequest(BaseModel):
    """Chat request model.

    Fields are optional at the schema level so that missing values are
    reported by the orchestrator's own validation stage.
    """
    query: Optional[str] = Field(None, description="User question")
    session_id: Optional[str] = Field(None, description="Session the turn belongs to")

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ChatResponse(BaseModel):
    """Chat response model."""
    success: bool = True
    query: str = Field(..., description="The question that was answered")
    answer: str = Field(..., description="Assistant answer")
    sources: List[Source] = Field(default_factory=list, description="Source citations")
    from_cache: bool = Field(False, description="Answer served from the result cache")
    chunk_origin: ChunkOrigin = Field(..., description="cache, fresh or none")
    retrieved_chunks: int = Field(0, description="Number of chunks used for a fresh answer")
    session_id: str = Field(..., description="Session ID")

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SearchRequest(BaseModel):
    """Raw retrieval request."""
    query: Optional[str] = Field(None, description="Search query")
    k: Optional[int] = Field(None, ge=1, le=50, description="Number of chunks to return")


class SearchResponse(BaseModel):
    """Raw retrieval response."""
    success: bool = True
    query: str
    relevant_chunks: List[RetrievedChunk] = Field(default_factory=list)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GeneratedAnswer(BaseModel):
    """Output of the answer generator."""
    answer: str
    sources: List[Source] = Field(default_factory=list)


class HealthResponse(BaseModel):
    """Health endpoint payload."""
    status: str
    message: str
    store: Dict[str, Any] = Field(default_factory=dict)
    timestamp: str
