"""Chat and search API router."""

from fastapi import APIRouter, Depends

from newsbot.api.deps import get_orchestrator, get_service_container
from newsbot.core.container import ServiceContainer
from newsbot.core.errors import ValidationError
from newsbot.core.logging import get_logger
from newsbot.models.query import ChatRequest, ChatResponse, SearchRequest, SearchResponse
from newsbot.services.chat.collaborators import RETRIEVAL, call_collaborator
from newsbot.services.chat.orchestrator import ChatOrchestrator

router = APIRouter()
logger = get_logger(__name__)


@router.post("/chat", response_model=ChatResponse)
async def chat(
    chat_request: ChatRequest,
    orchestrator: ChatOrchestrator = Depends(get_orchestrator),
) -> ChatResponse:
    """Answer a question within a session."""
    logger.info("Chat request for session %s", chat_request.session_id)
    return await orchestrator.handle(chat_request.query, chat_request.session_id)


@router.post("/search", response_model=SearchResponse)
async def search(
    search_request: SearchRequest,
    container: ServiceContainer = Depends(get_service_container),
) -> SearchResponse:
    """Return the raw retrieval results for a query, without generation."""
    query = (search_request.query or "").strip()
    if not query:
        raise ValidationError("Query is required", field="query")

    settings = container.settings
    k = search_request.k or settings.retrieval_top_k
    chunks = await call_collaborator(
        RETRIEVAL, container.retriever.retrieve(query, k), settings.retrieval_timeout
    )
    return SearchResponse(query=query, relevant_chunks=chunks)
