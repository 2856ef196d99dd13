"""Session management endpoints."""

from fastapi import APIRouter, Depends

from newsbot.api.deps import get_session_store
from newsbot.core.errors import NotFoundError
from newsbot.core.logging import get_logger
from newsbot.models.session import (
    SessionCreatedResponse,
    SessionHistoryResponse,
    SessionListResponse,
    SessionStatusResponse,
    SessionTTLResponse,
)
from newsbot.services.session_store import SessionStore

logger = get_logger(__name__)
router = APIRouter()


@router.post("/session", response_model=SessionCreatedResponse)
async def create_session(
    sessions: SessionStore = Depends(get_session_store),
) -> SessionCreatedResponse:
    session_id = await sessions.create_session()
    return SessionCreatedResponse(session_id=session_id)


@router.get("/sessions", response_model=SessionListResponse)
async def list_sessions(
    sessions: SessionStore = Depends(get_session_store),
) -> SessionListResponse:
    """All live sessions, newest first."""
    return SessionListResponse(sessions=await sessions.list_sessions())


@router.get("/session/{session_id}/history", response_model=SessionHistoryResponse)
async def get_session_history(
    session_id: str,
    sessions: SessionStore = Depends(get_session_store),
) -> SessionHistoryResponse:
    messages = await sessions.get_history(session_id)
    return SessionHistoryResponse(session_id=session_id, messages=messages)


@router.get("/session/{session_id}/validate", response_model=SessionStatusResponse)
async def validate_session(
    session_id: str,
    sessions: SessionStore = Depends(get_session_store),
) -> SessionStatusResponse:
    """Report whether a session is still live; never 404s."""
    valid = await sessions.session_exists(session_id)
    return SessionStatusResponse(session_id=session_id, valid=valid)


@router.delete("/session/{session_id}", response_model=SessionStatusResponse)
async def delete_session(
    session_id: str,
    sessions: SessionStore = Depends(get_session_store),
) -> SessionStatusResponse:
    await sessions.clear_session(session_id)
    return SessionStatusResponse(session_id=session_id, message="Session cleared")


@router.put("/session/{session_id}/refresh", response_model=SessionStatusResponse)
async def refresh_session(
    session_id: str,
    sessions: SessionStore = Depends(get_session_store),
) -> SessionStatusResponse:
    """Re-arm the session TTL."""
    if not await sessions.refresh_session(session_id):
        raise NotFoundError("Session not found", resource="session", identifier=session_id)
    return SessionStatusResponse(session_id=session_id, message="Session refreshed")


@router.get("/session/{session_id}/ttl", response_model=SessionTTLResponse)
async def get_session_ttl(
    session_id: str,
    sessions: SessionStore = Depends(get_session_store),
) -> SessionTTLResponse:
    ttl = await sessions.get_session_ttl(session_id)
    return SessionTTLResponse(session_id=session_id, ttl=ttl)
