"""Session store: per-session ordered message history with expiry.

Each session is one JSON document under ``session:{id}``. Appending a
message is a read-modify-write that rewrites the whole document and re-arms
its TTL. The sequence is not transactional: two writers appending to the
same session at once can lose one update (last write wins). Drive a single
session from one writer at a time.

Store failures propagate as ``StoreUnavailableError``; without its session
record a conversation cannot be reproduced, so they are fatal to the request.
"""

import uuid
from typing import List

from pydantic import ValidationError as PydanticValidationError

from newsbot.core.errors import NotFoundError, StoreUnavailableError
from newsbot.core.logging import get_logger
from newsbot.models.session import Message, Session, SessionSummary, utc_now
from newsbot.services.cache.backends.base import ICacheBackend
from newsbot.services.cache.key_generator import CacheKeyGenerator

logger = get_logger(__name__)

_CREATE_ATTEMPTS = 3


class SessionStore:
    """Conversation history on top of a key-value TTL store."""

    def __init__(self, backend: ICacheBackend, session_ttl: int = 86400):
        """Initialize session store.

        Args:
            backend: The key-value store shared with the result cache.
            session_ttl: Lifetime of a session after its last write, in seconds.
        """
        self.backend = backend
        self.session_ttl = session_ttl
        self.key_generator = CacheKeyGenerator
        logger.info("SessionStore: Using TTL of %s seconds", session_ttl)

    def _key(self, session_id: str) -> str:
        return self.key_generator.session(session_id)

    async def _write(self, session: Session) -> None:
        await self.backend.set(
            self._key(session.id),
            session.model_dump_json(by_alias=True),
            self.session_ttl,
        )

    async def create_session(self) -> str:
        """Create an empty session and return its id."""
        for _ in range(_CREATE_ATTEMPTS):
            session = Session(id=str(uuid.uuid4()))
            created = await self.backend.set(
                self._key(session.id),
                session.model_dump_json(by_alias=True),
                self.session_ttl,
                only_if_absent=True,
            )
            if created:
                logger.info("Session created: %s with TTL %ss", session.id, self.session_ttl)
                return session.id

        raise StoreUnavailableError(
            "Could not allocate a unique session id", operation="create_session"
        )

    async def get_session(self, session_id: str) -> Session:
        """Load a session.

        Raises:
            NotFoundError: The session never existed or has expired.
            StoreUnavailableError: The stored document cannot be parsed.
        """
        key = self._key(session_id)
        raw = await self.backend.get(key)
        if raw is None:
            logger.info("Session not found: %s", session_id)
            raise NotFoundError("Session not found", resource="session", identifier=session_id)

        try:
            return Session.model_validate_json(raw)
        except PydanticValidationError as e:
            logger.error("Error parsing session data under %s: %s", key, e)
            raise StoreUnavailableError(
                "Session data is corrupt", operation="get_session", key=key
            ) from e

    async def get_history(self, session_id: str) -> List[Message]:
        """Messages of a session in insertion order."""
        session = await self.get_session(session_id)
        return session.messages

    async def add_message(self, session_id: str, message: Message) -> Session:
        """Append a message and rewrite the session with a fresh TTL.

        The message timestamp is always assigned here.
        """
        session = await self.get_session(session_id)
        session.messages.append(message.model_copy(update={"timestamp": utc_now()}))
        await self._write(session)
        logger.debug("Added %s message to session %s", message.role, session_id)
        return session

    async def clear_session(self, session_id: str) -> bool:
        """Delete a session; deleting an absent session also succeeds."""
        await self.backend.delete(self._key(session_id))
        logger.info("Cleared session: %s", session_id)
        return True

    async def session_exists(self, session_id: str) -> bool:
        return await self.backend.exists(self._key(session_id))

    async def get_session_ttl(self, session_id: str) -> int:
        """Remaining lifetime in seconds, 0 if absent or expired."""
        ttl = await self.backend.ttl(self._key(session_id))
        return ttl if ttl > 0 else 0

    async def refresh_session(self, session_id: str) -> bool:
        """Re-arm the TTL without touching content; False if the session is gone."""
        refreshed = await self.backend.expire(self._key(session_id), self.session_ttl)
        if refreshed:
            logger.info("Session %s TTL refreshed to %ss", session_id, self.session_ttl)
        return refreshed

    async def list_sessions(self) -> List[SessionSummary]:
        """Summaries of every live session, newest first."""
        keys = await self.backend.keys(self.key_generator.pattern(self.key_generator.SESSION_PREFIX))
        summaries: List[SessionSummary] = []

        for key in keys:
            raw = await self.backend.get(key)
            if raw is None:
                # Expired between KEYS and GET
                continue

            try:
                session = Session.model_validate_json(raw)
            except PydanticValidationError as e:
                logger.error("Error parsing session data under %s: %s", key, e)
                continue

            ttl = await self.backend.ttl(key)
            summaries.append(
                SessionSummary(
                    id=session.id,
                    title=f"Chat {session.id[:8]}",
                    last_message=session.messages[-1].content if session.messages else "No messages",
                    timestamp=session.created_at,
                    ttl=ttl if ttl > 0 else 0,
                )
            )

        return sorted(summaries, key=lambda summary: summary.timestamp, reverse=True)

    def update_ttl(self, new_ttl: int) -> None:
        """Change the TTL applied by subsequent writes."""
        if new_ttl <= 0:
            raise ValueError("Session TTL must be positive")
        self.session_ttl = new_ttl
        logger.info("SessionStore: TTL updated to %s seconds", new_ttl)
