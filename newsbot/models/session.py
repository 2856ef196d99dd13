"""Session and message models."""

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from newsbot.models.query import Source


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class MessageRole(str, Enum):
    """Message author."""
    USER = "user"
    ASSISTANT = "assistant"


class Message(BaseModel):
    """One conversation turn.

    ``timestamp`` is overwritten by the session store when the message is
    appended.
    """
    role: MessageRole
    content: str
    sources: List[Source] = Field(default_factory=list)
    timestamp: Optional[datetime] = None

    model_config = ConfigDict(use_enum_values=True)


class Session(BaseModel):
    """Server-side record of one conversation."""
    id: str
    created_at: datetime = Field(default_factory=utc_now)
    messages: List[Message] = Field(default_factory=list)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @field_validator("created_at")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        # Older documents were written without an offset
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class SessionSummary(BaseModel):
    """Listing entry for the session sidebar."""
    id: str
    title: str
    last_message: str
    timestamp: datetime
    ttl: int = Field(0, description="Remaining lifetime in seconds, 0 if expired")

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SessionCreatedResponse(BaseModel):
    success: bool = True
    session_id: str

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SessionListResponse(BaseModel):
    success: bool = True
    sessions: List[SessionSummary] = Field(default_factory=list)


class SessionHistoryResponse(BaseModel):
    success: bool = True
    session_id: str
    messages: List[Message] = Field(default_factory=list)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SessionTTLResponse(BaseModel):
    success: bool = True
    session_id: str
    ttl: int

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SessionStatusResponse(BaseModel):
    """Result of delete/refresh/validate operations."""
    success: bool = True
    session_id: str
    message: Optional[str] = None
    valid: Optional[bool] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
