"""Chat services: collaborator boundary, answer generation and orchestration."""

from newsbot.services.chat.collaborators import call_collaborator
from newsbot.services.chat.answer_generator import AnswerGenerator
from newsbot.services.chat.orchestrator import ChatOrchestrator, FALLBACK_ANSWER

__all__ = [
    "call_collaborator",
    "AnswerGenerator",
    "ChatOrchestrator",
    "FALLBACK_ANSWER",
]
