"""Answer generation against the chat model."""

from typing import List, Optional, Sequence

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import HumanMessage
from langchain_openai import ChatOpenAI

from newsbot.core.config import Settings
from newsbot.core.logging import get_logger
from newsbot.models.query import GeneratedAnswer, RetrievedChunk, Source

logger = get_logger(__name__)

PROMPT_HEADER = (
    "You are a news assistant. Answer the question using only the numbered "
    "news excerpts below. If the excerpts do not contain the answer, say so."
)


def get_llm(settings: Settings) -> ChatOpenAI:
    """Create the chat model client.

    Retries are disabled; a failed call surfaces to the caller.
    """
    if not settings.openai_api_key:
        raise ValueError("OpenAI API key not configured")

    logger.info("Creating OpenAI LLM for model: %s", settings.openai_chat_model)
    return ChatOpenAI(
        api_key=settings.openai_api_key,
        model=settings.openai_chat_model,
        temperature=settings.llm_temperature,
        max_retries=0,
    )


def build_prompt(query: str, chunks: Sequence[RetrievedChunk]) -> str:
    """Numbered context chunks followed by the literal question."""
    sections = [PROMPT_HEADER, ""]
    for index, chunk in enumerate(chunks, start=1):
        title = chunk.metadata.title or "Untitled"
        sections.append(f"[{index}] {title}\n{chunk.text}")
        sections.append("")
    sections.append(f"Question: {query}")
    return "\n".join(sections)


def collect_sources(chunks: Sequence[RetrievedChunk]) -> List[Source]:
    """Distinct {title, link} pairs in retrieval order."""
    seen = set()
    sources: List[Source] = []
    for chunk in chunks:
        identity = (chunk.metadata.title, chunk.metadata.link)
        if identity in seen or identity == (None, None):
            continue
        seen.add(identity)
        sources.append(Source(title=chunk.metadata.title, link=chunk.metadata.link))
    return sources


class AnswerGenerator:
    """Generates grounded answers from retrieved chunks."""

    def __init__(self, llm: BaseChatModel, model_name: Optional[str] = None):
        self.llm = llm
        self.model_name = model_name

    @classmethod
    def from_settings(cls, settings: Settings) -> "AnswerGenerator":
        return cls(get_llm(settings), model_name=settings.openai_chat_model)

    async def generate(self, prompt: str) -> str:
        response = await self.llm.ainvoke([HumanMessage(content=prompt)])
        content = response.content
        if isinstance(content, list):
            # Content blocks from multimodal-capable models
            content = "".join(
                block.get("text", "") if isinstance(block, dict) else str(block)
                for block in content
            )
        return content.strip()

    async def answer(self, query: str, chunks: Sequence[RetrievedChunk]) -> GeneratedAnswer:
        prompt = build_prompt(query, chunks)
        answer = await self.generate(prompt)
        logger.info("Generated answer for %r from %d chunks", query, len(chunks))
        return GeneratedAnswer(answer=answer, sources=collect_sources(chunks))
