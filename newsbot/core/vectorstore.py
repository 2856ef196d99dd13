"""Vector store management using ChromaDB."""

import asyncio
import hashlib
from typing import Any, Dict, List, Optional, Sequence

import chromadb
from langchain_chroma import Chroma
from langchain_core.documents import Document as LangchainDocument
from langchain_core.embeddings import Embeddings
from langchain_openai import OpenAIEmbeddings

from newsbot.core.config import Settings
from newsbot.core.logging import get_logger
from newsbot.models.query import ChunkMetadata, RetrievedChunk

logger = get_logger(__name__)


def chunk_to_metadata(chunk: RetrievedChunk) -> Dict[str, Any]:
    """Flatten chunk metadata into the key names stored in the collection."""
    metadata = {
        "source_title": chunk.metadata.title,
        "source_link": chunk.metadata.link,
        "pubDate": chunk.metadata.pub_date,
    }
    # Chroma rejects None metadata values
    return {key: value for key, value in metadata.items() if value is not None}


def document_to_chunk(doc: LangchainDocument, distance: Optional[float]) -> RetrievedChunk:
    metadata = doc.metadata or {}
    return RetrievedChunk(
        text=doc.page_content,
        metadata=ChunkMetadata(
            title=metadata.get("source_title") or metadata.get("title"),
            link=metadata.get("source_link") or metadata.get("link"),
            pub_date=metadata.get("pubDate") or metadata.get("pub_date"),
        ),
        distance=distance,
    )


class VectorStoreManager:
    """Manages retrieval against a Chroma collection of news chunks."""

    def __init__(self, settings: Settings):
        """Initialize vector store manager."""
        self.settings = settings
        self.embeddings: Optional[Embeddings] = None
        self.vector_store: Optional[Chroma] = None

    async def initialize(self) -> None:
        """Initialize embeddings and the collection."""
        try:
            self.embeddings = self._create_embeddings()
            self.vector_store = await asyncio.to_thread(self._create_vector_store)
            logger.info("Vector store initialized: %s", self.settings.chroma_collection_name)
        except Exception as e:
            logger.error("Failed to initialize vector store: %s", e)
            raise

    async def close(self) -> None:
        """Drop client references; Chroma clients hold no open sockets between calls."""
        self.vector_store = None
        self.embeddings = None

    def _create_embeddings(self) -> Embeddings:
        if not self.settings.openai_api_key:
            raise ValueError("No embedding API key configured")

        logger.info("Using OpenAI embeddings: %s", self.settings.openai_embedding_model)
        return OpenAIEmbeddings(
            api_key=self.settings.openai_api_key,
            model=self.settings.openai_embedding_model,
        )

    def _create_vector_store(self) -> Chroma:
        options: Dict[str, Any] = {
            "collection_name": self.settings.chroma_collection_name,
            "embedding_function": self.embeddings,
            "collection_metadata": {"hnsw:space": "cosine"},
        }
        if self.settings.chroma_host:
            options["client"] = chromadb.HttpClient(
                host=self.settings.chroma_host,
                port=self.settings.chroma_port,
            )
        else:
            options["persist_directory"] = self.settings.chroma_persist_directory
        return Chroma(**options)

    def _require_store(self) -> Chroma:
        if self.vector_store is None:
            raise RuntimeError("Vector store not initialized")
        return self.vector_store

    async def store(self, chunks: Sequence[RetrievedChunk]) -> int:
        """Embed and store chunks; ids are content hashes so re-ingestion is idempotent."""
        if not chunks:
            return 0

        vector_store = self._require_store()
        texts = [chunk.text for chunk in chunks]
        metadatas = [chunk_to_metadata(chunk) for chunk in chunks]
        ids = [
            hashlib.md5(f"{chunk.metadata.link}|{chunk.text}".encode("utf-8")).hexdigest()
            for chunk in chunks
        ]

        await asyncio.to_thread(vector_store.add_texts, texts, metadatas=metadatas, ids=ids)
        logger.info("ChromaDB: Stored %d chunks in vector store", len(chunks))
        return len(chunks)

    async def retrieve(self, query: str, k: int = 3) -> List[RetrievedChunk]:
        """Return the ``k`` closest chunks to ``query``."""
        vector_store = self._require_store()
        results = await asyncio.to_thread(vector_store.similarity_search_with_score, query, k=k)
        chunks = [document_to_chunk(doc, float(score)) for doc, score in results]
        logger.info("ChromaDB: Retrieved %d relevant chunks for query %r", len(chunks), query)
        return chunks
