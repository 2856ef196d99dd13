"""Configuration settings for the news chat service."""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings
from typing import Optional, List
import os


class Settings(BaseSettings):
    """Application settings."""

    # API Configuration
    app_name: str = "News RAG Chat Service"
    app_version: str = "1.0.0"
    api_prefix: str = "/api"
    debug: bool = False

    # Server Configuration
    host: str = "0.0.0.0"
    port: int = 3000
    workers: int = 1

    # CORS
    cors_origins: List[str] = ["http://localhost:3000", "http://localhost:5173"]

    # OpenAI Configuration
    openai_api_key: Optional[str] = None
    openai_chat_model: str = "gpt-4o-mini"
    openai_embedding_model: str = "text-embedding-3-small"
    llm_temperature: float = 0.2

    # Vector Store Configuration
    chroma_host: Optional[str] = None  # Use the persistent client when unset
    chroma_port: int = 8000
    chroma_persist_directory: str = "./chroma_db"
    chroma_collection_name: str = "news_articles"

    # Retrieval / Generation
    retrieval_top_k: int = Field(3, gt=0)
    retrieval_timeout: float = Field(10.0, gt=0)  # seconds
    generation_timeout: float = Field(30.0, gt=0)  # seconds

    # Key-value store
    store_backend: str = "redis"  # redis or memory
    redis_url: Optional[str] = None
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_username: Optional[str] = None
    redis_password: Optional[str] = None
    redis_connect_timeout: float = 15.0
    redis_socket_timeout: float = 5.0

    # TTLs (seconds)
    session_ttl: int = Field(86400, gt=0)  # 24 hours
    vector_cache_ttl: int = Field(21600, gt=0)  # 6 hours
    query_cache_ttl: int = Field(3600, gt=0)  # 1 hour
    default_cache_ttl: int = Field(3600, gt=0)

    # Cache warming
    enable_cache_warming: bool = False
    cache_warming_interval: int = Field(60, gt=0)  # minutes
    popular_queries: str = "latest news,breaking news,today's news"

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"

    class Config:
        env_file = ".env"
        env_prefix = "NEWSBOT_"
        case_sensitive = False
        extra = "ignore"  # Allow extra fields in .env file

    @field_validator("store_backend")
    @classmethod
    def _check_store_backend(cls, value: str) -> str:
        value = value.strip().lower()
        if value not in ("redis", "memory"):
            raise ValueError(f"Unsupported store backend: {value}")
        return value

    @property
    def popular_query_list(self) -> List[str]:
        """Popular queries parsed from the comma-separated setting."""
        return [q.strip() for q in self.popular_queries.split(",") if q.strip()]

    @property
    def cache_warming_interval_seconds(self) -> int:
        return self.cache_warming_interval * 60


# Unprefixed environment names kept for compatibility with existing deployments
_ENV_OVERRIDES = {
    "SESSION_TTL": "session_ttl",
    "VECTOR_CACHE_TTL": "vector_cache_ttl",
    "QUERY_CACHE_TTL": "query_cache_ttl",
    "ENABLE_CACHE_WARMING": "enable_cache_warming",
    "CACHE_WARMING_INTERVAL": "cache_warming_interval",
    "POPULAR_QUERIES": "popular_queries",
    "REDIS_URL": "redis_url",
    "REDIS_HOST": "redis_host",
    "REDIS_PORT": "redis_port",
    "REDIS_USERNAME": "redis_username",
    "REDIS_PASSWORD": "redis_password",
    "OPENAI_API_KEY": "openai_api_key",
}


def load_settings() -> Settings:
    """Build settings, then apply the unprefixed environment overrides."""
    overrides = {}
    for env_name, field_name in _ENV_OVERRIDES.items():
        value = os.getenv(env_name)
        if value is not None and value.strip():
            overrides[field_name] = value.strip()

    # Init kwargs take priority over NEWSBOT_* values and get the same validation
    return Settings(**overrides)


# Create settings instance
settings = load_settings()
