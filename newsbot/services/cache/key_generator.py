"""Cache key generation for every key namespace in the store.

Key format: ``{namespace}:{identifier}``

Examples:
    query:bGF0ZXN0IG5ld3M=
    session:1b9d6bcd-bbfd-4b2d-9b5d-ab8dfbbd4bed
"""

import base64
import re


class CacheKeyGenerator:
    """Single source of truth for store keys.

    Namespaces double as glob prefixes, so ``query:*`` clears every cached
    answer and ``session:*`` enumerates every session.
    """

    QUERY_PREFIX = "query"
    SESSION_PREFIX = "session"
    VECTOR_PREFIX = "vector"

    _WHITESPACE = re.compile(r"\s+")

    @classmethod
    def normalize_query(cls, query: str) -> str:
        """Lowercase, trim and collapse whitespace so equivalent questions share a key."""
        return cls._WHITESPACE.sub(" ", query).strip().lower()

    @classmethod
    def query(cls, query: str) -> str:
        """Generate the key for a cached answer.

        The normalized text is base64-encoded rather than hashed, so the key is
        collision-free and free of glob characters.

        Args:
            query: The user question.

        Returns:
            Cache key string.
        """
        normalized = cls.normalize_query(query)
        encoded = base64.urlsafe_b64encode(normalized.encode("utf-8")).decode("ascii")
        return f"{cls.QUERY_PREFIX}:{encoded}"

    @classmethod
    def session(cls, session_id: str) -> str:
        """Generate the key holding one session document."""
        return f"{cls.SESSION_PREFIX}:{session_id}"

    @classmethod
    def pattern(cls, prefix: str) -> str:
        """Glob matching every key in a namespace."""
        return f"{prefix}:*"
