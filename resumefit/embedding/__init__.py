from .cache import CacheEntry, CacheStats, JDEmbeddingCache, content_key
from .provider import EmbeddingAdapter, EmbeddingProvider, as_embedding_vector

__all__ = [
    "CacheEntry",
    "CacheStats",
    "JDEmbeddingCache",
    "content_key",
    "EmbeddingAdapter",
    "EmbeddingProvider",
    "as_embedding_vector",
]
