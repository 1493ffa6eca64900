from __future__ import annotations

import asyncio
import logging
import os
from typing import List, Optional

from resumefit import config as _config
from resumefit.errors import ProviderError

# Top-level optional import so tests can patch it via module attribute.
# A missing package is reported as ProviderError when the provider is built.
try:
    from sentence_transformers import SentenceTransformer
except ImportError:
    SentenceTransformer = None  # type: ignore[assignment,misc]

logger = logging.getLogger(__name__)

CACHE_DIR = os.environ.get("TRANSFORMERS_CACHE") or None


class SentenceTransformerProvider:
    """
    EmbeddingProvider backed by a local sentence-transformers model.

    The model is loaded eagerly in __init__ (once, at process start) and reused for
    every call. encode() is CPU-bound, so it runs in a worker thread to keep the
    event loop free while the resume and JD embeddings are computed concurrently.
    """

    def __init__(self, model_name: Optional[str] = None, *, device: Optional[str] = None) -> None:
        if SentenceTransformer is None:
            raise ProviderError(
                "Package 'sentence-transformers' is not installed. Run: pip install sentence-transformers"
            )
        self._model_name = (model_name or _config.RESUMEFIT_EMBEDDING_MODEL).strip()
        logger.info("Loading embedding model %s", self._model_name)
        try:
            self._model = SentenceTransformer(self._model_name, device=device, cache_folder=CACHE_DIR)
        except Exception as exc:
            raise ProviderError(f"Could not load embedding model '{self._model_name}': {type(exc).__name__}") from exc

    @property
    def model_name(self) -> str:
        return self._model_name

    def _encode(self, text: str) -> List[float]:
        # Mean pooling is the model's own pooling layer; normalize to unit length.
        emb = self._model.encode(text, normalize_embeddings=True, convert_to_numpy=True)
        return emb.tolist()

    async def embed(self, text: str) -> List[float]:
        return await asyncio.to_thread(self._encode, text)
