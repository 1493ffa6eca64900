"""
resumefit/embedding/provider.py

Narrow boundary to an external text-embedding model.

Design principles:
- The provider is injected (constructed once at process start), never a global
- The adapter does not retry or hedge; the caller decides whether to retry
- Every provider-side failure surfaces as ProviderError (timeouts included)
- Output is validated and returned as an immutable, L2-normalized float vector
"""
from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Optional, Protocol, Sequence, runtime_checkable

import numpy as np

from resumefit.errors import ProviderError

logger = logging.getLogger(__name__)


@runtime_checkable
class EmbeddingProvider(Protocol):
    """text -> fixed-length vector. Implementations may be slow; they must be awaitable."""

    def embed(self, text: str) -> Awaitable[Sequence[float]]:
        ...


def as_embedding_vector(raw: Sequence[float], *, expected_dim: Optional[int] = None) -> np.ndarray:
    """
    Validate provider output and return a read-only, unit-length float64 vector.
    Raises ProviderError for anything that cannot be a usable embedding.
    """
    try:
        vec = np.asarray(raw, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise ProviderError(f"Embedding provider returned a non-numeric vector: {type(exc).__name__}") from exc

    if vec.ndim == 2 and vec.shape[0] == 1:
        vec = vec[0]
    if vec.ndim != 1 or vec.size == 0:
        raise ProviderError(f"Embedding provider returned shape {vec.shape}; expected a 1-D vector.")
    if expected_dim is not None and vec.size != expected_dim:
        raise ProviderError(f"Embedding dimension changed: got {vec.size}, expected {expected_dim}.")
    if not np.all(np.isfinite(vec)):
        raise ProviderError("Embedding provider returned non-finite values.")

    norm = float(np.linalg.norm(vec))
    if norm == 0.0:
        raise ProviderError("Embedding provider returned a zero vector.")

    out = vec / norm
    out.setflags(write=False)
    return out


class EmbeddingAdapter:
    """
    Wraps an EmbeddingProvider with an explicit timeout and output validation.

    The first successful call pins the vector dimension; a later mismatch is a
    provider fault, not something to silently compare.
    """

    def __init__(self, provider: EmbeddingProvider, *, timeout_seconds: Optional[float] = 30.0) -> None:
        if provider is None:
            raise ProviderError("An embedding provider must be supplied.")
        self._provider = provider
        self._timeout = timeout_seconds if timeout_seconds and timeout_seconds > 0 else None
        self._dim: Optional[int] = None

    @property
    def provider(self) -> EmbeddingProvider:
        return self._provider

    @property
    def dimension(self) -> Optional[int]:
        return self._dim

    async def embed(self, text: str) -> np.ndarray:
        logger.debug("Embedding request (%d chars)", len(text or ""))
        try:
            raw = await asyncio.wait_for(self._provider.embed(text), timeout=self._timeout)
        except ProviderError:
            raise
        except asyncio.TimeoutError as exc:
            logger.warning("Embedding call timed out after %ss", self._timeout)
            raise ProviderError(f"Embedding provider timed out after {self._timeout} seconds.") from exc
        except Exception as exc:
            logger.warning("Embedding call failed: %s", type(exc).__name__)
            raise ProviderError(f"Embedding provider failed: {type(exc).__name__}: {exc}") from exc

        vec = as_embedding_vector(raw, expected_dim=self._dim)
        if self._dim is None:
            self._dim = int(vec.size)
        return vec
