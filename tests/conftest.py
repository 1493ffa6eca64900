import asyncio
import hashlib
from pathlib import Path
from typing import List, Optional

import numpy as np
import pytest

from resumefit.skills.dictionary import load_skill_dictionary

# Path to tests/fixtures directory
FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    """
    Exposes the fixtures directory in case a test needs direct file access.
    """
    return FIXTURES_DIR


@pytest.fixture
def load_text(fixtures_dir):
    """
    Fixture that returns a function: load_text("file.ext") -> str
    This avoids repeating file reading logic in every test file.
    """
    def _load(name: str) -> str:
        return (fixtures_dir / name).read_text(encoding="utf-8")
    return _load



@pytest.fixture(scope="session")
def skill_dictionary():
    """The packaged dictionary, loaded once (it is immutable)."""
    return load_skill_dictionary()


class FakeEmbeddingProvider:
    """
    Deterministic stand-in for a sentence-embedding model: hashed bag-of-words.
    Identical texts embed identically; every call is recorded.
    """

    def __init__(self, dim: int = 64, *, delay: float = 0.0, fail_with: Optional[Exception] = None) -> None:
        self.dim = dim
        self.delay = delay
        self.fail_with = fail_with
        self.calls: List[str] = []

    def vector(self, text: str) -> np.ndarray:
        vec = np.zeros(self.dim, dtype=np.float64)
        vec[0] = 0.01  # never the zero vector
        for token in text.split():
            h = int(hashlib.md5(token.encode("utf-8")).hexdigest(), 16)
            vec[h % self.dim] += 1.0
        return vec

    async def embed(self, text: str):
        self.calls.append(text)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail_with is not None:
            raise self.fail_with
        return self.vector(text).tolist()


@pytest.fixture
def fake_provider() -> FakeEmbeddingProvider:
    return FakeEmbeddingProvider()


@pytest.fixture
def make_provider():
    """Factory fixture: make_provider(dim=..., delay=..., fail_with=...) -> FakeEmbeddingProvider"""
    return FakeEmbeddingProvider
