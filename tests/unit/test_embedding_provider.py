"""
tests/unit/test_embedding_provider.py

EmbeddingAdapter: timeout, error wrapping and output validation.
sentence-transformers is never loaded here; the model class is patched.
"""
import asyncio
import math
from unittest.mock import MagicMock

import numpy as np
import pytest

from resumefit.embedding.provider import EmbeddingAdapter, EmbeddingProvider, as_embedding_vector
from resumefit.errors import ProviderError


class _StaticProvider:
    def __init__(self, value):
        self.value = value

    async def embed(self, text):
        return self.value


def test_fake_provider_satisfies_protocol(fake_provider):
    assert isinstance(fake_provider, EmbeddingProvider)


def test_adapter_returns_unit_read_only_vector():
    vec = asyncio.run(EmbeddingAdapter(_StaticProvider([3.0, 4.0])).embed("x"))
    assert vec.tolist() == pytest.approx([0.6, 0.8])
    assert math.isclose(float(np.linalg.norm(vec)), 1.0)
    assert not vec.flags.writeable


def test_batch_of_one_is_flattened():
    vec = as_embedding_vector([[1.0, 0.0]])
    assert vec.shape == (2,)


@pytest.mark.parametrize("raw", [
    [],
    [0.0, 0.0],
    [1.0, float("nan")],
    [1.0, float("inf")],
    [[1.0, 0.0], [0.0, 1.0]],
    ["a", "b"],
])
def test_malformed_output_raises_provider_error(raw):
    with pytest.raises(ProviderError):
        asyncio.run(EmbeddingAdapter(_StaticProvider(raw)).embed("x"))


def test_dimension_is_pinned_after_first_call():
    provider = _StaticProvider([1.0, 0.0, 0.0])
    adapter = EmbeddingAdapter(provider)
    asyncio.run(adapter.embed("a"))
    assert adapter.dimension == 3

    provider.value = [1.0, 0.0]
    with pytest.raises(ProviderError, match="dimension"):
        asyncio.run(adapter.embed("b"))


def test_timeout_becomes_provider_error(make_provider):
    adapter = EmbeddingAdapter(make_provider(delay=0.5), timeout_seconds=0.01)
    with pytest.raises(ProviderError, match="timed out"):
        asyncio.run(adapter.embed("slow text"))


def test_provider_exception_is_wrapped(make_provider):
    adapter = EmbeddingAdapter(make_provider(fail_with=ConnectionError("refused")))
    with pytest.raises(ProviderError) as exc_info:
        asyncio.run(adapter.embed("text"))
    assert isinstance(exc_info.value.__cause__, ConnectionError)


def test_none_provider_rejected():
    with pytest.raises(ProviderError):
        EmbeddingAdapter(None)


# ------------------------------------------------------------------
# SentenceTransformerProvider (model patched)
# ------------------------------------------------------------------

def test_sentence_transformer_provider_encodes_normalized(monkeypatch):
    import resumefit.embedding.sentence_transformer as st_mod

    model = MagicMock()
    model.encode.return_value = np.array([0.6, 0.8])
    factory = MagicMock(return_value=model)
    monkeypatch.setattr(st_mod, "SentenceTransformer", factory)

    provider = st_mod.SentenceTransformerProvider("some/model")
    out = asyncio.run(provider.embed("hello world"))

    assert out == [0.6, 0.8]
    assert provider.model_name == "some/model"
    factory.assert_called_once()
    assert model.encode.call_args.kwargs["normalize_embeddings"] is True


def test_sentence_transformer_missing_package(monkeypatch):
    import resumefit.embedding.sentence_transformer as st_mod

    monkeypatch.setattr(st_mod, "SentenceTransformer", None)
    with pytest.raises(ProviderError, match="not installed"):
        st_mod.SentenceTransformerProvider()


def test_sentence_transformer_load_failure(monkeypatch):
    import resumefit.embedding.sentence_transformer as st_mod

    monkeypatch.setattr(st_mod, "SentenceTransformer", MagicMock(side_effect=OSError("no such model")))
    with pytest.raises(ProviderError, match="Could not load"):
        st_mod.SentenceTransformerProvider("missing/model")
