import json
import math

import httpx
import pytest

from app.settings import Settings
from domain.errors import UntrustedContextError
from infra.rag.embeddings import (
    MOCK_DIMENSION,
    SIMPLIFIED_DIMENSION,
    EmbeddingService,
    LRUCache,
    MockEmbeddingProvider,
    RemoteEmbeddingProvider,
    SimplifiedEmbeddingProvider,
    build_embedding_service,
    mock_embedding,
    simplified_embedding,
)


def _norm(v):
    return math.sqrt(sum(x * x for x in v))


def test_mock_embedding_is_deterministic_unit_vector():
    a = mock_embedding("Solidity smart contracts")
    assert a == mock_embedding("Solidity smart contracts")
    assert len(a) == MOCK_DIMENSION
    assert _norm(a) == pytest.approx(1.0)


def test_mock_embedding_rejects_empty_text():
    with pytest.raises(ValueError):
        mock_embedding("")


def test_simplified_embedding_buckets_words():
    v = simplified_embedding("defi DeFi lending")
    assert len(v) == SIMPLIFIED_DIMENSION
    assert _norm(v) == pytest.approx(1.0)
    assert simplified_embedding("") == [0.0] * SIMPLIFIED_DIMENSION
    # word order does not matter
    assert simplified_embedding("nft dao") == simplified_embedding("dao nft")


async def test_primary_results_are_cached(fake_remote):
    service = EmbeddingService(fake_remote)
    first = await service.embed("hardhat")
    second = await service.embed("hardhat")
    assert first == second
    assert first.source == "api"
    assert fake_remote.calls == 1


async def test_falls_back_to_mock_and_does_not_cache(fake_remote):
    fake_remote.failing = True
    service = EmbeddingService(fake_remote)
    tagged = await service.embed("hardhat")
    assert tagged.source == "mock"
    assert tagged.vector == mock_embedding("hardhat")

    fake_remote.failing = False
    recovered = await service.embed("hardhat")
    assert recovered.source == "api"
    assert fake_remote.calls == 2


async def test_empty_text_ends_on_simplified(fake_remote):
    fake_remote.failing = True
    tagged = await EmbeddingService(fake_remote).embed("")
    assert tagged.source == "simplified"
    assert tagged.vector == [0.0] * SIMPLIFIED_DIMENSION


async def test_default_fallbacks_skip_primary_source():
    service = EmbeddingService(MockEmbeddingProvider())
    assert [p.source for p in service.fallbacks] == ["simplified"]
    assert service.mode == "mock"


async def test_embed_as_uses_named_provider(fake_remote):
    service = EmbeddingService(fake_remote)
    vector = await service.embed_as("simplified", "dao voting")
    assert vector == simplified_embedding("dao voting")
    assert await service.embed_as("unknown", "dao voting") is None


async def test_untrusted_remote_provider_refuses():
    provider = RemoteEmbeddingProvider("key", "text-embedding-3-small", trusted=False)
    with pytest.raises(UntrustedContextError):
        await provider.embed("solidity")

    tagged = await EmbeddingService(provider).embed("solidity")
    assert tagged.source == "mock"


async def test_remote_provider_posts_input_and_model():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"data": [{"embedding": [0.1, 0.2, 0.3]}]})

    provider = RemoteEmbeddingProvider(
        "sk-test", "text-embedding-3-small", "https://embed.test/v1",
        transport=httpx.MockTransport(handler))
    vector = await provider.embed("ethers.js")

    assert vector == [0.1, 0.2, 0.3]
    assert seen["url"] == "https://embed.test/v1/embeddings"
    assert seen["auth"] == "Bearer sk-test"
    assert seen["body"] == {"input": "ethers.js", "model": "text-embedding-3-small"}


async def test_remote_http_error_falls_back():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, json={"error": "unavailable"})

    provider = RemoteEmbeddingProvider(
        "sk-test", "m", "https://embed.test/v1", transport=httpx.MockTransport(handler))
    tagged = await EmbeddingService(provider).embed("ipfs")
    assert tagged.source == "mock"


def test_build_service_without_key_uses_mock():
    service = build_embedding_service(Settings(EMBEDDING_MODE="remote", OPENAI_API_KEY=None))
    assert service.mode == "mock"


def test_build_service_modes():
    assert build_embedding_service(Settings(EMBEDDING_MODE="simplified")).mode == "simplified"
    assert build_embedding_service(Settings(EMBEDDING_MODE="remote", OPENAI_API_KEY="k")).mode == "api"
    with pytest.raises(ValueError):
        build_embedding_service(Settings(EMBEDDING_MODE="quantum"))


def test_simplified_provider_source():
    assert SimplifiedEmbeddingProvider().source == "simplified"


async def test_cache_is_bounded(fake_remote):
    service = EmbeddingService(fake_remote, cache_size=3)
    for i in range(50):
        await service.embed(f"candidate query {i}")
    assert len(service._cache) == 3

    # most recent entries stay, oldest ones are recomputed
    calls = fake_remote.calls
    await service.embed("candidate query 49")
    assert fake_remote.calls == calls
    await service.embed("candidate query 0")
    assert fake_remote.calls == calls + 1


async def test_aligned_cache_is_bounded(fake_remote):
    service = EmbeddingService(fake_remote, cache_size=2)
    for i in range(10):
        assert await service.embed_as("mock", f"chunk {i}") is not None
    assert len(service._aligned) == 2


def test_lru_cache_evicts_least_recently_used():
    cache = LRUCache(maxsize=2)
    cache.put("a", 1)
    cache.put("b", 2)
    assert cache.get("a") == 1
    cache.put("c", 3)
    assert "b" not in cache
    assert cache.get("a") == 1 and cache.get("c") == 3
    assert cache.get("missing") is None


def test_cache_size_comes_from_settings():
    service = build_embedding_service(Settings(EMBEDDING_MODE="mock", EMBEDDING_CACHE_SIZE=7))
    assert service._cache.maxsize == 7
