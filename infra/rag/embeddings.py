import asyncio
import logging
import re
from collections import Counter, OrderedDict
from dataclasses import dataclass
from typing import Dict, Generic, Hashable, List, Optional, Sequence, TypeVar

import httpx

from app.settings import Settings
from domain.errors import UntrustedContextError
from infra.rag.vector_math import l2_normalize

logger = logging.getLogger(__name__)

MOCK_DIMENSION = 32
SIMPLIFIED_DIMENSION = 128
DEFAULT_CACHE_SIZE = 2048

_NON_WORD = re.compile(r"\W+")


@dataclass(frozen=True)
class TaggedEmbedding:
    vector: List[float]
    source: str


V = TypeVar("V")


class LRUCache(Generic[V]):
    """Size-capped mapping that evicts the least recently used entry."""

    def __init__(self, maxsize: int = DEFAULT_CACHE_SIZE):
        self.maxsize = maxsize
        self._data: "OrderedDict[Hashable, V]" = OrderedDict()

    def get(self, key: Hashable) -> Optional[V]:
        if key not in self._data:
            return None
        self._data.move_to_end(key)
        return self._data[key]

    def put(self, key: Hashable, value: V) -> None:
        self._data[key] = value
        self._data.move_to_end(key)
        while len(self._data) > self.maxsize:
            self._data.popitem(last=False)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)


def mock_embedding(text: str, dimension: int = MOCK_DIMENSION) -> List[float]:
    """Deterministic pseudo-embedding folded from character codes."""
    vector = [0.0] * dimension
    for i, ch in enumerate(text):
        vector[i % dimension] += ord(ch) / 100
    if not any(vector):
        raise ValueError("cannot build a mock embedding for empty text")
    return l2_normalize(vector)


def _string_hash(word: str) -> int:
    # 32-bit signed h = h * 31 + c
    h = 0
    for ch in word:
        h = (h * 31 + ord(ch)) & 0xFFFFFFFF
    return h - 0x100000000 if h >= 0x80000000 else h


def simplified_embedding(text: str, dimension: int = SIMPLIFIED_DIMENSION) -> List[float]:
    """Bag-of-words vector: word counts hashed into `dimension` buckets."""
    words = [w for w in _NON_WORD.split(text.lower()) if w]
    vector = [0.0] * dimension
    for word, count in Counter(words).items():
        vector[abs(_string_hash(word)) % dimension] += count
    return l2_normalize(vector)


class EmbeddingProvider:
    source: str = ""

    async def embed(self, text: str) -> List[float]:
        raise NotImplementedError


class RemoteEmbeddingProvider(EmbeddingProvider):
    source = "api"

    def __init__(
        self,
        api_key: Optional[str],
        model: str,
        base_url: str = "https://api.openai.com/v1",
        *,
        trusted: bool = True,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.trusted = trusted
        self.timeout = timeout
        self.transport = transport

    async def embed(self, text: str) -> List[float]:
        if not self.trusted:
            raise UntrustedContextError(
                "remote embeddings can only be requested from a trusted server context; "
                "route the request through the /embeddings endpoint instead")
        if not self.api_key:
            raise RuntimeError("OPENAI_API_KEY is not configured")
        url = f"{self.base_url}/embeddings"
        headers = {"Authorization": f"Bearer {self.api_key}"}
        payload = {"input": text, "model": self.model}
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            r = await client.post(url, headers=headers, json=payload)
            r.raise_for_status()
            data = r.json()
        return [float(x) for x in data["data"][0]["embedding"]]


class MockEmbeddingProvider(EmbeddingProvider):
    source = "mock"

    async def embed(self, text: str) -> List[float]:
        return mock_embedding(text)


class SimplifiedEmbeddingProvider(EmbeddingProvider):
    source = "simplified"

    async def embed(self, text: str) -> List[float]:
        return simplified_embedding(text)


class EmbeddingService:
    """Fallback chain over embedding providers.

    `embed` tries the primary provider and then each fallback in order, so it
    always returns a vector. Every vector is tagged with the provider that
    produced it. Only primary results are cached: a degraded vector should not
    outlive the outage that caused it. Both caches keep at most `cache_size`
    entries.
    """

    def __init__(
        self,
        primary: EmbeddingProvider,
        fallbacks: Optional[Sequence[EmbeddingProvider]] = None,
        timeout: float = 15.0,
        cache_size: int = DEFAULT_CACHE_SIZE,
    ):
        self.primary = primary
        if fallbacks is None:
            fallbacks = [p for p in (MockEmbeddingProvider(), SimplifiedEmbeddingProvider())
                         if p.source != primary.source]
        self.fallbacks = list(fallbacks)
        self.timeout = timeout
        self._providers: Dict[str, EmbeddingProvider] = {
            p.source: p for p in [primary, *self.fallbacks]}
        self._cache: LRUCache[TaggedEmbedding] = LRUCache(cache_size)
        self._aligned: LRUCache[List[float]] = LRUCache(cache_size)

    @property
    def mode(self) -> str:
        return self.primary.source

    async def _call(self, provider: EmbeddingProvider, text: str) -> List[float]:
        return await asyncio.wait_for(provider.embed(text), timeout=self.timeout)

    async def embed(self, text: str) -> TaggedEmbedding:
        cached = self._cache.get(text)
        if cached is not None:
            return cached
        for provider in [self.primary, *self.fallbacks]:
            try:
                vector = await self._call(provider, text)
            except Exception as exc:
                logger.warning(
                    f"{provider.source} embedding failed ({exc!r}); trying next provider")
                continue
            tagged = TaggedEmbedding(vector=vector, source=provider.source)
            if provider is self.primary:
                self._cache.put(text, tagged)
            return tagged
        # last resort, cannot fail for str input
        return TaggedEmbedding(vector=simplified_embedding(text), source="simplified")

    async def embed_as(self, source: str, text: str) -> Optional[List[float]]:
        """Embed `text` with one specific provider, or None if it cannot."""
        cached = self._cache.get(text)
        if cached is not None and cached.source == source:
            return cached.vector
        key = (source, text)
        aligned = self._aligned.get(key)
        if aligned is not None:
            return aligned
        provider = self._providers.get(source)
        if provider is None:
            return None
        try:
            vector = await self._call(provider, text)
        except Exception as exc:
            logger.warning(f"could not re-embed with {source}: {exc!r}")
            return None
        self._aligned.put(key, vector)
        return vector


def build_embedding_service(
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> EmbeddingService:
    mode = settings.EMBEDDING_MODE.strip().lower()
    options = {"timeout": settings.EMBEDDING_TIMEOUT_SECONDS, "cache_size": settings.EMBEDDING_CACHE_SIZE}
    if mode == "remote":
        if not settings.OPENAI_API_KEY:
            logger.warning("Missing OPENAI_API_KEY, falling back to mock embeddings")
            return EmbeddingService(MockEmbeddingProvider(), **options)
        remote = RemoteEmbeddingProvider(
            settings.OPENAI_API_KEY,
            settings.OPENAI_EMBEDDING_MODEL,
            settings.OPENAI_BASE_URL,
            trusted=settings.EMBEDDING_TRUSTED_CONTEXT,
            timeout=settings.EMBEDDING_TIMEOUT_SECONDS,
            transport=transport,
        )
        return EmbeddingService(remote, **options)
    if mode == "mock":
        return EmbeddingService(MockEmbeddingProvider(), **options)
    if mode == "simplified":
        return EmbeddingService(SimplifiedEmbeddingProvider(), **options)
    raise ValueError(f"unknown EMBEDDING_MODE: {settings.EMBEDDING_MODE!r}")
