import os
import tempfile

# settings are read at import time
_tmp = tempfile.mkdtemp(prefix="web3-screening-tests-")
os.environ["SQLITE_PATH"] = os.path.join(_tmp, "test.sqlite3")
os.environ["OPENAI_API_KEY"] = ""
os.environ["EMBEDDING_MODE"] = "mock"
os.environ["BOOTSTRAP_KNOWLEDGE_BASE"] = "true"

from typing import List

import pytest

from infra.rag.embeddings import EmbeddingProvider, EmbeddingService, MockEmbeddingProvider
from infra.rag.knowledge_data import build_web3_knowledge_base
from infra.rag.knowledge_manager import KnowledgeManager
from infra.rag.store import KnowledgeStore


class FakeRemoteProvider(EmbeddingProvider):
    """Stands in for the remote backend: counts calls, can be switched off."""
    source = "api"

    def __init__(self, dimension: int = 8):
        self.dimension = dimension
        self.calls = 0
        self.failing = False

    async def embed(self, text: str) -> List[float]:
        self.calls += 1
        if self.failing:
            raise RuntimeError("backend down")
        vector = [0.0] * self.dimension
        for i, ch in enumerate(text):
            vector[i % self.dimension] += 1.0 + ord(ch) % 7
        return vector


@pytest.fixture
def fake_remote() -> FakeRemoteProvider:
    return FakeRemoteProvider()


@pytest.fixture
def mock_embedder() -> EmbeddingService:
    return EmbeddingService(MockEmbeddingProvider())


@pytest.fixture
async def manager(mock_embedder) -> KnowledgeManager:
    km = KnowledgeManager(KnowledgeStore(), mock_embedder)
    await km.load_knowledge_base(build_web3_knowledge_base())
    return km
