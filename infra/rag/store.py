import asyncio
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional

from domain.errors import KnowledgeBaseNotFoundError
from domain.schemas import EmbeddingResult, KnowledgeBase


class KnowledgeStore:
    """In-memory registry of knowledge bases and their chunk embeddings.

    Chunk lists are append-only and nothing is ever evicted. Writers take the
    per-knowledge-base lock from `lock()`; readers do not.
    """

    def __init__(self):
        self._bases: Dict[str, KnowledgeBase] = {}
        self._chunks: Dict[str, List[EmbeddingResult]] = {}
        self._locks: Dict[str, asyncio.Lock] = {}

    def create(self, name: str, description: Optional[str] = None) -> KnowledgeBase:
        return self.register(KnowledgeBase(name=name, description=description))

    def register(self, kb: KnowledgeBase) -> KnowledgeBase:
        if kb.id is None:
            kb.id = uuid.uuid4().hex
        self._bases.setdefault(kb.id, kb)
        self._chunks.setdefault(kb.id, [])
        return self._bases[kb.id]

    def get(self, kb_id: str) -> Optional[KnowledgeBase]:
        return self._bases.get(kb_id)

    def require(self, kb_id: str) -> KnowledgeBase:
        kb = self._bases.get(kb_id)
        if kb is None:
            raise KnowledgeBaseNotFoundError(kb_id)
        return kb

    def list(self) -> List[KnowledgeBase]:
        return list(self._bases.values())

    def chunks(self, kb_id: str) -> List[EmbeddingResult]:
        return list(self._chunks.get(kb_id, []))

    def append_chunks(self, kb_id: str, results: List[EmbeddingResult]) -> None:
        kb = self.require(kb_id)
        self._chunks[kb_id].extend(results)
        kb.updated_at = datetime.now(timezone.utc)

    def lock(self, kb_id: str) -> asyncio.Lock:
        if kb_id not in self._locks:
            self._locks[kb_id] = asyncio.Lock()
        return self._locks[kb_id]
