import logging
from typing import Any, Dict, List, Optional, Tuple

from app.settings import Settings
from domain.errors import KnowledgeBaseNotLoadedError
from domain.schemas import EmbeddingResult, KnowledgeBase, QueryResult, Skill
from infra.rag.chunking import chunk_text
from infra.rag.embeddings import EmbeddingService, TaggedEmbedding
from infra.rag.store import KnowledgeStore
from infra.rag.vector_math import cosine_similarity

logger = logging.getLogger(__name__)


class KnowledgeManager:
    """Creates, loads and searches knowledge bases held in a KnowledgeStore.

    One knowledge base is "active" at a time: skill lookup, skill extraction
    and context retrieval run against it. Chunk queries address any stored
    knowledge base by id.

    Embeddings carry the name of the provider that produced them. Two vectors
    from different providers are never compared; the stored side is re-embedded
    with the query's provider instead, or skipped when that is not possible.
    """

    def __init__(
        self,
        store: KnowledgeStore,
        embedder: EmbeddingService,
        *,
        chunk_size: int = 1000,
        chunk_overlap: int = 200,
        context_floor: float = 0.6,
        extraction_threshold: float = 0.75,
    ):
        self.store = store
        self.embedder = embedder
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self.context_floor = context_floor
        self.extraction_threshold = extraction_threshold
        self.knowledge_base: Optional[KnowledgeBase] = None
        self._skill_embeddings: Dict[str, TaggedEmbedding] = {}

    @classmethod
    def from_settings(cls, store: KnowledgeStore, embedder: EmbeddingService, settings: Settings) -> "KnowledgeManager":
        return cls(
            store,
            embedder,
            chunk_size=settings.CHUNK_SIZE,
            chunk_overlap=settings.CHUNK_OVERLAP,
            context_floor=settings.CONTEXT_SIMILARITY_FLOOR,
            extraction_threshold=settings.SKILL_EXTRACTION_THRESHOLD,
        )

    # --- registry -------------------------------------------------------

    def create_knowledge_base(self, name: str, description: Optional[str] = None) -> KnowledgeBase:
        return self.store.create(name, description)

    def register_knowledge_base(self, kb: KnowledgeBase) -> KnowledgeBase:
        return self.store.register(kb)

    def get_knowledge_bases(self) -> List[KnowledgeBase]:
        return self.store.list()

    def get_knowledge_base(self, kb_id: str) -> Optional[KnowledgeBase]:
        return self.store.get(kb_id)

    def chunk_count(self, kb_id: str) -> int:
        return len(self.store.chunks(kb_id))

    @property
    def is_loaded(self) -> bool:
        return self.knowledge_base is not None

    def _require_loaded(self) -> KnowledgeBase:
        if self.knowledge_base is None:
            raise KnowledgeBaseNotLoadedError()
        return self.knowledge_base

    # --- ingest ---------------------------------------------------------

    async def _embed_skill(self, skill: Skill) -> TaggedEmbedding:
        if skill.embedding is not None and skill.embedding_source is not None:
            return TaggedEmbedding(vector=skill.embedding, source=skill.embedding_source)
        tagged = await self.embedder.embed(skill.name)
        skill.embedding = tagged.vector
        skill.embedding_source = tagged.source
        return tagged

    async def load_knowledge_base(self, kb: KnowledgeBase) -> None:
        kb = self.store.register(kb)
        async with self.store.lock(kb.id):
            embeddings: Dict[str, TaggedEmbedding] = {}
            for skill in kb.skills:
                embeddings[skill.name] = await self._embed_skill(skill)
            self._skill_embeddings = embeddings
            self.knowledge_base = kb
        sources = sorted({t.source for t in embeddings.values()})
        logger.info(
            f"Loaded knowledge base '{kb.name}' ({kb.id}): "
            f"{len(embeddings)} skill embeddings, sources={sources}")

    async def add_to_knowledge_base(
        self,
        kb_id: str,
        text: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> List[EmbeddingResult]:
        self.store.require(kb_id)
        chunks = chunk_text(text, size=self.chunk_size, overlap=self.chunk_overlap)
        results: List[EmbeddingResult] = []
        async with self.store.lock(kb_id):
            try:
                for i, chunk in enumerate(chunks):
                    tagged = await self.embedder.embed(chunk)
                    results.append(EmbeddingResult(
                        text=chunk,
                        embedding=tagged.vector,
                        source=tagged.source,
                        metadata={**(metadata or {}), "chunk_index": i},
                    ))
            finally:
                # keep whatever was embedded before an interruption
                self.store.append_chunks(kb_id, results)
        logger.info(f"Ingested {len(results)} chunks into knowledge base {kb_id}")
        return results

    # --- search ---------------------------------------------------------

    async def _compare(self, query: TaggedEmbedding, stored: TaggedEmbedding, text: str) -> Optional[float]:
        if stored.source == query.source:
            return cosine_similarity(query.vector, stored.vector)
        aligned = await self.embedder.embed_as(query.source, text)
        if aligned is None:
            logger.warning(
                f"Skipping '{text[:40]}': stored {stored.source} embedding "
                f"cannot be compared with a {query.source} query")
            return None
        return cosine_similarity(query.vector, aligned)

    async def extract_skills_from_text(self, text: str, threshold: Optional[float] = None) -> List[str]:
        self._require_loaded()
        if threshold is None:
            threshold = self.extraction_threshold
        query = await self.embedder.embed(text)
        matches: List[str] = []
        for name, tagged in self._skill_embeddings.items():
            similarity = await self._compare(query, tagged, name)
            if similarity is not None and similarity >= threshold:
                matches.append(name)
        return matches

    def get_skill_knowledge(self, skill_name: str) -> Optional[Skill]:
        kb = self._require_loaded()
        target = skill_name.lower()
        for skill in kb.skills:
            if skill.name.lower() == target:
                return skill.model_copy()
        return None

    async def get_knowledge_context(self, query: str, max_results: int = 5) -> str:
        kb = self._require_loaded()
        q = await self.embedder.embed(query)
        scored: List[Tuple[float, str]] = []

        for skill in kb.skills:
            tagged = self._skill_embeddings.get(skill.name) or await self._embed_skill(skill)
            similarity = await self._compare(q, tagged, skill.name)
            if similarity is not None and similarity > self.context_floor:
                scored.append(
                    (similarity, f"{skill.name} ({skill.category.value}): {skill.description}"))

        for resource in kb.resources:
            resource_text = f"{resource.title} {resource.description}"
            tagged = await self.embedder.embed(resource_text)
            similarity = await self._compare(q, tagged, resource_text)
            if similarity is not None and similarity > self.context_floor:
                scored.append(
                    (similarity, f"Resource: {resource.title} - {resource.description}"))

        scored.sort(key=lambda item: item[0], reverse=True)
        return "\n\n".join(text for _, text in scored[:max_results])

    async def query_knowledge_base(self, kb_id: str, query: str, top_k: int = 5) -> List[QueryResult]:
        chunks = self.store.chunks(kb_id)
        if not chunks:
            return []
        q = await self.embedder.embed(query)
        results: List[QueryResult] = []
        for chunk in chunks:
            stored = TaggedEmbedding(vector=chunk.embedding, source=chunk.source)
            similarity = await self._compare(q, stored, chunk.text)
            if similarity is None:
                continue
            results.append(QueryResult(text=chunk.text, similarity=similarity, metadata=chunk.metadata))
        results.sort(key=lambda r: r.similarity, reverse=True)
        return results[:top_k]
