import asyncio
import logging
from dataclasses import dataclass, field
from typing import Optional, Set

import httpx
from fastapi import Request

from app.settings import Settings
from domain.schemas import KnowledgeBase
from domain.services.resume_evaluator import ResumeEvaluator
from domain.services.skill_extractor import SkillExtractor
from infra.llm.client import LLMClient
from infra.parsers.section_extractor import ResumeSectionExtractor
from infra.rag.embeddings import EmbeddingService, build_embedding_service
from infra.rag.knowledge_data import REFERENCE_TEXTS, build_web3_knowledge_base
from infra.rag.knowledge_manager import KnowledgeManager
from infra.rag.store import KnowledgeStore
from infra.repositories.jobs_repository import JobsRepository

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """Everything a request handler needs, built once per application."""
    settings: Settings
    store: KnowledgeStore
    embedder: EmbeddingService
    knowledge_manager: KnowledgeManager
    skill_extractor: SkillExtractor
    llm: LLMClient
    evaluator: ResumeEvaluator
    jobs_repo: JobsRepository
    resume_extractor: ResumeSectionExtractor
    background_tasks: Set[asyncio.Task] = field(default_factory=set)

    async def bootstrap(self) -> KnowledgeBase:
        """Load the curated Web3 knowledge base and ingest its reference passages."""
        kb = build_web3_knowledge_base()
        await self.knowledge_manager.load_knowledge_base(kb)
        for doc in REFERENCE_TEXTS:
            await self.knowledge_manager.add_to_knowledge_base(
                kb.id, doc["content"].strip(), {"title": doc["title"]})
        logger.info(
            f"Knowledge base '{kb.name}' ready: {len(kb.skills)} skills, "
            f"{self.knowledge_manager.chunk_count(kb.id)} chunks")
        return kb

    def track(self, task: asyncio.Task) -> asyncio.Task:
        self.background_tasks.add(task)
        task.add_done_callback(self.background_tasks.discard)
        return task

    async def drain(self) -> None:
        if self.background_tasks:
            logger.info(f"Waiting for {len(self.background_tasks)} background evaluation(s)")
            await asyncio.gather(*self.background_tasks, return_exceptions=True)


def build_container(
    settings: Settings,
    embedding_transport: Optional[httpx.AsyncBaseTransport] = None,
    llm_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ServiceContainer:
    store = KnowledgeStore()
    embedder = build_embedding_service(settings, transport=embedding_transport)
    manager = KnowledgeManager.from_settings(store, embedder, settings)
    extractor = SkillExtractor(partial_penalty=settings.PARTIAL_MATCH_PENALTY)
    llm = LLMClient.from_settings(settings, transport=llm_transport)
    if not llm.configured:
        logger.warning("OPENAI_API_KEY not set: evaluations will use the fallback evaluator")
    evaluator = ResumeEvaluator(manager, llm, extractor, timeout=settings.LLM_TIMEOUT_SECONDS)
    return ServiceContainer(
        settings=settings,
        store=store,
        embedder=embedder,
        knowledge_manager=manager,
        skill_extractor=extractor,
        llm=llm,
        evaluator=evaluator,
        jobs_repo=JobsRepository(),
        resume_extractor=ResumeSectionExtractor(llm, timeout=settings.LLM_TIMEOUT_SECONDS),
    )


def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container
