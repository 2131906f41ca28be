from typing import List
from fastapi import APIRouter, Depends
from app.dependencies import ServiceContainer, get_container
from domain.errors import KnowledgeBaseNotFoundError
from domain.schemas import (
    AddDocumentRequest,
    AddDocumentResponse,
    ContextRequest,
    ContextResponse,
    CreateKnowledgeBaseRequest,
    KnowledgeBase,
    KnowledgeBaseSummary,
    QueryRequest,
    QueryResult,
)

router = APIRouter()


def _summary(container: ServiceContainer, kb: KnowledgeBase) -> KnowledgeBaseSummary:
    return KnowledgeBaseSummary(
        id=kb.id,
        name=kb.name,
        description=kb.description,
        version=kb.version,
        created_at=kb.created_at,
        updated_at=kb.updated_at,
        skill_count=len(kb.skills),
        resource_count=len(kb.resources),
        chunk_count=container.knowledge_manager.chunk_count(kb.id),
    )


@router.get("/knowledge-bases", response_model=List[KnowledgeBaseSummary])
def list_knowledge_bases(container: ServiceContainer = Depends(get_container)):
    return [_summary(container, kb) for kb in container.knowledge_manager.get_knowledge_bases()]


@router.post("/knowledge-bases", response_model=KnowledgeBaseSummary, status_code=201)
def create_knowledge_base(body: CreateKnowledgeBaseRequest,
                          container: ServiceContainer = Depends(get_container)):
    kb = container.knowledge_manager.create_knowledge_base(body.name, body.description)
    return _summary(container, kb)


@router.get("/knowledge-bases/{kb_id}", response_model=KnowledgeBaseSummary)
def get_knowledge_base(kb_id: str, container: ServiceContainer = Depends(get_container)):
    kb = container.knowledge_manager.get_knowledge_base(kb_id)
    if kb is None:
        raise KnowledgeBaseNotFoundError(kb_id)
    return _summary(container, kb)


@router.post("/knowledge-bases/{kb_id}/documents", response_model=AddDocumentResponse)
async def add_document(kb_id: str, body: AddDocumentRequest,
                       container: ServiceContainer = Depends(get_container)):
    results = await container.knowledge_manager.add_to_knowledge_base(kb_id, body.text, body.metadata)
    return AddDocumentResponse(
        knowledge_base_id=kb_id,
        chunks_added=len(results),
        sources=sorted({r.source for r in results}),
    )


@router.post("/knowledge-bases/{kb_id}/query", response_model=List[QueryResult])
async def query_knowledge_base(kb_id: str, body: QueryRequest,
                               container: ServiceContainer = Depends(get_container)):
    return await container.knowledge_manager.query_knowledge_base(kb_id, body.query, body.top_k)


@router.post("/knowledge/context", response_model=ContextResponse)
async def knowledge_context(body: ContextRequest,
                            container: ServiceContainer = Depends(get_container)):
    context = await container.knowledge_manager.get_knowledge_context(body.query, body.max_results)
    return ContextResponse(context=context)
