from fastapi import APIRouter, Depends
from app.dependencies import ServiceContainer, get_container

router = APIRouter()


@router.get("/health")
def health(container: ServiceContainer = Depends(get_container)):
    kb = container.knowledge_manager.knowledge_base
    return {
        "status": "ok",
        "embedding_mode": container.embedder.mode,
        "llm_configured": container.llm.configured,
        "knowledge_base": {"id": kb.id, "name": kb.name} if kb else None,
        "knowledge_base_count": len(container.knowledge_manager.get_knowledge_bases()),
    }
