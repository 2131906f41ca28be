from fastapi import APIRouter
from api.endpoints.resume import router as resume_router
from api.endpoints.evaluate import router as evaluate_router
from api.endpoints.result import router as result_router
from api.endpoints.knowledge import router as knowledge_router
from api.endpoints.embeddings import router as embeddings_router
from api.endpoints.health import router as health_router

api_router = APIRouter()
api_router.include_router(resume_router, tags=["resume"])
api_router.include_router(evaluate_router, tags=["evaluate"])
api_router.include_router(result_router, tags=["result"])
api_router.include_router(knowledge_router, tags=["knowledge"])
api_router.include_router(embeddings_router, tags=["embeddings"])
api_router.include_router(health_router, tags=["health"])
