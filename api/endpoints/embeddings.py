from fastapi import APIRouter, Depends, HTTPException
from app.dependencies import ServiceContainer, get_container
from domain.schemas import EmbeddingRequest, EmbeddingResponse

router = APIRouter()


@router.post("/embeddings", response_model=EmbeddingResponse)
async def create_embedding(body: EmbeddingRequest,
                           container: ServiceContainer = Depends(get_container)) -> EmbeddingResponse:
    if not body.text or not body.text.strip():
        raise HTTPException(status_code=400, detail="text must be a non-empty string")
    tagged = await container.embedder.embed(body.text)
    return EmbeddingResponse(
        success=True, embedding=tagged.vector, source=tagged.source, dimension=len(tagged.vector))
