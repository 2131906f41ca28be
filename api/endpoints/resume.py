from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import JSONResponse
from app.dependencies import ServiceContainer, get_container
from domain.schemas import ResumeParseResult
from infra.parsers.resume_parser import parse_resume_document

router = APIRouter()


@router.post("/resume", response_model=ResumeParseResult)
async def upload_resume(file: UploadFile = File(...), container: ServiceContainer = Depends(get_container)):
    content = await file.read()
    extractor = container.resume_extractor if container.llm.configured else None
    result = await parse_resume_document(content, file.filename or "", extractor)
    if result.error:
        return JSONResponse(status_code=400, content={"error": result.error})
    return result
