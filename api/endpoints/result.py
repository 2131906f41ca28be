from fastapi import APIRouter, Depends, HTTPException
from app.dependencies import ServiceContainer, get_container
from domain.schemas import JobStatusResponse

router = APIRouter()


@router.get("/result/{job_id}", response_model=JobStatusResponse)
async def get_result(job_id: str,
                     container: ServiceContainer = Depends(get_container)) -> JobStatusResponse:
    job = container.jobs_repo.get(job_id)
    if not job:
        raise HTTPException(status_code=404, detail="job not found")
    return JobStatusResponse(id=job["id"], status=job["status"], result=job.get("result"), error=job.get("error"))
