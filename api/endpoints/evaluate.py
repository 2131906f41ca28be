import asyncio
import logging
from fastapi import APIRouter, Depends
from app.dependencies import ServiceContainer, get_container
from domain.schemas import EvaluateRequest, EvaluationResult, JobStatusResponse

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/evaluate", response_model=JobStatusResponse)
async def evaluate(body: EvaluateRequest,
                   container: ServiceContainer = Depends(get_container)) -> JobStatusResponse:
    jobs_repo = container.jobs_repo
    job_id = jobs_repo.create_job(body)

    async def runner():
        try:
            jobs_repo.update_status(job_id, "processing")
            result = await container.evaluator.evaluate(body.resume_data, body.job_requirement)
            jobs_repo.complete(job_id, result)
        except Exception as e:
            logger.exception("Evaluation job %s failed", job_id)
            jobs_repo.fail(job_id, str(e))

    container.track(asyncio.create_task(runner()))
    return JobStatusResponse(id=job_id, status="queued")


@router.post("/evaluate/sync", response_model=EvaluationResult)
async def evaluate_sync(body: EvaluateRequest,
                        container: ServiceContainer = Depends(get_container)) -> EvaluationResult:
    return await container.evaluator.evaluate(body.resume_data, body.job_requirement)
