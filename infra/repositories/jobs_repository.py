import uuid
import json
from typing import Optional, Dict
from infra.db.session import SessionLocal
from infra.db.models import EvaluationJobRecord, EvaluationResultRecord
from domain.schemas import EvaluateRequest, EvaluationResult


class JobsRepository:
    def create_job(self, request: EvaluateRequest) -> str:
        jid = f"job_{uuid.uuid4().hex}"
        with SessionLocal() as s:
            s.add(EvaluationJobRecord(
                id=jid, status="queued", job_title=request.job_requirement.title,
                request_json=request.model_dump_json()))
            s.commit()
        return jid

    def update_status(self, job_id: str, status: str) -> None:
        with SessionLocal() as s:
            job = s.get(EvaluationJobRecord, job_id)
            if not job:
                return
            job.status = status
            s.commit()

    def complete(self, job_id: str, result: EvaluationResult) -> None:
        with SessionLocal() as s:
            job = s.get(EvaluationJobRecord, job_id)
            if not job:
                return
            job.status = "completed"
            s.merge(EvaluationResultRecord(
                job_id=job_id, result_json=result.model_dump_json(), source=result.source))
            s.commit()

    def fail(self, job_id: str, error: str) -> None:
        with SessionLocal() as s:
            job = s.get(EvaluationJobRecord, job_id)
            if not job:
                return
            job.status = "failed"
            s.merge(EvaluationResultRecord(job_id=job_id, error=error))
            s.commit()

    def get(self, job_id: str) -> Optional[Dict]:
        with SessionLocal() as s:
            job = s.get(EvaluationJobRecord, job_id)
            if not job:
                return None
            jr = s.get(EvaluationResultRecord, job_id)
            out = {"id": job.id, "status": job.status,
                   "result": None, "error": None}
            if jr and job.status == "completed" and jr.result_json:
                out["result"] = json.loads(jr.result_json)
            if jr and job.status == "failed":
                out["error"] = jr.error
            return out
