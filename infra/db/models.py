from sqlalchemy import Column, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from infra.db.session import Base


class EvaluationJobRecord(Base):
    __tablename__ = "evaluation_jobs"
    id = Column(String, primary_key=True)
    status = Column(String, nullable=False, default="queued")  # queued | processing | completed | failed
    job_title = Column(String, nullable=True)
    request_json = Column(Text, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
    result = relationship("EvaluationResultRecord", back_populates="job", uselist=False)


class EvaluationResultRecord(Base):
    __tablename__ = "evaluation_results"
    job_id = Column(String, ForeignKey("evaluation_jobs.id"), primary_key=True)
    result_json = Column(Text, nullable=True)
    source = Column(String, nullable=True)  # llm | fallback
    error = Column(Text, nullable=True)
    job = relationship("EvaluationJobRecord", back_populates="result")
