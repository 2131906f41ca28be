from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SkillCategory(str, Enum):
    BLOCKCHAIN = "blockchain"
    WEB3 = "web3"
    DEFI = "defi"
    NFT = "nft"
    DAO = "dao"
    PROGRAMMING = "programming"
    OTHER = "other"


SkillLevel = Literal["beginner", "intermediate", "expert"]
EmbeddingSource = Literal["api", "mock", "simplified"]
ResourceType = Literal["course", "documentation", "tutorial", "book", "other"]

_LEVELS = {"beginner", "intermediate", "expert"}
_RESOURCE_TYPES = {"course", "documentation", "tutorial", "book", "other"}


# --- knowledge base -------------------------------------------------------

class Skill(BaseModel):
    name: str
    description: str = ""
    category: SkillCategory = SkillCategory.OTHER
    related_technologies: List[str] = Field(default_factory=list)
    embedding: Optional[List[float]] = None
    embedding_source: Optional[EmbeddingSource] = None


class Resource(BaseModel):
    title: str
    description: str = ""
    url: Optional[str] = None
    type: Optional[str] = None


class KnowledgeBase(BaseModel):
    id: Optional[str] = None
    name: str
    description: Optional[str] = None
    version: str = "1.0.0"
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)
    skills: List[Skill] = Field(default_factory=list)
    resources: List[Resource] = Field(default_factory=list)


class EmbeddingResult(BaseModel):
    text: str
    embedding: List[float]
    source: EmbeddingSource
    metadata: Optional[Dict[str, Any]] = None


class QueryResult(BaseModel):
    text: str
    similarity: float
    metadata: Optional[Dict[str, Any]] = None


# --- resume + job (consumed) ---------------------------------------------

class Link(BaseModel):
    label: str = ""
    url: str = ""


class PersonalInfo(BaseModel):
    name: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    links: List[Link] = Field(default_factory=list)


class WorkExperience(BaseModel):
    company: str = ""
    position: str = ""
    start_date: str = ""
    end_date: str = ""
    description: str = ""
    highlights: List[str] = Field(default_factory=list)
    technologies: List[str] = Field(default_factory=list)


class Education(BaseModel):
    institution: str = ""
    degree: str = ""
    field: str = ""
    start_date: str = ""
    end_date: str = ""


class Project(BaseModel):
    name: str = ""
    role: Optional[str] = None
    description: str = ""
    technologies: List[str] = Field(default_factory=list)
    url: Optional[str] = None


class Certification(BaseModel):
    name: str = ""
    issuer: str = ""
    date: str = ""
    url: Optional[str] = None


class LanguageSkill(BaseModel):
    language: str = ""
    proficiency: str = ""


class ResumeData(BaseModel):
    personal_info: PersonalInfo = Field(default_factory=PersonalInfo)
    summary: str = ""
    skills: List[str] = Field(default_factory=list)
    work_experience: List[WorkExperience] = Field(default_factory=list)
    education: List[Education] = Field(default_factory=list)
    projects: List[Project] = Field(default_factory=list)
    certifications: List[Certification] = Field(default_factory=list)
    languages: List[LanguageSkill] = Field(default_factory=list)
    raw_text: str = ""


class ResumeParseResult(BaseModel):
    data: Optional[ResumeData] = None
    error: Optional[str] = None


class JobSkills(BaseModel):
    required: List[str] = Field(default_factory=list)
    preferred: List[str] = Field(default_factory=list)


class ExperienceRequirement(BaseModel):
    min_years: float = 0
    required_fields: List[str] = Field(default_factory=list)


class JobRequirement(BaseModel):
    title: Optional[str] = None
    level: Optional[str] = None
    skills: JobSkills = Field(default_factory=JobSkills)
    experience: ExperienceRequirement = Field(default_factory=ExperienceRequirement)


# --- evaluation -----------------------------------------------------------

class SkillMatch(BaseModel):
    skill: str = Field(..., min_length=1)
    category: SkillCategory = SkillCategory.OTHER
    relevance: float = Field(..., ge=0.0, le=10.0)
    level: Optional[SkillLevel] = None
    description: Optional[str] = None

    @field_validator("category", mode="before")
    @classmethod
    def _known_category(cls, value):
        if isinstance(value, SkillCategory):
            return value
        if value is None:
            return SkillCategory.OTHER
        try:
            return SkillCategory(str(value).strip().lower())
        except ValueError:
            return SkillCategory.OTHER

    @field_validator("level", mode="before")
    @classmethod
    def _known_level(cls, value):
        if value is None:
            return None
        value = str(value).strip().lower()
        return value if value in _LEVELS else None


class ResourceLink(BaseModel):
    title: str
    url: str = ""
    type: ResourceType = "other"

    @field_validator("type", mode="before")
    @classmethod
    def _known_type(cls, value):
        value = str(value or "").strip().lower()
        return value if value in _RESOURCE_TYPES else "other"


class LearningResource(BaseModel):
    skill: str
    resources: List[ResourceLink] = Field(default_factory=list)


class EvaluationResult(BaseModel):
    skill_matches: List[SkillMatch] = Field(default_factory=list)
    missing_skills: List[str] = Field(default_factory=list)
    strength_areas: List[str] = Field(default_factory=list)
    improvement_areas: List[str] = Field(default_factory=list)
    career_suggestions: List[str] = Field(default_factory=list)
    learning_resources: List[LearningResource] = Field(default_factory=list)
    source: Literal["llm", "fallback"] = "fallback"


# --- API payloads ---------------------------------------------------------

class EvaluateRequest(BaseModel):
    resume_data: ResumeData
    job_requirement: JobRequirement


class JobStatusResponse(BaseModel):
    id: str
    status: str
    result: Optional[Dict] = None
    error: Optional[str] = None


class CreateKnowledgeBaseRequest(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None


class KnowledgeBaseSummary(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    version: str
    created_at: datetime
    updated_at: datetime
    skill_count: int
    resource_count: int
    chunk_count: int


class AddDocumentRequest(BaseModel):
    text: str = Field(..., min_length=1)
    metadata: Optional[Dict[str, Any]] = None


class AddDocumentResponse(BaseModel):
    knowledge_base_id: str
    chunks_added: int
    sources: List[EmbeddingSource]


class QueryRequest(BaseModel):
    query: str = Field(..., min_length=1)
    top_k: int = Field(5, ge=1, le=50)


class ContextRequest(BaseModel):
    query: str = Field(..., min_length=1)
    max_results: int = Field(5, ge=1, le=50)


class ContextResponse(BaseModel):
    context: str


class EmbeddingRequest(BaseModel):
    text: str


class EmbeddingResponse(BaseModel):
    success: bool
    embedding: List[float]
    source: EmbeddingSource
    dimension: int
