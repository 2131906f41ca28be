import asyncio
import logging
from typing import Any, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel, Field

from domain.schemas import Education, Link, PersonalInfo, Project, ResumeData, WorkExperience
from infra.llm.client import LLMClient, extract_json_object
from infra.llm.prompts import RESUME_PARSER_SYSTEM_PROMPT, RESUME_SECTION_PROMPT, RESUME_SECTIONS
from infra.parsers.resume_parser import build_resume_data

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class _PersonalSection(BaseModel):
    name: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    links: List[Union[str, Link]] = Field(default_factory=list)


class _WorkSection(BaseModel):
    experiences: List[WorkExperience]


class _EducationSection(BaseModel):
    education: List[Education]


class _SkillsSection(BaseModel):
    skills: List[str]


class _ProjectsSection(BaseModel):
    projects: List[Project]


def _drop_nulls(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _drop_nulls(v) for k, v in value.items() if v is not None}
    if isinstance(value, list):
        return [_drop_nulls(v) for v in value if v is not None]
    return value


def _as_link(link: Union[str, Link]) -> Link:
    return link if isinstance(link, Link) else Link(label="Link", url=link)


class ResumeSectionExtractor:
    """Structures resume text with one LLM call per section.

    Sections are asked for in order: personal info, work experience,
    education, skills, projects. A step that fails or returns an invalid
    shape keeps the heuristic value for that section, and without a
    credential the heuristic parse is returned unchanged.
    """

    def __init__(self, llm: LLMClient, timeout: float = 60.0):
        self.llm = llm
        self.timeout = timeout

    async def _step(self, section: str, text: str, model: Type[M]) -> Optional[M]:
        instructions, shape = RESUME_SECTIONS[section]
        prompt = RESUME_SECTION_PROMPT.format(
            section=section, instructions=instructions, resume_text=text, shape=shape)
        try:
            raw = await asyncio.wait_for(
                self.llm.complete(prompt, system=RESUME_PARSER_SYSTEM_PROMPT), timeout=self.timeout)
            return model.model_validate(_drop_nulls(extract_json_object(raw)))
        except asyncio.TimeoutError:
            logger.warning(f"Resume step '{section}' timed out after {self.timeout}s, keeping heuristic value")
        except Exception as exc:
            logger.warning(f"Resume step '{section}' failed ({exc!r}), keeping heuristic value")
        return None

    async def extract(self, text: str, base: Optional[ResumeData] = None) -> ResumeData:
        base = base or build_resume_data(text)
        if not self.llm.configured:
            logger.info("No LLM credential configured, keeping heuristic resume parse")
            return base

        personal = await self._step("personal_info", text, _PersonalSection)
        work = await self._step("work_experience", text, _WorkSection)
        education = await self._step("education", text, _EducationSection)
        skills = await self._step("skills", text, _SkillsSection)
        projects = await self._step("projects", text, _ProjectsSection)

        info = base.personal_info
        if personal is not None:
            info = PersonalInfo(
                name=personal.name or info.name,
                email=personal.email or info.email,
                phone=personal.phone or info.phone,
                location=personal.location or info.location,
                links=[_as_link(l) for l in personal.links if l] or info.links,
            )
        skill_names = [s.strip() for s in skills.skills if s.strip()] if skills is not None else []

        data = base.model_copy(update={
            "personal_info": info,
            "work_experience": work.experiences if work is not None else base.work_experience,
            "education": education.education if education is not None else base.education,
            "skills": skill_names or base.skills,
            "projects": projects.projects if projects is not None else base.projects,
        })
        logger.info(
            f"LLM resume parse: {len(data.work_experience)} jobs, {len(data.education)} schools, "
            f"{len(data.skills)} skills, {len(data.projects)} projects")
        return data
