import asyncio
import logging
from typing import Iterable, List, Optional

from domain.schemas import (
    EvaluationResult,
    JobRequirement,
    LearningResource,
    ResourceLink,
    ResumeData,
    SkillMatch,
)
from domain.services.skill_extractor import SkillExtractor, categorize, extract_skill_candidates
from infra.llm.client import LLMClient, parse_evaluation_response
from infra.llm.prompts import (
    EVALUATION_PROMPT,
    EVALUATOR_SYSTEM_PROMPT,
    RETRIEVED_CONTEXT_HEADER,
    SKILLS_CONTEXT_HEADER,
)
from infra.rag.knowledge_manager import KnowledgeManager

logger = logging.getLogger("resume_evaluator")

FALLBACK_RELEVANCE = 8
FALLBACK_STRENGTHS = ["Technical ability", "Blockchain knowledge"]
FALLBACK_IMPROVEMENTS = ["Acquire the required skills that are still missing"]
FALLBACK_SUGGESTIONS = ["Keep growing in the Web3 field"]
FALLBACK_RESOURCES = [
    LearningResource(
        skill="Web3",
        resources=[ResourceLink(
            title="Web3.js documentation",
            url="https://web3js.readthedocs.io/",
            type="documentation",
        )],
    )
]


def _dedupe(items: Iterable[str]) -> List[str]:
    seen, out = set(), []
    for item in items:
        key = item.strip().lower()
        if key and key not in seen:
            seen.add(key)
            out.append(item.strip())
    return out


def matched_skills(wanted: List[str], have: List[str]) -> List[str]:
    return [w for w in wanted if any(w.lower() in h.lower() for h in have)]


def _format_work_experience(resume: ResumeData) -> str:
    if not resume.work_experience:
        return "No work experience listed"
    return "\n".join(
        f"Company: {exp.company or 'Unknown'}, Position: {exp.position or 'Unknown'}, "
        f"Period: {exp.start_date or '?'} to {exp.end_date or 'present'}, "
        f"Technologies: {', '.join(exp.technologies) or 'not mentioned'}\n"
        f"Description: {exp.description or 'no description'}\n"
        for exp in resume.work_experience
    )


def _format_projects(resume: ResumeData) -> str:
    if not resume.projects:
        return "No projects listed"
    return "\n".join(
        f"Project: {proj.name or 'Unnamed project'}, Role: {proj.role or 'Unknown'}\n"
        f"Technologies: {', '.join(proj.technologies) or 'not mentioned'}\n"
        f"Description: {proj.description or 'no description'}\n"
        for proj in resume.projects
    )


def _format_education(resume: ResumeData) -> str:
    if not resume.education:
        return "No education listed"
    return "\n".join(
        f"School: {edu.institution or 'Unknown'}, Degree: {edu.degree or 'Unknown'}, "
        f"Field: {edu.field or 'Unknown'}, Period: {edu.start_date or '?'} to {edu.end_date or '?'}"
        for edu in resume.education
    )


def build_evaluation_prompt(
    resume: ResumeData,
    job: JobRequirement,
    knowledge_context: str,
    all_skills: List[str],
) -> str:
    required = job.skills.required
    preferred = job.skills.preferred
    return EVALUATION_PROMPT.format(
        job_title=job.title or "Unknown position",
        job_level=job.level or "Unspecified",
        required_skills=", ".join(required) or "none specified",
        preferred_skills=", ".join(preferred) or "none specified",
        min_years=job.experience.min_years or 0,
        experience_fields=", ".join(job.experience.required_fields) or "a related field",
        skills=", ".join(resume.skills) or "No skills listed",
        work_experience=_format_work_experience(resume),
        projects=_format_projects(resume),
        education=_format_education(resume),
        knowledge_context=knowledge_context or "No knowledge context available",
        all_skills=", ".join(all_skills) or "none",
        matched_required=", ".join(matched_skills(required, all_skills)) or "none",
        matched_preferred=", ".join(matched_skills(preferred, all_skills)) or "none",
    )


def fallback_evaluation(resume: ResumeData, job: JobRequirement) -> EvaluationResult:
    """Deterministic evaluation by substring matching; needs no network."""
    skills = resume.skills
    matching: List[str] = []
    missing: List[str] = []
    for skill in job.skills.required:
        if not skill.strip():
            continue
        if any(skill.lower() in s.lower() for s in skills):
            matching.append(skill)
        else:
            missing.append(skill)

    return EvaluationResult(
        skill_matches=[
            SkillMatch(skill=s, category=categorize(s), relevance=FALLBACK_RELEVANCE)
            for s in matching
        ],
        missing_skills=missing,
        strength_areas=list(FALLBACK_STRENGTHS),
        improvement_areas=list(FALLBACK_IMPROVEMENTS),
        career_suggestions=list(FALLBACK_SUGGESTIONS),
        learning_resources=[r.model_copy(deep=True) for r in FALLBACK_RESOURCES],
        source="fallback",
    )


class ResumeEvaluator:
    """Scores a resume against a job requirement with retrieved Web3 context.

    The pipeline is: collect skills, retrieve knowledge, build the prompt, ask
    the LLM, validate its JSON. Any failure along the way, including a missing
    credential, produces the deterministic fallback instead, so `evaluate`
    always returns a result.
    """

    def __init__(
        self,
        knowledge_manager: KnowledgeManager,
        llm: LLMClient,
        skill_extractor: Optional[SkillExtractor] = None,
        timeout: float = 60.0,
    ):
        self.knowledge_manager = knowledge_manager
        self.llm = llm
        self.skill_extractor = skill_extractor or SkillExtractor()
        self.timeout = timeout

    async def evaluate(
        self,
        resume: ResumeData,
        job: JobRequirement,
        timeout: Optional[float] = None,
    ) -> EvaluationResult:
        try:
            return await self._evaluate(resume, job, self.timeout if timeout is None else timeout)
        except Exception:
            logger.exception("Evaluation pipeline failed, using fallback evaluation")
            return fallback_evaluation(resume, job)

    async def _evaluate(self, resume: ResumeData, job: JobRequirement, timeout: float) -> EvaluationResult:
        logger.info(f"=== Evaluating resume for '{job.title or 'untitled position'}' ===")
        all_skills = await self.collect_skills(resume)
        logger.info(f"Candidate skills ({len(all_skills)}): {all_skills}")

        knowledge_context = await self.skills_context(all_skills)
        logger.info(f"Knowledge context length: {len(knowledge_context)} chars")

        prompt = build_evaluation_prompt(resume, job, knowledge_context, all_skills)

        if not self.llm.configured:
            logger.warning("No LLM credential configured, using fallback evaluation")
            return fallback_evaluation(resume, job)

        try:
            raw = await asyncio.wait_for(
                self.llm.complete(prompt, system=EVALUATOR_SYSTEM_PROMPT), timeout=timeout)
            payload = parse_evaluation_response(raw)
        except asyncio.TimeoutError:
            logger.warning(f"LLM evaluation timed out after {timeout}s, using fallback evaluation")
            return fallback_evaluation(resume, job)
        except Exception as exc:
            logger.warning(f"LLM evaluation failed ({exc!r}), using fallback evaluation")
            return fallback_evaluation(resume, job)

        result = payload.to_result()
        logger.info(
            f"LLM evaluation: {len(result.skill_matches)} skill matches, "
            f"missing={result.missing_skills}")
        return result

    async def collect_skills(self, resume: ResumeData) -> List[str]:
        declared = [s for s in resume.skills if s.strip()]
        descriptions = [exp.description for exp in resume.work_experience if exp.description]
        descriptions += [proj.description for proj in resume.projects if proj.description]
        technologies = [t for exp in resume.work_experience for t in exp.technologies]
        technologies += [t for proj in resume.projects for t in proj.technologies]

        candidates = declared + technologies
        for text in descriptions:
            candidates.extend(extract_skill_candidates(text, self.skill_extractor.catalog))
        context = "\n".join(declared + descriptions)
        extracted = [m.skill for m in self.skill_extractor.extract_skills(candidates, context=context)]

        semantic: List[str] = []
        free_text = " ".join(declared + descriptions).strip()
        if free_text and self.knowledge_manager.is_loaded:
            try:
                semantic = await self.knowledge_manager.extract_skills_from_text(free_text)
            except Exception as exc:
                logger.warning(f"Semantic skill extraction failed: {exc!r}")

        return _dedupe(declared + extracted + semantic)

    async def skills_context(self, skills: List[str]) -> str:
        if not self.knowledge_manager.is_loaded:
            return ""
        skill_lines: List[str] = []
        for skill in skills:
            info = self.knowledge_manager.get_skill_knowledge(skill)
            if info is None:
                continue
            skill_lines.append(f"- {info.name}: {info.description}")
            if info.related_technologies:
                skill_lines.append(f"  Related technologies: {', '.join(info.related_technologies)}")
            skill_lines.append("")

        retrieved = ""
        main_skills = " ".join(skills[:5])
        if main_skills:
            try:
                retrieved = await self.knowledge_manager.get_knowledge_context(main_skills, 3)
            except Exception as exc:
                logger.warning(f"Knowledge context retrieval failed: {exc!r}")

        parts: List[str] = []
        if skill_lines:
            parts.append(SKILLS_CONTEXT_HEADER + "\n\n" + "\n".join(skill_lines).rstrip())
        if retrieved:
            parts.append(RETRIEVED_CONTEXT_HEADER + "\n\n" + retrieved)
        return "\n\n".join(parts)
