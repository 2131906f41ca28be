import io
import logging
import os
import re
from typing import List

import docx
import pdfplumber

from domain.schemas import PersonalInfo, ResumeData, ResumeParseResult
from domain.services.skill_extractor import extract_skill_candidates

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".pdf", ".docx", ".txt")

_EMAIL = re.compile(r"[\w.+-]+@[\w-]+(?:\.[\w-]+)+")
_PHONE = re.compile(r"\+?\d[\d ().-]{7,}\d")


def _pdf_text(content: bytes) -> str:
    parts: List[str] = []
    with pdfplumber.open(io.BytesIO(content)) as pdf:
        for page in pdf.pages:
            parts.append(page.extract_text() or "")
    return "\n".join(parts)


def _docx_text(content: bytes) -> str:
    document = docx.Document(io.BytesIO(content))
    return "\n".join(p.text for p in document.paragraphs)


def extract_text(content: bytes, filename: str) -> str:
    ext = os.path.splitext(filename or "")[1].lower()
    if ext == ".pdf":
        return _pdf_text(content)
    if ext == ".docx":
        return _docx_text(content)
    if ext == ".txt":
        return content.decode("utf-8", errors="replace")
    raise ValueError(f"Unsupported file type: {ext or filename!r}")


def _guess_name(lines: List[str]) -> str:
    for line in lines[:5]:
        if _EMAIL.search(line) or _PHONE.search(line) or ":" in line:
            continue
        if len(line) <= 60:
            return line
    return ""


def build_resume_data(text: str) -> ResumeData:
    """Heuristic structuring of plain resume text: contact line items plus skills."""
    lines = [ln.strip() for ln in text.splitlines() if ln.strip()]
    email = _EMAIL.search(text)
    phone = _PHONE.search(text)
    return ResumeData(
        personal_info=PersonalInfo(
            name=_guess_name(lines),
            email=email.group(0) if email else "",
            phone=phone.group(0).strip() if phone else "",
        ),
        skills=extract_skill_candidates(text),
        raw_text=text,
    )


def parse_resume(content: bytes, filename: str) -> ResumeParseResult:
    ext = os.path.splitext(filename or "")[1].lower()
    if ext not in SUPPORTED_EXTENSIONS:
        return ResumeParseResult(
            error=f"Unsupported file type '{ext or filename}'; expected one of {', '.join(SUPPORTED_EXTENSIONS)}")
    try:
        text = extract_text(content, filename)
    except Exception as exc:
        logger.warning(f"Failed to read resume '{filename}': {exc!r}")
        return ResumeParseResult(error=f"Could not read {ext} file: {exc}")
    if not text.strip():
        return ResumeParseResult(error="No text could be extracted from the resume")
    data = build_resume_data(text)
    logger.info(f"Parsed resume '{filename}': {len(data.skills)} skills, {len(text)} chars")
    return ResumeParseResult(data=data)


async def parse_resume_document(content: bytes, filename: str, extractor=None) -> ResumeParseResult:
    """`parse_resume`, then refine the sections with `extractor` when one is given."""
    result = parse_resume(content, filename)
    if result.error or extractor is None:
        return result
    return ResumeParseResult(data=await extractor.extract(result.data.raw_text, base=result.data))
