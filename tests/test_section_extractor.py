import json

import httpx

from infra.llm.client import LLMClient
from infra.parsers.resume_parser import build_resume_data, parse_resume_document
from infra.parsers.section_extractor import ResumeSectionExtractor

RESUME = """Ada Lovelace
ada@example.com | +44 20 7946 0958
Skills: Solidity, Rust, React
Smart contract engineer at Chainworks 2021 - present
"""

REPLIES = {
    "personal_info": {
        "name": "Ada Lovelace", "email": None, "phone": None,
        "location": "London", "links": ["https://github.com/ada"],
    },
    "work_experience": {"experiences": [{
        "company": "Chainworks", "position": "Smart Contract Engineer", "start_date": "2021",
        "end_date": None, "description": "Audited DeFi vaults", "technologies": ["Solidity", "Foundry"],
    }]},
    "education": {"education": [{"institution": "University of London", "degree": "BSc", "field": "Mathematics"}]},
    "skills": {"skills": ["Solidity", "Rust", "Foundry", " "]},
    "projects": {"projects": [{"name": "VaultGuard", "description": "Invariant tests", "technologies": ["Foundry"], "role": None}]},
}


def _section_of(request: httpx.Request) -> str:
    prompt = json.loads(request.content)["messages"][-1]["content"]
    return next(s for s in REPLIES if f"TASK: {s}\n" in prompt)


def _extractor(replies, api_key="test-key", seen=None) -> ResumeSectionExtractor:
    def handler(request: httpx.Request) -> httpx.Response:
        section = _section_of(request)
        if seen is not None:
            seen.append(section)
        reply = replies[section]
        content = reply if isinstance(reply, str) else "```json\n" + json.dumps(reply) + "\n```"
        return httpx.Response(200, json={"choices": [{"message": {"role": "assistant", "content": content}}]})

    llm = LLMClient(api_key, "test-model", max_attempts=1, transport=httpx.MockTransport(handler))
    return ResumeSectionExtractor(llm, timeout=5)


async def test_sections_are_requested_in_order():
    seen = []
    data = await _extractor(REPLIES, seen=seen).extract(RESUME)
    assert seen == ["personal_info", "work_experience", "education", "skills", "projects"]
    assert data.work_experience[0].company == "Chainworks"
    assert data.work_experience[0].end_date == ""
    assert data.education[0].field == "Mathematics"
    assert data.skills == ["Solidity", "Rust", "Foundry"]
    assert data.projects[0].name == "VaultGuard"
    assert data.projects[0].role is None
    assert data.raw_text == RESUME


async def test_null_personal_fields_keep_heuristic_values():
    data = await _extractor(REPLIES).extract(RESUME)
    info = data.personal_info
    assert info.name == "Ada Lovelace"
    assert info.email == "ada@example.com"
    assert info.phone == "+44 20 7946 0958"
    assert info.location == "London"
    assert [(l.label, l.url) for l in info.links] == [("Link", "https://github.com/ada")]


async def test_failed_step_keeps_heuristic_section():
    replies = dict(REPLIES, work_experience="I could not find any jobs.", skills={"skills": "Solidity"})
    base = build_resume_data(RESUME)
    data = await _extractor(replies).extract(RESUME, base=base)
    assert data.work_experience == base.work_experience
    assert data.skills == base.skills
    assert data.education[0].institution == "University of London"
    assert data.projects[0].name == "VaultGuard"


async def test_without_credential_returns_heuristics():
    seen = []
    data = await _extractor(REPLIES, api_key="", seen=seen).extract(RESUME)
    assert seen == []
    assert data == build_resume_data(RESUME)


async def test_parse_resume_document_uses_extractor():
    result = await parse_resume_document(RESUME.encode(), "ada.txt", _extractor(REPLIES))
    assert result.error is None
    assert result.data.personal_info.location == "London"

    plain = await parse_resume_document(RESUME.encode(), "ada.txt")
    assert plain.data == build_resume_data(RESUME)

    bad = await parse_resume_document(b"", "ada.exe", _extractor(REPLIES))
    assert bad.data is None and bad.error
