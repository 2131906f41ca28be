EVALUATOR_SYSTEM_PROMPT = (
    "You are a professional Web3 talent assessor. You evaluate how well a candidate's skills "
    "and experience fit a blockchain engineering role. Return only valid JSON."
)


EVALUATION_PROMPT = """
Evaluate how well the candidate's resume matches the Web3 position below.

## Position
- Title: {job_title}
- Level: {job_level}
- Required skills: {required_skills}
- Preferred skills: {preferred_skills}
- Experience: {min_years}+ years in {experience_fields}

## Candidate resume
### Skills
{skills}

### Work experience
{work_experience}

### Projects
{projects}

### Education
{education}

## Web3 knowledge and context
{knowledge_context}

## Skill match analysis
- Candidate skills: {all_skills}
- Required skills already matched: {matched_required}
- Preferred skills already matched: {matched_preferred}

Stay consistent with the match analysis above. Return ONLY strict JSON with this shape:
{{
  "skill_matches": [
    {{
      "skill": "<skill name>",
      "category": "<one of: blockchain, web3, defi, nft, dao, programming, other>",
      "relevance": <number 0-10>,
      "level": "<beginner | intermediate | expert>",
      "description": "<one sentence on the evidence>"
    }}
  ],
  "missing_skills": ["<required skill the candidate lacks>"],
  "strength_areas": ["<strength>"],
  "improvement_areas": ["<area to improve>"],
  "career_suggestions": ["<suggestion>"],
  "learning_resources": [
    {{
      "skill": "<skill name>",
      "resources": [
        {{"title": "<title>", "url": "<link>", "type": "<course | documentation | tutorial | book | other>"}}
      ]
    }}
  ]
}}

Output ONLY JSON. No prose.
"""


CONTEXT_PREAMBLE = "Reference knowledge retrieved for this request:"

SKILLS_CONTEXT_HEADER = "Background knowledge on the candidate's Web3 skills:"
RETRIEVED_CONTEXT_HEADER = "Related passages retrieved from the knowledge base:"


RESUME_PARSER_SYSTEM_PROMPT = (
    "You extract structured data from resumes of blockchain and Web3 engineers. "
    "Return only valid JSON. Use null for anything the resume does not state."
)

RESUME_SECTION_PROMPT = """
TASK: {section}

Read the resume below and extract {instructions}
Pay attention to Web3 and blockchain content such as smart contracts, DeFi protocols and crypto projects.

Resume:
---
{resume_text}
---

Return ONLY strict JSON with this shape:
{shape}
"""

RESUME_SECTIONS = {
    "personal_info": (
        "the person's name, email, phone number, location and personal links (GitHub, LinkedIn, website).",
        '{"name": "<name>", "email": "<email>", "phone": "<phone>", "location": "<city>", "links": ["<url>"]}',
    ),
    "work_experience": (
        "every work experience entry with its company, position, dates, description and technologies used.",
        '{"experiences": [{"company": "<company>", "position": "<title>", "start_date": "<date>", '
        '"end_date": "<date or present>", "description": "<what they did>", "technologies": ["<tech>"]}]}',
    ),
    "education": (
        "every education entry with its institution, degree, field of study and dates.",
        '{"education": [{"institution": "<school>", "degree": "<degree>", "field": "<major>", '
        '"start_date": "<date>", "end_date": "<date>"}]}',
    ),
    "skills": (
        "every technical skill, language, framework, protocol and tool the candidate lists or uses.",
        '{"skills": ["<skill>"]}',
    ),
    "projects": (
        "every project with its name, description, technologies, the candidate's role and a link.",
        '{"projects": [{"name": "<name>", "description": "<summary>", "technologies": ["<tech>"], '
        '"role": "<role>", "url": "<link>"}]}',
    ),
}
