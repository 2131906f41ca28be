import re
from functools import lru_cache
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from domain.schemas import SkillCategory, SkillLevel, SkillMatch
from domain.skill_catalog import SKILL_CATALOG, CatalogSkill

LEVEL_WINDOW = 100

# checked strongest first
LEVEL_INDICATORS: Dict[str, Tuple[str, ...]] = {
    "expert": (
        "expert", "advanced", "proficient", "mastery", "specialist",
        "精通", "专家", "高级", "资深", "专精于", "深入理解",
    ),
    "intermediate": (
        "intermediate", "experienced", "competent", "skilled", "familiar",
        "熟练", "良好", "中级", "有经验", "掌握",
    ),
    "beginner": (
        "beginner", "basic", "novice", "limited", "fundamental",
        "基础", "入门", "了解", "初级", "初学",
    ),
}

# first match wins
CATEGORY_KEYWORDS: List[Tuple[SkillCategory, Tuple[str, ...]]] = [
    (SkillCategory.BLOCKCHAIN, ("ethereum", "bitcoin", "consensus", "mining", "node", "blockchain")),
    (SkillCategory.WEB3, ("web3", "web3.js", "ethers.js", "dapp")),
    (SkillCategory.DEFI, ("defi", "lending", "yield", "swap", "amm", "uniswap")),
    (SkillCategory.NFT, ("nft", "erc721", "erc-721", "erc1155", "erc-1155", "collectible")),
    (SkillCategory.DAO, ("dao", "governance", "voting")),
    (SkillCategory.PROGRAMMING, ("javascript", "typescript", "rust", "go", "solidity", "react", "python")),
]

SECTION_MARKERS = (
    "skills", "technical skills", "core competencies",
    "技能", "专业技能", "技术技能", "核心技能",
)
_INLINE_SECTION = re.compile(
    r"^\s*(?:technical skills|core competencies|skills|专业技能|技术技能|核心技能|技能)\s*[:：]\s*(.+)$",
    re.IGNORECASE,
)
_BULLETS = "•-*· \t"


@lru_cache(maxsize=1024)
def _term_pattern(term: str) -> "re.Pattern[str]":
    return re.compile(r"(?<![0-9a-z])" + re.escape(term) + r"(?![0-9a-z])")


def contains_term(haystack: str, term: str) -> bool:
    """Substring test that refuses to match inside a longer alphanumeric word."""
    if not term:
        return False
    return _term_pattern(term).search(haystack) is not None


def _terms(skill: CatalogSkill) -> List[str]:
    return [skill.name.lower(), *(a.lower() for a in skill.aliases)]


def categorize(skill_text: str) -> SkillCategory:
    lowered = skill_text.lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(k in lowered for k in keywords):
            return category
    return SkillCategory.OTHER


def infer_skill_level(skill: str, context: str, window: int = LEVEL_WINDOW) -> Optional[SkillLevel]:
    text = context.lower()
    idx = text.find(skill.lower())
    if idx == -1:
        return None
    snippet = text[max(0, idx - window): idx + len(skill) + window]
    for level in ("expert", "intermediate", "beginner"):
        if any(indicator in snippet for indicator in LEVEL_INDICATORS[level]):
            return level
    return None


def deduplicate_skills(matches: Iterable[SkillMatch]) -> List[SkillMatch]:
    best: Dict[str, SkillMatch] = {}
    for match in matches:
        key = match.skill.lower()
        if key not in best or best[key].relevance < match.relevance:
            best[key] = match
    return list(best.values())


def _split_skill_line(line: str) -> List[str]:
    if re.search(r"[,，]", line):
        parts = re.split(r"[,，]", line)
    elif re.search(r"[;；]", line):
        parts = re.split(r"[;；]", line)
    else:
        parts = [line]
    return [p.strip(_BULLETS) for p in parts if p.strip(_BULLETS)]


def extract_skill_candidates(text: str, catalog: Dict[SkillCategory, List[CatalogSkill]] = SKILL_CATALOG) -> List[str]:
    """Pull candidate skill strings out of raw resume text.

    Reads the lines under a "Skills" heading (or an inline "Skills: a, b"
    line). With no such section, falls back to scanning the text for catalog
    names and aliases of three characters or more.
    """
    out: List[str] = []
    in_section = False
    for line in text.splitlines():
        stripped = line.strip()
        inline = _INLINE_SECTION.match(stripped)
        if inline:
            out.extend(_split_skill_line(inline.group(1)))
            in_section = False
            continue
        lowered = stripped.lower()
        if any(m in lowered for m in SECTION_MARKERS) and (
                stripped.endswith((":", "：")) or len(stripped) < 20):
            in_section = True
            continue
        if in_section and (not stripped or stripped.endswith((":", "："))):
            in_section = False
        if in_section and stripped:
            out.extend(_split_skill_line(stripped))

    if not out:
        lowered_text = text.lower()
        for skills in catalog.values():
            for skill in skills:
                if any(len(t) >= 3 and contains_term(lowered_text, t) for t in _terms(skill)):
                    out.append(skill.name)
    return list(dict.fromkeys(out))


class SkillExtractor:
    """Maps free-form skill strings onto the catalog.

    Exact name/alias matches score the catalog relevance. Otherwise a
    substring match in either direction scores relevance minus
    `partial_penalty` (never below 1). With `token_bounded` the substring
    must not sit inside a longer alphanumeric word.
    """

    def __init__(
        self,
        catalog: Optional[Dict[SkillCategory, List[CatalogSkill]]] = None,
        partial_penalty: int = 2,
        level_window: int = LEVEL_WINDOW,
        token_bounded: bool = False,
    ):
        self.catalog = catalog if catalog is not None else SKILL_CATALOG
        self.partial_penalty = partial_penalty
        self.level_window = level_window
        self.token_bounded = token_bounded

    def _contains(self, haystack: str, term: str) -> bool:
        if self.token_bounded:
            return contains_term(haystack, term)
        return bool(term) and term in haystack

    def _match(self, skill: CatalogSkill, category: SkillCategory, relevance: int,
               candidate: str, context: str) -> SkillMatch:
        return SkillMatch(
            skill=skill.name,
            category=category,
            relevance=relevance,
            level=infer_skill_level(candidate, context, self.level_window),
            description=skill.description or None,
        )

    def extract_skills(self, candidates: Union[str, Sequence[str]], context: Optional[str] = None) -> List[SkillMatch]:
        if isinstance(candidates, str):
            if context is None:
                context = candidates
            candidates = extract_skill_candidates(candidates, self.catalog)
        else:
            candidates = list(candidates)
            if context is None:
                context = " ".join(candidates)

        matches: List[SkillMatch] = []
        for category, skills in self.catalog.items():
            for candidate in candidates:
                normalized = candidate.strip().lower()
                if not normalized:
                    continue

                exact = next((s for s in skills if normalized in _terms(s)), None)
                if exact is not None:
                    matches.append(self._match(exact, category, exact.relevance, candidate, context))
                    continue

                for skill in skills:
                    if any(self._contains(normalized, t) or self._contains(t, normalized) for t in _terms(skill)):
                        relevance = max(1, skill.relevance - self.partial_penalty)
                        matches.append(self._match(skill, category, relevance, candidate, context))
                        break

        return sorted(deduplicate_skills(matches), key=lambda m: m.relevance, reverse=True)
