from domain.services.skill_extractor import (
    SkillExtractor,
    categorize,
    contains_term,
    deduplicate_skills,
    extract_skill_candidates,
    infer_skill_level,
)
from domain.schemas import SkillCategory, SkillMatch


def _by_name(matches):
    return {m.skill: m for m in matches}


def test_exact_match_uses_catalog_relevance():
    matches = SkillExtractor().extract_skills(["solidity"])
    assert len(matches) == 1
    assert matches[0].skill == "Solidity"
    assert matches[0].category == SkillCategory.BLOCKCHAIN
    assert matches[0].relevance == 10


def test_alias_match_is_exact():
    matches = _by_name(SkillExtractor().extract_skills(["Golang", "智能合约"]))
    assert matches["Go"].relevance == 8
    assert matches["Smart Contracts"].relevance == 10


def test_partial_match_is_penalised():
    matches = SkillExtractor().extract_skills(["Solidity smart contracts"])
    assert matches[0].skill == "Solidity"
    assert matches[0].relevance == 8


def test_partial_penalty_never_drops_below_one():
    matches = SkillExtractor(partial_penalty=20).extract_skills(["advanced solidity"])
    assert matches[0].relevance == 1


def test_partial_match_is_plain_substring():
    matches = _by_name(SkillExtractor().extract_skills(["Rustlang", "Solidity0.8"]))
    assert matches["Rust"].relevance == 7
    assert matches["Solidity"].relevance == 8
    assert matches["Rust"].category == SkillCategory.BLOCKCHAIN


def test_token_bounded_matching_skips_terms_inside_words():
    bounded = SkillExtractor(token_bounded=True)
    assert "Rust" not in _by_name(bounded.extract_skills(["Rustlang"]))
    names = _by_name(bounded.extract_skills(["Google Cloud"]))
    assert "Go" not in names
    assert not contains_term("google", "go")
    assert contains_term("go developer", "go")


def test_duplicates_keep_highest_relevance():
    matches = SkillExtractor().extract_skills(["solidity developer", "Solidity"])
    assert [m.skill for m in matches].count("Solidity") == 1
    assert _by_name(matches)["Solidity"].relevance == 10


def test_results_sorted_by_relevance():
    matches = SkillExtractor().extract_skills(["Remix", "Solidity", "Hardhat"])
    relevances = [m.relevance for m in matches]
    assert relevances == sorted(relevances, reverse=True)


def test_extraction_is_idempotent():
    extractor = SkillExtractor()
    text = "Skills: Solidity, Hardhat, React, Uniswap AMM\nExpert in Solidity."
    assert extractor.extract_skills(text) == extractor.extract_skills(text)


def test_extract_from_raw_text_reads_skill_section():
    matches = _by_name(SkillExtractor().extract_skills("Jane Doe\nSkills: Solidity, Hardhat\n"))
    assert set(matches) == {"Solidity", "Hardhat"}


def test_unknown_candidates_give_nothing():
    assert SkillExtractor().extract_skills(["Cooking", "   "]) == []


def test_level_is_inferred_from_context():
    matches = SkillExtractor().extract_skills(["Solidity"], context="Expert Solidity engineer")
    assert matches[0].level == "expert"


def test_categorize_priority_order():
    assert categorize("Ethereum node operations") == SkillCategory.BLOCKCHAIN
    assert categorize("dApp front-ends") == SkillCategory.WEB3
    assert categorize("Uniswap v3") == SkillCategory.DEFI
    assert categorize("ERC721 minting") == SkillCategory.NFT
    assert categorize("DAO tooling") == SkillCategory.DAO
    assert categorize("Python") == SkillCategory.PROGRAMMING
    assert categorize("Solidity") == SkillCategory.PROGRAMMING
    assert categorize("Cooking") == SkillCategory.OTHER


def test_infer_skill_level():
    assert infer_skill_level("Rust", "Proficient in Rust") == "expert"
    assert infer_skill_level("Rust", "Familiar with Rust") == "intermediate"
    assert infer_skill_level("Rust", "basic Rust knowledge") == "beginner"
    assert infer_skill_level("Rust", "精通 Rust") == "expert"
    assert infer_skill_level("Rust", "Wrote Rust services") is None
    assert infer_skill_level("Rust", "Python only") is None


def test_level_window_limits_indicator_search():
    context = "expert " + "x" * 200 + " Rust"
    assert infer_skill_level("Rust", context) is None
    assert infer_skill_level("Rust", context, window=300) == "expert"


def test_deduplicate_skills():
    matches = deduplicate_skills([
        SkillMatch(skill="IPFS", relevance=6),
        SkillMatch(skill="ipfs", relevance=8),
        SkillMatch(skill="DEX", relevance=9),
    ])
    assert {(m.skill.lower(), m.relevance) for m in matches} == {("ipfs", 8), ("dex", 9)}


def test_candidates_from_skill_section():
    text = "John Smith\nSkills:\nSolidity, Rust\n• Hardhat\n\nExperience\nBuilt things"
    assert extract_skill_candidates(text) == ["Solidity", "Rust", "Hardhat"]


def test_candidates_from_inline_line():
    assert extract_skill_candidates("Technical Skills: Hardhat; IPFS") == ["Hardhat", "IPFS"]


def test_candidates_fall_back_to_catalog_scan():
    found = extract_skill_candidates("Built dapps with ethers and hardhat on IPFS")
    assert {"Ethers.js", "Hardhat", "IPFS"} <= set(found)
