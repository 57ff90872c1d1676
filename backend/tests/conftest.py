"""Shared fixtures: the bundled dictionary, a tiny injected one, a repository."""

import copy

import pytest

from services.skill_dictionary import SkillDictionary, get_default_dictionary
from services.skill_resolver import InMemorySkillRepository

MINI_DOCUMENT = {
    "version": "test-1",
    "locale": "fr",
    "segment_triggers": {
        "required": {"requis": 5, "obligatoire": 4},
        "optional": {"apprécié": 2, "souhaité": 3},
    },
    "context_rules": {
        "c++": {"positive": ["développeur", "logiciel"], "negative": ["réseau", "support"]},
    },
    "skills": [
        {"slug": "python", "display_name": "Python", "category": "Développement", "keywords": ["python"]},
        {"slug": "cpp", "display_name": "C++", "category": "Développement", "keywords": ["c++", "cpp"]},
        {"slug": "docker", "display_name": "Docker", "category": "DevOps", "keywords": ["docker"]},
        {
            "slug": "power-bi",
            "display_name": "Power BI",
            "category": "Business Intelligence",
            "keywords": ["power bi", "powerbi"],
        },
    ],
}


@pytest.fixture(scope="session")
def dictionary() -> SkillDictionary:
    return get_default_dictionary()


@pytest.fixture
def mini_document() -> dict:
    return copy.deepcopy(MINI_DOCUMENT)


@pytest.fixture
def mini_dictionary(mini_document) -> SkillDictionary:
    return SkillDictionary.from_document(mini_document, source="mini")


@pytest.fixture
def repository(dictionary) -> InMemorySkillRepository:
    return InMemorySkillRepository.from_dictionary(dictionary)


@pytest.fixture
def candidate() -> dict:
    return {
        "id": "cand-1",
        "preferred_contracts": ["CDI"],
        "mobility_km": 30,
        "experience_years": 3,
        "latitude": None,
        "longitude": None,
        "skills": [
            {"slug": "python", "proficiency_level": 4},
            {"slug": "aws", "proficiency_level": 2},
        ],
    }


@pytest.fixture
def offer() -> dict:
    return {
        "id": 101,
        "title": "Développeur Python",
        "description": "",
        "contract_type": "CDI",
        "experience_min": 2,
        "latitude": None,
        "longitude": None,
        "skills": [
            {"slug": "python", "display_name": "Python", "is_required": True, "weight": 5},
            {"slug": "docker", "display_name": "Docker", "is_required": True, "weight": 3},
            {"slug": "aws", "display_name": "AWS", "is_required": False, "weight": 2},
        ],
    }
