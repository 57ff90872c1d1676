"""Tests for batch parsing coverage reports."""

import pytest

from services.offer_batch import parse_offers
from services.skill_extractor import SkillExtractor
from services.skill_resolver import InMemorySkillRepository


@pytest.fixture
def offers():
    return [
        {"id": 1, "title": "Développeur Python", "description": "Docker apprécié.", "source": "indeed"},
        {"id": 2, "title": "Poste d'accueil", "description": "Accueil et standard téléphonique."},
        {"id": 3, "title": "Dev", "skills": [{"slug": "python"}]},
        "garbage",
    ]


def test_counts(mini_dictionary, offers):
    report = parse_offers(offers, dictionary=mini_dictionary)
    assert report.dictionary_version == "test-1"
    assert report.total == 4
    assert report.processed == 2
    assert report.skipped == 1
    assert report.errors == 1
    assert report.with_skills == 1
    assert report.without_skills == 1
    assert report.skills_found == 2
    assert report.by_category == {"Développement": 1, "DevOps": 1}
    assert report.by_source == {"indeed": 1}
    assert report.average_skills_per_offer == 2.0
    assert report.success_rate == 50.0
    assert report.average_processing_ms >= 0


def test_failed_offers(mini_dictionary, offers):
    report = parse_offers(offers, dictionary=mini_dictionary)
    reasons = [(f.id, f.reason) for f in report.failed_offers]
    assert reasons == [(2, "no_skills_parsed"), (None, "error")]


def test_force_reparses_existing_skills(mini_dictionary, offers):
    report = parse_offers(offers, dictionary=mini_dictionary, force=True)
    assert report.skipped == 0
    assert report.processed == 3
    # "Dev" alone carries no known skill
    assert report.without_skills == 2


def test_unresolved_slugs_counted(mini_dictionary):
    full = InMemorySkillRepository.from_dictionary(mini_dictionary)
    repository = InMemorySkillRepository(r for r in full.records if r.slug != "docker")
    offers = [
        {"id": 1, "title": "Développeur Python", "description": "Docker apprécié."},
        {"id": 2, "title": "Ops", "description": "Docker requis."},
    ]
    report = parse_offers(offers, dictionary=mini_dictionary, repository=repository)
    assert report.unresolved_slugs == {"docker": 2}
    assert report.skills_found == 1
    failed = report.failed_offers[0]
    assert failed.reason == "no_skills_matched"
    assert failed.parsed_skills == ["Docker"]


def test_empty_batch(mini_dictionary):
    report = parse_offers([], dictionary=mini_dictionary)
    assert report.total == 0
    assert report.success_rate == 0.0
    assert report.average_processing_ms == 0.0


def test_skipped_offers_do_not_dilute_averages(mini_dictionary):
    offers = [
        {"id": 1, "title": "Dev", "skills": [{"slug": "python"}, {"slug": "docker"}]},
        {"id": 2, "title": "Ops", "skills": [{"slug": "docker"}]},
        {"id": 3, "title": "Ingénieur", "description": "Python requis."},
    ]
    report = parse_offers(offers, dictionary=mini_dictionary)
    assert report.skipped == 2
    assert report.with_skills == 1
    assert report.skills_found == 1
    assert report.average_skills_per_offer == 1.0
    assert report.success_rate == 100.0


def test_non_text_fields_do_not_abort_batch(mini_dictionary):
    offers = [
        {"id": 1, "title": 123, "description": "rien", "source": 42},
        {"id": {"bad": "id"}, "title": None, "description": None},
        {"id": 3, "title": "Développeur Python", "description": "Docker apprécié."},
    ]
    report = parse_offers(offers, dictionary=mini_dictionary)
    assert report.total == 3
    assert report.processed == 3
    assert report.errors == 0
    assert report.with_skills == 1
    first, second = report.failed_offers
    assert (first.id, first.title, first.source) == (1, "123", "42")
    assert second.id is None and second.title == ""


def test_extraction_failure_counted_as_error(mini_dictionary, monkeypatch):
    def explode(self, description, title=""):
        if "boom" in description:
            raise RuntimeError("boom")
        return original(self, description, title)

    original = SkillExtractor.extract
    monkeypatch.setattr(SkillExtractor, "extract", explode)
    offers = [
        {"id": 1, "title": "A", "description": "boom"},
        {"id": 2, "title": "Développeur Python", "description": ""},
    ]
    report = parse_offers(offers, dictionary=mini_dictionary)
    assert report.errors == 1
    assert report.with_skills == 1
    assert [(f.id, f.reason) for f in report.failed_offers] == [(1, "error")]
