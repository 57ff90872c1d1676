"""Tests for the French score explanation."""

from models.responses import SkillOutcome
from services.explanation import (
    build_explanation,
    contract_mismatch_explanation,
    error_explanation,
    format_number,
)


def _skills(names, required=True):
    return [SkillOutcome(skill=n, slug=n.lower(), required=required) for n in names]


def test_no_offer_skills():
    assert build_explanation(70, [], []) == (
        "Score 70 : cette offre n'a pas de compétences techniques définies, score basé sur l'expérience."
    )


def test_single_match_is_singular():
    text = build_explanation(100, _skills(["Python"]), [])
    assert text == "Score 100 : vous correspondez sur 1 compétence (Python)."


def test_matched_names_truncated():
    text = build_explanation(90, _skills(["A", "B", "C", "D", "E"]), [], max_matched=3)
    assert "vous correspondez sur 5 compétences (A, B, C...)" in text


def test_missing_required_truncated():
    text = build_explanation(
        40, _skills(["Python"]), _skills(["D", "E", "F", "G"]), max_missing=2
    )
    assert text == "Score 40 : vous correspondez sur 1 compétence (Python), mais il manque D et E (et 2 autres)."


def test_one_more_missing_is_singular():
    text = build_explanation(40, _skills(["Python"]), _skills(["D", "E", "F"]), max_missing=2)
    assert "(et 1 autre)" in text


def test_only_optional_missing():
    text = build_explanation(95, _skills(["Python"]), _skills(["AWS"], required=False))
    assert text == "Score 95 : vous correspondez sur 1 compétence (Python), mais 1 compétence appréciée non couverte."


def test_nothing_matched():
    text = build_explanation(30, [], _skills(["Java"]))
    assert text == "Score 30 : aucune compétence correspondante, il manque Java."


def test_distance_beyond_radius():
    text = build_explanation(75, _skills(["Python"]), [], distance_km=391.6, mobility_km=10)
    assert text == (
        "Score 75 : vous correspondez sur 1 compétence (Python), "
        "mais vous êtes éloigné de 392 km (mobilité : 10 km)."
    )


def test_distance_within_radius():
    text = build_explanation(100, _skills(["Python"]), [], distance_km=12.2, mobility_km=30)
    assert text == "Score 100 : vous correspondez sur 1 compétence (Python), l'offre est à 12 km."


def test_experience_gap_and_joined_negatives():
    text = build_explanation(
        50, _skills(["Python"]), _skills(["Docker"]), distance_km=100, mobility_km=50, experience_gap=1
    )
    assert text.endswith(
        "mais il manque Docker et vous êtes éloigné de 100 km (mobilité : 50 km) "
        "et 1 an d'expérience en moins que requis."
    )


def test_format_number():
    assert format_number(2.0) == "2"
    assert format_number(1.5) == "1,5"


def test_fixed_messages():
    assert "incompatible" in contract_mismatch_explanation("STAGE", ["CDI", "CDD"])
    assert "CDI, CDD" in contract_mismatch_explanation("STAGE", ["CDI", "CDD"])
    assert error_explanation().startswith("Score 0 :")


def test_zero_limits_are_respected():
    text = build_explanation(
        40, _skills(["Python", "SQL"]), _skills(["D", "E"]), max_matched=0, max_missing=0
    )
    assert text == "Score 40 : vous correspondez sur 2 compétences, mais il manque 2 compétences requises."


def test_non_finite_gap_is_not_printed():
    text = build_explanation(20, _skills(["Python"]), [], experience_gap=float("inf"))
    assert "inf" not in text
    assert text == "Score 20 : vous correspondez sur 1 compétence (Python)."
