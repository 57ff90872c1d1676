"""Candidate/offer compatibility score.

Stages, in order:
1. Hard filter on contract type (short-circuits to 0).
2. Distance score: 100 inside the mobility radius, then -2 points per km.
3. Skill overlap: required skills weigh ``weight * 20``, optional ``weight * 10``.
4. Experience score: -15 points per missing year, floored at 20.
5. Composite ``0.6 * skills + 0.25 * distance + 0.15 * experience``, rounded
   then clamped to [0, 100].
6. French explanation plus structured matched/missing lists and breakdown.

``calculate_matching_score`` never raises: invalid input produces a zero score
with ``error`` set, distinguishable from a contract-type rejection.
"""

import hashlib
import json
import logging
from collections.abc import Mapping
from typing import Any, NamedTuple

from pydantic import BaseModel, ValidationError

from models.requests import CandidateInput, CandidateSkill, JobOfferInput, OfferSkill
from models.responses import MatchResult, SkillOutcome
from models.schemas.score_breakdown import ScoreBreakdown, ScoreContribution
from services.explanation import build_explanation, contract_mismatch_explanation, error_explanation
from services.geo import distance_between

logger = logging.getLogger(__name__)

SKILLS_WEIGHT = 0.6
DISTANCE_WEIGHT = 0.25
EXPERIENCE_WEIGHT = 0.15

REQUIRED_SKILL_MULTIPLIER = 20
OPTIONAL_SKILL_MULTIPLIER = 10
NEUTRAL_SKILLS_PERCENTAGE = 50.0

DISTANCE_DECAY_PER_KM = 2.0
EXPERIENCE_PENALTY_PER_YEAR = 15.0
EXPERIENCE_FLOOR = 20.0


class SkillOverlap(NamedTuple):
    achieved: float
    total: float
    percentage: float
    matched: list[SkillOutcome]
    missing: list[SkillOutcome]


# ---------------------------------------------------------------------------
# Stage functions
# ---------------------------------------------------------------------------

def _clean_contracts(contracts: list[str]) -> list[str]:
    return [c.strip() for c in contracts if c and c.strip()]


def contract_compatible(candidate: CandidateInput, offer: JobOfferInput) -> bool:
    """An empty preference list accepts any contract; comparison ignores case."""
    wanted = offer.contract_type.strip() if offer.contract_type else ""
    preferred = _clean_contracts(candidate.preferred_contracts)
    if not wanted or not preferred:
        return True
    return wanted.casefold() in {c.casefold() for c in preferred}


def distance_score(distance_km: float | None, mobility_km: float) -> float:
    if distance_km is None or distance_km <= mobility_km:
        return 100.0
    return max(0.0, 100.0 - (distance_km - mobility_km) * DISTANCE_DECAY_PER_KM)


def _merged_offer_skills(skills: list[OfferSkill]) -> list[OfferSkill]:
    """One entry per slug; a duplicate keeps its required/heavier version."""
    merged: dict[str, OfferSkill] = {}
    for skill in skills:
        current = merged.get(skill.slug)
        if current is None or (skill.is_required, skill.weight) > (current.is_required, current.weight):
            merged[skill.slug] = skill
    return list(merged.values())


def _find_candidate_skill(offer_skill: OfferSkill, candidate_skills: list[CandidateSkill]) -> CandidateSkill | None:
    slug = offer_skill.slug.casefold()
    name = offer_skill.display_name.casefold() if offer_skill.display_name else None
    for skill in candidate_skills:
        if skill.slug.casefold() == slug:
            return skill
        if name and skill.display_name and skill.display_name.casefold() == name:
            return skill
    return None


def skill_overlap(candidate_skills: list[CandidateSkill], offer_skills: list[OfferSkill]) -> SkillOverlap:
    achieved = 0.0
    total = 0.0
    matched: list[SkillOutcome] = []
    missing: list[SkillOutcome] = []

    for skill in _merged_offer_skills(offer_skills):
        multiplier = REQUIRED_SKILL_MULTIPLIER if skill.is_required else OPTIONAL_SKILL_MULTIPLIER
        points = skill.weight * multiplier
        total += points
        label = skill.display_name or skill.slug
        owned = _find_candidate_skill(skill, candidate_skills)
        if owned is not None:
            achieved += points
            matched.append(SkillOutcome(
                skill=label, slug=skill.slug, required=skill.is_required, level=owned.proficiency_level,
            ))
        else:
            missing.append(SkillOutcome(skill=label, slug=skill.slug, required=skill.is_required))

    percentage = achieved / total * 100 if total > 0 else NEUTRAL_SKILLS_PERCENTAGE
    return SkillOverlap(achieved, total, percentage, matched, missing)


def experience_score(candidate_years: float, required_years: float | None) -> tuple[float, float]:
    """Return ``(score, gap)``; no requirement or no gap scores 100."""
    if not required_years or candidate_years >= required_years:
        return 100.0, 0.0
    gap = required_years - candidate_years
    return max(EXPERIENCE_FLOOR, 100.0 - gap * EXPERIENCE_PENALTY_PER_YEAR), gap


def composite_score(contributions: tuple[ScoreContribution, ...]) -> tuple[float, int]:
    """Return ``(raw, score)``: the weighted sum, then rounded and clamped."""
    raw = sum(c.weighted for c in contributions)
    return raw, max(0, min(100, round(raw)))


def compute_inputs_hash(candidate: CandidateInput, offer: JobOfferInput) -> str:
    """MD5 of a canonical JSON rendering; skills and contracts are order-insensitive."""
    cand = candidate.model_dump(mode="json")
    cand["skills"] = sorted(cand["skills"], key=lambda s: s["slug"])
    cand["preferred_contracts"] = sorted(cand["preferred_contracts"])
    off = offer.model_dump(mode="json")
    off["skills"] = sorted(off["skills"], key=lambda s: s["slug"])
    canonical = json.dumps(
        {"candidate": cand, "offer": off}, sort_keys=True, separators=(",", ":"), ensure_ascii=False
    )
    return hashlib.md5(canonical.encode("utf-8")).hexdigest()


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def _coerce(model: type[BaseModel], value: Any, what: str) -> Any:
    if isinstance(value, model):
        return value
    if value is None:
        raise TypeError(f"{what} is missing")
    if isinstance(value, BaseModel):
        value = value.model_dump()
    if not isinstance(value, Mapping):
        raise TypeError(f"{what} must be a mapping, got {type(value).__name__}")
    return model.model_validate(value)


def _error_result(message: str) -> MatchResult:
    return MatchResult(score=0, explanation=error_explanation(), error=message)


def _score(candidate: CandidateInput, offer: JobOfferInput) -> MatchResult:
    inputs_hash = compute_inputs_hash(candidate, offer)

    # Stage 1: hard filter
    if not contract_compatible(candidate, offer):
        return MatchResult(
            score=0,
            explanation=contract_mismatch_explanation(
                offer.contract_type.strip(), _clean_contracts(candidate.preferred_contracts)
            ),
            matched_skills=[],
            missing_skills=[
                SkillOutcome(skill=s.display_name or s.slug, slug=s.slug, required=s.is_required)
                for s in _merged_offer_skills(offer.skills)
            ],
            inputs_hash=inputs_hash,
        )

    # Stage 2: distance
    distance_km = distance_between(candidate.latitude, candidate.longitude, offer.latitude, offer.longitude)
    dist_score = distance_score(distance_km, candidate.mobility_km)

    # Stage 3: skills
    overlap = skill_overlap(candidate.skills, offer.skills)

    # Stage 4: experience
    exp_score, gap = experience_score(candidate.experience_years, offer.experience_min)

    # Stage 5: composite
    contributions = (
        ScoreContribution(name="skills", value=overlap.percentage, weight=SKILLS_WEIGHT),
        ScoreContribution(name="distance", value=dist_score, weight=DISTANCE_WEIGHT),
        ScoreContribution(name="experience", value=exp_score, weight=EXPERIENCE_WEIGHT),
    )
    raw, score = composite_score(contributions)

    # Stage 6: explanation
    explanation = build_explanation(
        score,
        overlap.matched,
        overlap.missing,
        distance_km=distance_km,
        mobility_km=candidate.mobility_km,
        experience_gap=gap,
    )
    return MatchResult(
        score=score,
        explanation=explanation,
        matched_skills=overlap.matched,
        missing_skills=overlap.missing,
        distance_km=round(distance_km, 1) if distance_km is not None else None,
        inputs_hash=inputs_hash,
        breakdown=ScoreBreakdown(
            contributions=contributions,
            skills_achieved=overlap.achieved,
            skills_total=overlap.total,
            skills_percentage=overlap.percentage,
            distance_score=dist_score,
            experience_score=exp_score,
            experience_gap=gap,
            raw_score=raw,
        ),
    )


def calculate_matching_score(candidate: Any, offer: Any) -> MatchResult:
    """Score a candidate against an offer. Always returns a ``MatchResult``."""
    try:
        cand = _coerce(CandidateInput, candidate, "candidate")
        off = _coerce(JobOfferInput, offer, "offer")
    except (ValidationError, TypeError) as e:
        logger.warning("Invalid scoring input: %s", e)
        return _error_result(str(e))

    try:
        return _score(cand, off)
    except Exception as e:
        logger.exception("Unexpected failure while scoring offer %r", off.id)
        return _error_result(f"{type(e).__name__}: {e}")
