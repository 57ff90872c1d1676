"""Offer-text pipeline: raw offer in, match result out.

Flow:
    raw offer (title + description + metadata)
      ├─ SkillExtractor.extract()          → ParsedSkill[]
      ├─ SkillResolver.resolve()           → ResolvedSkill[] (optional, needs a repository)
      ├─ offer payload with those skills   → JobOfferInput shape
      └─ calculate_matching_score()        → MatchResult
"""

import logging
from collections.abc import Mapping
from typing import Any

from models.responses import MatchResult
from models.schemas.offer_analysis import OfferAnalysis
from services.matching_scorer import calculate_matching_score
from services.skill_dictionary import SkillDictionary, get_default_dictionary
from services.skill_extractor import SkillExtractor
from services.skill_resolver import SkillRepository, SkillResolver

logger = logging.getLogger(__name__)

_OFFER_FIELDS = ("id", "title", "description", "contract_type", "experience_min", "latitude", "longitude")


def analyze_offer(
    raw_offer: Mapping[str, Any],
    dictionary: SkillDictionary | None = None,
    repository: SkillRepository | None = None,
    resolver: SkillResolver | None = None,
) -> OfferAnalysis:
    """Parse (and optionally resolve) an offer's skills from its text."""
    dictionary = dictionary if dictionary is not None else get_default_dictionary()
    title = raw_offer.get("title") or ""
    description = raw_offer.get("description") or ""

    parsed = SkillExtractor(dictionary).extract(description, title)

    resolution = None
    if resolver is not None or repository is not None:
        resolution = (resolver or SkillResolver(repository)).resolve(parsed)

    skills = [
        {"slug": s.slug, "is_required": s.is_required, "weight": s.weight, "display_name": s.display_name}
        for s in (resolution.resolved if resolution else parsed)
    ]

    payload = {k: raw_offer[k] for k in _OFFER_FIELDS if k in raw_offer}
    payload["skills"] = skills
    logger.debug("Offer %r: %d parsed, %d kept", title, len(parsed), len(skills))
    return OfferAnalysis(
        parsed=parsed,
        resolution=resolution,
        offer_payload=payload,
        dictionary_version=dictionary.version,
    )


def score_offer_text(
    candidate: Any,
    raw_offer: Any,
    dictionary: SkillDictionary | None = None,
    repository: SkillRepository | None = None,
) -> MatchResult:
    """Extract the offer's skills from its text, then score the candidate."""
    if not isinstance(raw_offer, Mapping):
        return calculate_matching_score(candidate, raw_offer)
    analysis = analyze_offer(raw_offer, dictionary=dictionary, repository=repository)
    return calculate_matching_score(candidate, analysis.offer_payload)
