"""Check that every dictionary slug exists in the skill catalogue and back.

A slug the catalogue lacks is silently dropped by the resolver, so this check
is meant to run after every dictionary or catalogue change.
"""

import logging
from collections.abc import Iterable

from rapidfuzz import fuzz, process

from models.schemas.resolved_skill import SkillRecord
from models.schemas.sync_report import Inconsistency, MissingSkill, SyncReport
from services.skill_dictionary import SkillDictionary

logger = logging.getLogger(__name__)

SUGGESTION_THRESHOLD = 80


def closest_slug(slug: str, candidates: Iterable[str]) -> tuple[str | None, float]:
    """Most similar slug among ``candidates`` (rapidfuzz ratio), or ``(None, 0)``."""
    match = process.extractOne(slug, list(candidates), scorer=fuzz.ratio, score_cutoff=SUGGESTION_THRESHOLD)
    if match is None:
        return None, 0.0
    return match[0], float(match[1])


def verify_dictionary_sync(dictionary: SkillDictionary, catalogue: Iterable[SkillRecord]) -> SyncReport:
    records = {r.slug: r for r in catalogue}
    report = SyncReport(
        dictionary_version=dictionary.version,
        dictionary_count=len(dictionary),
        catalogue_count=len(records),
    )

    catalogue_only = sorted(set(records) - dictionary.slugs)
    dictionary_only = sorted(dictionary.slugs - set(records))

    for slug in dictionary_only:
        descriptor = dictionary.get(slug)
        suggestion, similarity = closest_slug(slug, catalogue_only)
        report.missing_in_catalogue.append(MissingSkill(
            slug=slug,
            display_name=descriptor.display_name,
            category=descriptor.category,
            suggestion=suggestion,
            similarity=similarity,
        ))

    for slug in catalogue_only:
        record = records[slug]
        suggestion, similarity = closest_slug(slug, dictionary_only)
        report.missing_in_dictionary.append(MissingSkill(
            slug=slug,
            display_name=record.display_name,
            category=record.category,
            suggestion=suggestion,
            similarity=similarity,
        ))

    for descriptor in dictionary.skills:
        record = records.get(descriptor.slug)
        if record is None:
            continue
        if record.display_name != descriptor.display_name:
            report.inconsistencies.append(Inconsistency(
                slug=descriptor.slug, field="display_name",
                dictionary=descriptor.display_name, catalogue=record.display_name,
            ))
        if record.category and record.category != descriptor.category:
            report.inconsistencies.append(Inconsistency(
                slug=descriptor.slug, field="category",
                dictionary=descriptor.category, catalogue=record.category,
            ))

    if report.in_sync:
        logger.info("Dictionary %s and catalogue are in sync", dictionary.version)
    else:
        logger.warning(
            "Dictionary %s out of sync: %d missing in catalogue, %d missing in dictionary",
            dictionary.version, len(report.missing_in_catalogue), len(report.missing_in_dictionary),
        )
    return report
