"""Parse a batch of offers and report skill-extraction coverage.

Useful to evaluate a dictionary change over a corpus: how many offers get no
skill at all, which categories dominate, which slugs the repository lacks.
"""

import logging
import time
from collections import Counter
from collections.abc import Iterable, Mapping
from typing import Any

from models.schemas.batch_report import BatchReport, FailedOffer
from services.skill_dictionary import SkillDictionary, get_default_dictionary
from services.skill_extractor import SkillExtractor
from services.skill_resolver import SkillRepository, SkillResolver

logger = logging.getLogger(__name__)


def _text(value: Any) -> str:
    """Feeds sometimes send numbers or nulls where text is expected."""
    return "" if value is None else str(value)


def parse_offers(
    offers: Iterable[Mapping[str, Any]],
    dictionary: SkillDictionary | None = None,
    repository: SkillRepository | None = None,
    force: bool = False,
) -> BatchReport:
    """Parse every offer; offers already carrying skills are skipped unless ``force``."""
    dictionary = dictionary if dictionary is not None else get_default_dictionary()
    extractor = SkillExtractor(dictionary)
    resolver = SkillResolver(repository) if repository is not None else None

    report = BatchReport(dictionary_version=dictionary.version)
    by_category: Counter = Counter()
    by_source: Counter = Counter()
    unresolved: Counter = Counter()
    timings: list[float] = []

    for offer in offers:
        report.total += 1
        if not isinstance(offer, Mapping):
            report.errors += 1
            report.failed_offers.append(FailedOffer(reason="error"))
            logger.warning("Offer #%d is not a mapping, skipped", report.total)
            continue

        offer_id = offer.get("id")
        if not isinstance(offer_id, (int, str)):
            offer_id = None
        title = _text(offer.get("title"))
        source = _text(offer.get("source")) or None
        if offer.get("skills") and not force:
            report.skipped += 1
            logger.info("Offer %r already has skills, skipped", title)
            continue

        try:
            started = time.perf_counter()
            parsed = extractor.extract(_text(offer.get("description")), title)
            kept = parsed
            if resolver is not None and parsed:
                resolution = resolver.resolve(parsed)
                unresolved.update(resolution.unresolved + resolution.failed)
                resolved_slugs = {s.slug for s in resolution.resolved}
                kept = [s for s in parsed if s.slug in resolved_slugs]
            elapsed = (time.perf_counter() - started) * 1000
        except Exception:
            logger.exception("Offer %r could not be parsed", title)
            report.errors += 1
            report.failed_offers.append(FailedOffer(id=offer_id, title=title, source=source, reason="error"))
            continue

        timings.append(elapsed)
        report.processed += 1

        if not kept:
            report.without_skills += 1
            report.failed_offers.append(FailedOffer(
                id=offer_id,
                title=title,
                source=source,
                reason="no_skills_matched" if parsed else "no_skills_parsed",
                parsed_skills=[s.display_name for s in parsed],
            ))
            logger.warning("No skill kept for offer %r", title)
            continue

        report.with_skills += 1
        report.skills_found += len(kept)
        by_category.update(s.category for s in kept)
        if source:
            by_source[source] += 1

    report.by_category = dict(by_category.most_common())
    report.by_source = dict(by_source.most_common())
    report.unresolved_slugs = dict(unresolved.most_common())
    report.average_processing_ms = sum(timings) / len(timings) if timings else 0.0
    logger.info(
        "Parsed %d offers: %d with skills, %d without, %d skipped",
        report.total, report.with_skills, report.without_skills, report.skipped,
    )
    return report
