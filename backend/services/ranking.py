"""Fan the scorer out over many offers (or candidates) and rank the results."""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any

from config import settings
from models.responses import MatchResult, RankedMatch
from services.matching_scorer import calculate_matching_score

logger = logging.getLogger(__name__)


def _ref(item: Any) -> Any:
    if isinstance(item, dict):
        return item.get("id")
    return getattr(item, "id", None)


def _rank(pairs: list[tuple[Any, Any]], refs: list[Any], max_workers: int | None) -> list[RankedMatch]:
    results: list[MatchResult | None] = [None] * len(pairs)
    workers = max(1, min(max_workers or settings.ranking_max_workers, len(pairs) or 1))

    with ThreadPoolExecutor(max_workers=workers) as ex:
        future_to_index = {
            ex.submit(calculate_matching_score, candidate, offer): i
            for i, (candidate, offer) in enumerate(pairs)
        }
        for future in as_completed(future_to_index):
            results[future_to_index[future]] = future.result()

    # Stable sort: equal scores keep input order
    order = sorted(range(len(pairs)), key=lambda i: -results[i].score)
    ranked = [
        RankedMatch(rank=rank, index=i, ref=refs[i], result=results[i])
        for rank, i in enumerate(order, start=1)
    ]
    errors = sum(1 for r in results if r.error)
    if errors:
        logger.warning("%d of %d pairs could not be scored", errors, len(pairs))
    return ranked


def rank_offers_for_candidate(candidate: Any, offers: list[Any], max_workers: int | None = None) -> list[RankedMatch]:
    """Score one candidate against every offer, best score first."""
    offers = list(offers or [])
    return _rank([(candidate, o) for o in offers], [_ref(o) for o in offers], max_workers)


def rank_candidates_for_offer(offer: Any, candidates: list[Any], max_workers: int | None = None) -> list[RankedMatch]:
    """Score every candidate against one offer, best score first."""
    candidates = list(candidates or [])
    return _rank([(c, offer) for c in candidates], [_ref(c) for c in candidates], max_workers)
