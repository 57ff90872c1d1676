"""Context predicate for ambiguous dictionary keywords.

One generic rule drives every ambiguous keyword: count the distinct positive
and negative indicators of the keyword's rule anywhere in the normalized
title+description, then accept iff ``pos > 0 and pos >= neg``. Missing text
is rejected; a keyword without a context rule, whether the dictionary knows
it or not, is accepted.
"""

import logging
from typing import NamedTuple

from models.schemas.skill_dictionary import ContextRule
from services.skill_dictionary import SkillDictionary, get_default_dictionary
from services.text_normalization import normalize_text

logger = logging.getLogger(__name__)


class ContextDecision(NamedTuple):
    accepted: bool
    positive: tuple[str, ...]  # indicators found
    negative: tuple[str, ...]

    @property
    def pos_count(self) -> int:
        return len(self.positive)

    @property
    def neg_count(self) -> int:
        return len(self.negative)


_REJECT = ContextDecision(False, (), ())


class ContextDisambiguator:
    def __init__(self, dictionary: SkillDictionary):
        self.dictionary = dictionary

    def evaluate(self, keyword: str, text: str | None, normalized: bool = False) -> ContextDecision:
        """Full decision with the indicators that were found.

        Keywords without a context rule are always accepted when text is
        present. Pass ``normalized=True`` when ``text`` already went through
        ``normalize_text``.
        """
        context = text if normalized else normalize_text(text)
        if not context or not keyword:
            return _REJECT
        rule = self.dictionary.rule_for(keyword)
        if rule is None:
            return ContextDecision(True, (), ())
        return self._apply(rule, context)

    def is_valid_in_context(self, keyword: str, text: str | None) -> bool:
        return self.evaluate(keyword, text).accepted

    def _apply(self, rule: ContextRule, context: str) -> ContextDecision:
        positive = tuple(i for i in rule.positive if self.dictionary.indicator(i).search(context))
        negative = tuple(i for i in rule.negative if self.dictionary.indicator(i).search(context))
        accepted = len(positive) > 0 and len(positive) >= len(negative)
        return ContextDecision(accepted, positive, negative)


def is_valid_programming_language_in_context(
    keyword: str,
    text: str | None,
    dictionary: SkillDictionary | None = None,
) -> bool:
    """Standalone predicate: is ``keyword`` a genuine skill mention in ``text``?"""
    disambiguator = ContextDisambiguator(dictionary if dictionary is not None else get_default_dictionary())
    decision = disambiguator.evaluate(keyword, text)
    logger.debug(
        "Context check %r: accepted=%s pos=%s neg=%s",
        keyword, decision.accepted, decision.positive, decision.negative,
    )
    return decision.accepted
