"""Dictionary-driven skill extraction from job-offer title and description.

1. The description is split into line/sentence segments, each classified
   REQUIRED or OPTIONAL from the dictionary's trigger phrases ("requis",
   "apprécié", ...). Trigger-less segments are REQUIRED unless a trigger
   header ("Apprécié :") above them is still in scope.
2. Every dictionary keyword is matched per segment on word boundaries;
   ambiguous keywords are checked against the whole title+description.
3. Title hits are required with weight 5; body hits take the weight of their
   segment. Mentions are deduplicated by slug, the required/heavier one wins.
"""

import logging
from typing import NamedTuple

from models.schemas.parsed_skill import ParsedSkill, SkillSource
from services.context_disambiguator import ContextDisambiguator
from services.skill_dictionary import KeywordEntry, SkillDictionary, get_default_dictionary
from services.text_normalization import normalize_text, split_segments

logger = logging.getLogger(__name__)

REQUIRED = "required"
OPTIONAL = "optional"

TITLE_WEIGHT = 5
DEFAULT_REQUIRED_WEIGHT = 4


class Segment(NamedTuple):
    text: str
    kind: str  # REQUIRED | OPTIONAL
    weight: int


def _segment_trigger(text: str, dictionary: SkillDictionary) -> tuple[str, int] | None:
    """Strongest trigger in a segment; optional triggers win over required ones."""
    optional = [w for pattern, w in dictionary.optional_triggers if pattern.search(text)]
    if optional:
        return OPTIONAL, max(optional)
    required = [w for pattern, w in dictionary.required_triggers if pattern.search(text)]
    if required:
        return REQUIRED, max(required)
    return None


def classify_segments(description: str | None, dictionary: SkillDictionary) -> list[Segment]:
    """Split a description into classified segments.

    A segment ending with ``:`` is a header: its trigger (or lack of one)
    applies to the following trigger-less segments until a blank line or the
    next header.
    """
    segments: list[Segment] = []
    carried: tuple[str, int] | None = None
    for text in split_segments(description):
        if not text:
            carried = None
            continue
        own = _segment_trigger(text, dictionary)
        if text.endswith(":"):
            carried = own
            kind, weight = own or (REQUIRED, DEFAULT_REQUIRED_WEIGHT)
        else:
            kind, weight = own or carried or (REQUIRED, DEFAULT_REQUIRED_WEIGHT)
        segments.append(Segment(text, kind, weight))
    return segments


class SkillExtractor:
    def __init__(self, dictionary: SkillDictionary):
        self.dictionary = dictionary
        self.disambiguator = ContextDisambiguator(dictionary)

    def extract(self, description: str | None, title: str | None = "") -> list[ParsedSkill]:
        norm_title = normalize_text(title)
        context = normalize_text(
            "\n".join(t for t in (title, description) if isinstance(t, str))
        )
        if not context:
            return []

        decisions: dict[str, bool] = {}
        found: dict[str, ParsedSkill] = {}

        if norm_title:
            for entry in self._hits(norm_title, context, decisions):
                self._keep(found, entry, True, TITLE_WEIGHT, "title")

        for segment in classify_segments(description, self.dictionary):
            is_required = segment.kind == REQUIRED
            source: SkillSource = "required-segment" if is_required else "optional-segment"
            for entry in self._hits(segment.text, context, decisions):
                self._keep(found, entry, is_required, segment.weight, source)

        return list(found.values())

    def _hits(self, text: str, context: str, decisions: dict[str, bool]) -> list[KeywordEntry]:
        """Accepted keyword hits in ``text``, in order of position.

        Entries are scanned longest keyword first, and a span already claimed by
        an accepted keyword cannot be reused by a shorter one.
        """
        taken: list[tuple[int, int]] = []
        hits: list[tuple[int, KeywordEntry]] = []
        for entry in self.dictionary.entries:
            for match in entry.pattern.finditer(text):
                start, end = match.span()
                if any(start < t_end and t_start < end for t_start, t_end in taken):
                    continue
                if not self._accepted(entry, context, decisions):
                    break
                taken.append((start, end))
                hits.append((start, entry))
        hits.sort(key=lambda h: h[0])
        return [entry for _, entry in hits]

    def _accepted(self, entry: KeywordEntry, context: str, decisions: dict[str, bool]) -> bool:
        if entry.descriptor.context_rule is None:
            return True
        if entry.keyword not in decisions:
            decision = self.disambiguator.evaluate(entry.keyword, context, normalized=True)
            decisions[entry.keyword] = decision.accepted
            if not decision.accepted:
                logger.debug(
                    "Rejected ambiguous keyword %r (pos=%s neg=%s)",
                    entry.keyword, decision.positive, decision.negative,
                )
        return decisions[entry.keyword]

    @staticmethod
    def _keep(
        found: dict[str, ParsedSkill],
        entry: KeywordEntry,
        is_required: bool,
        weight: int,
        source: SkillSource,
    ) -> None:
        descriptor = entry.descriptor
        current = found.get(descriptor.slug)
        if current is not None and (current.is_required, current.weight) >= (is_required, weight):
            return
        # Re-assigning an existing key keeps its first-occurrence position
        found[descriptor.slug] = ParsedSkill(
            slug=descriptor.slug,
            display_name=descriptor.display_name,
            category=descriptor.category,
            is_required=is_required,
            weight=weight,
            source=source,
            keyword=entry.keyword,
        )


def parse_skills_from_description(
    description: str | None,
    title: str | None = "",
    dictionary: SkillDictionary | None = None,
) -> list[ParsedSkill]:
    """Extract weighted skill mentions from an offer. Never raises on bad text."""
    extractor = SkillExtractor(dictionary if dictionary is not None else get_default_dictionary())
    skills = extractor.extract(description, title)
    logger.debug("Extracted %d skills from offer %r", len(skills), title)
    return skills
