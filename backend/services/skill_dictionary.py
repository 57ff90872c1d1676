"""Versioned keyword dictionary: keyword/alias -> skill descriptor.

The dictionary is an explicitly constructed, read-only object. Extraction and
disambiguation receive it as an argument; ``get_default_dictionary`` only
caches the bundled YAML file for convenience entry points (CLI, orchestrator).
"""

import logging
import os
import re
from functools import lru_cache
from pathlib import Path
from typing import Any, NamedTuple

import yaml
from pydantic import ValidationError

from config import settings
from models.schemas.skill_dictionary import ContextRule, DictionaryDocument, SkillDescriptor
from services.text_normalization import indicator_pattern, keyword_pattern, normalize_text

logger = logging.getLogger(__name__)

REQUIRED_TRIGGER_WEIGHTS = (4, 5)
OPTIONAL_TRIGGER_WEIGHTS = (2, 3)


class SkillDictionaryError(ValueError):
    """Raised when a dictionary document cannot be loaded or is inconsistent."""


class KeywordEntry(NamedTuple):
    keyword: str
    descriptor: SkillDescriptor
    pattern: re.Pattern


class SkillDictionary:
    """Immutable keyword table plus segment triggers and context rules."""

    def __init__(
        self,
        version: str,
        descriptors: list[SkillDescriptor],
        keyword_index: dict[str, SkillDescriptor],
        required_triggers: dict[str, int] | None = None,
        optional_triggers: dict[str, int] | None = None,
        locale: str = "fr",
        source: str | None = None,
    ):
        self._version = version
        self._locale = locale
        self._source = source
        self._by_slug = {d.slug: d for d in descriptors}
        self._by_keyword = dict(keyword_index)
        # Longest keywords first so overlapping hits resolve deterministically
        ordered = sorted(self._by_keyword, key=lambda k: (-len(k), k))
        self._entries = tuple(
            KeywordEntry(k, self._by_keyword[k], keyword_pattern(k)) for k in ordered
        )
        self._required_triggers = _compile_triggers(required_triggers or {})
        self._optional_triggers = _compile_triggers(optional_triggers or {})
        self._indicator_patterns: dict[str, re.Pattern] = {}

    # -- construction -------------------------------------------------------

    @classmethod
    def from_document(cls, data: Any, source: str | None = None) -> "SkillDictionary":
        """Validate a parsed YAML/JSON document and build the dictionary."""
        if not isinstance(data, dict):
            raise SkillDictionaryError(f"{source or 'dictionary'}: expected a mapping at top level")
        try:
            doc = DictionaryDocument.model_validate(data)
        except ValidationError as e:
            raise SkillDictionaryError(f"{source or 'dictionary'}: {e}") from e

        rules: dict[str, ContextRule] = {}
        for raw_keyword, rule in doc.context_rules.items():
            keyword = normalize_text(raw_keyword)
            rules[keyword] = ContextRule(
                positive=_normalized_unique(rule.positive),
                negative=_normalized_unique(rule.negative),
            )

        descriptors: list[SkillDescriptor] = []
        keyword_index: dict[str, SkillDescriptor] = {}
        for entry in doc.skills:
            if any(d.slug == entry.slug for d in descriptors):
                raise SkillDictionaryError(f"duplicate skill slug {entry.slug!r}")
            keywords = _normalized_unique(entry.keywords)
            if not keywords:
                raise SkillDictionaryError(f"skill {entry.slug!r} has no usable keyword")
            base = SkillDescriptor(
                slug=entry.slug,
                display_name=entry.display_name,
                category=entry.category,
                keywords=keywords,
            )
            descriptors.append(base)
            for keyword in keywords:
                owner = keyword_index.get(keyword)
                if owner is not None:
                    raise SkillDictionaryError(
                        f"keyword {keyword!r} maps to both {owner.slug!r} and {entry.slug!r}"
                    )
                rule = rules.get(keyword)
                keyword_index[keyword] = (
                    base.model_copy(update={"context_rule": rule}) if rule else base
                )

        unknown = sorted(set(rules) - set(keyword_index))
        if unknown:
            raise SkillDictionaryError(f"context rules for unknown keywords: {', '.join(unknown)}")

        required = _checked_triggers(doc.segment_triggers.required, REQUIRED_TRIGGER_WEIGHTS, "required")
        optional = _checked_triggers(doc.segment_triggers.optional, OPTIONAL_TRIGGER_WEIGHTS, "optional")

        return cls(
            version=doc.version,
            descriptors=descriptors,
            keyword_index=keyword_index,
            required_triggers=required,
            optional_triggers=optional,
            locale=doc.locale,
            source=source,
        )

    # -- accessors ----------------------------------------------------------

    @property
    def version(self) -> str:
        return self._version

    @property
    def locale(self) -> str:
        return self._locale

    @property
    def source(self) -> str | None:
        return self._source

    @property
    def skills(self) -> tuple[SkillDescriptor, ...]:
        return tuple(self._by_slug.values())

    @property
    def slugs(self) -> frozenset[str]:
        return frozenset(self._by_slug)

    @property
    def entries(self) -> tuple[KeywordEntry, ...]:
        """Keyword entries, longest keyword first."""
        return self._entries

    @property
    def required_triggers(self) -> tuple[tuple[re.Pattern, int], ...]:
        return self._required_triggers

    @property
    def optional_triggers(self) -> tuple[tuple[re.Pattern, int], ...]:
        return self._optional_triggers

    def get(self, slug: str) -> SkillDescriptor | None:
        return self._by_slug.get(slug)

    def lookup(self, keyword: str) -> SkillDescriptor | None:
        """Descriptor for a keyword/alias, carrying its context rule if any."""
        return self._by_keyword.get(normalize_text(keyword))

    def rule_for(self, keyword: str) -> ContextRule | None:
        descriptor = self.lookup(keyword)
        return descriptor.context_rule if descriptor else None

    def is_ambiguous(self, keyword: str) -> bool:
        return self.rule_for(keyword) is not None

    def indicator(self, indicator: str) -> re.Pattern:
        """Compiled pattern for a normalized indicator, memoized per dictionary."""
        pattern = self._indicator_patterns.get(indicator)
        if pattern is None:
            pattern = self._indicator_patterns[indicator] = indicator_pattern(indicator)
        return pattern

    def __len__(self) -> int:
        return len(self._by_slug)

    def __contains__(self, slug: object) -> bool:
        return slug in self._by_slug

    def __repr__(self) -> str:
        return (
            f"SkillDictionary(version={self._version!r}, skills={len(self._by_slug)}, "
            f"keywords={len(self._by_keyword)})"
        )


def _normalized_unique(values) -> tuple[str, ...]:
    seen: dict[str, None] = {}
    for value in values:
        norm = normalize_text(value)
        if norm:
            seen.setdefault(norm, None)
    return tuple(seen)


def _checked_triggers(raw: dict[str, int], allowed: tuple[int, int], kind: str) -> dict[str, int]:
    low, high = allowed
    triggers: dict[str, int] = {}
    for phrase, weight in raw.items():
        if not low <= weight <= high:
            raise SkillDictionaryError(
                f"{kind} trigger {phrase!r} has weight {weight}, expected {low}..{high}"
            )
        norm = normalize_text(phrase)
        if norm:
            triggers[norm] = max(weight, triggers.get(norm, low))
    return triggers


def _compile_triggers(triggers: dict[str, int]) -> tuple[tuple[re.Pattern, int], ...]:
    return tuple((indicator_pattern(t), w) for t, w in sorted(triggers.items()))


def load_dictionary(path: str | Path) -> SkillDictionary:
    """Load and validate a dictionary YAML (or JSON) file."""
    path = Path(path)
    try:
        with path.open(encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except OSError as e:
        raise SkillDictionaryError(f"cannot read dictionary {path}: {e}") from e
    except yaml.YAMLError as e:
        raise SkillDictionaryError(f"invalid YAML in {path}: {e}") from e

    dictionary = SkillDictionary.from_document(data, source=str(path))
    logger.info(
        "Loaded skill dictionary %s from %s (%d skills, %d keywords)",
        dictionary.version, path, len(dictionary), len(dictionary.entries),
    )
    return dictionary


@lru_cache(maxsize=4)
def _load_cached(path: str, mtime: float) -> SkillDictionary:
    return load_dictionary(path)


def get_default_dictionary(path: str | Path | None = None) -> SkillDictionary:
    """Dictionary from ``settings.skill_dictionary_path``, reloaded when the file changes."""
    path = str(path or settings.skill_dictionary_path)
    try:
        mtime = os.stat(path).st_mtime
    except OSError as e:
        raise SkillDictionaryError(f"cannot read dictionary {path}: {e}") from e
    return _load_cached(path, mtime)
