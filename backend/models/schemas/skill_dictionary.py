"""Keyword dictionary contracts: skill descriptors and context rules."""

from pydantic import BaseModel, Field


class ContextRule(BaseModel):
    """Indicator sets deciding whether an ambiguous keyword hit is genuine.

    Indicators are stored normalized (lowercase, no accents).
    """
    positive: tuple[str, ...] = ()
    negative: tuple[str, ...] = ()

    model_config = {"frozen": True}


class SkillDescriptor(BaseModel):
    """Canonical description of one skill, shared by all of its aliases."""
    slug: str
    display_name: str
    category: str
    keywords: tuple[str, ...] = ()
    context_rule: ContextRule | None = None

    model_config = {"frozen": True}


class SkillEntry(BaseModel):
    """Raw skill entry as written in the dictionary document."""
    slug: str = Field(min_length=1)
    display_name: str = Field(min_length=1)
    category: str = "Autre"
    keywords: list[str] = Field(min_length=1)


class SegmentTriggers(BaseModel):
    required: dict[str, int] = {}
    optional: dict[str, int] = {}


class DictionaryDocument(BaseModel):
    """Top-level shape of ``skill_dictionary.yaml``."""
    version: str
    locale: str = "fr"
    segment_triggers: SegmentTriggers = SegmentTriggers()
    indicators: dict[str, list[str]] = {}  # anchor holders, not read directly
    context_rules: dict[str, ContextRule] = {}
    skills: list[SkillEntry] = []
