"""Extractor output: one weighted skill mention found in an offer."""

from typing import Literal

from pydantic import BaseModel, Field

SkillSource = Literal["title", "required-segment", "optional-segment"]


class ParsedSkill(BaseModel):
    slug: str
    display_name: str
    category: str
    is_required: bool
    weight: int = Field(ge=1, le=5)
    source: SkillSource
    keyword: str = ""  # alias that produced the hit
