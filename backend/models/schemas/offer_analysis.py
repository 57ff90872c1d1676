"""Orchestrator output: what was parsed and resolved for one raw offer."""

from typing import Any

from pydantic import BaseModel

from models.schemas.parsed_skill import ParsedSkill
from models.schemas.resolved_skill import ResolutionReport


class OfferAnalysis(BaseModel):
    parsed: list[ParsedSkill] = []
    resolution: ResolutionReport | None = None  # None when no repository was given
    offer_payload: dict[str, Any] = {}  # JobOfferInput-shaped, skills filled in
    dictionary_version: str = ""
