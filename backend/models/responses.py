from pydantic import BaseModel, Field

from models.schemas.score_breakdown import ScoreBreakdown

_CAMEL = {"populate_by_name": True}


class SkillOutcome(BaseModel):
    skill: str  # display name
    slug: str
    required: bool
    level: int | str | None = None  # candidate proficiency, matched skills only


class MatchResult(BaseModel):
    """Scorer output. Dump with ``by_alias=True`` for the camelCase contract."""
    score: int = Field(0, ge=0, le=100)
    explanation: str = ""
    matched_skills: list[SkillOutcome] = Field([], alias="matchedSkills")
    missing_skills: list[SkillOutcome] = Field([], alias="missingSkills")
    distance_km: float | None = Field(None, alias="distanceKm")
    inputs_hash: str | None = Field(None, alias="inputsHash")
    error: str | None = None
    breakdown: ScoreBreakdown | None = None

    model_config = _CAMEL

    def to_payload(self, include_breakdown: bool = False) -> dict:
        """camelCase dict; ``distanceKm`` stays even when null, ``error`` only when set."""
        exclude = set() if include_breakdown else {"breakdown"}
        payload = self.model_dump(by_alias=True, exclude=exclude)
        if payload.get("error") is None:
            payload.pop("error", None)
        return payload


class RankedMatch(BaseModel):
    """One entry of a ranking: the scored counterpart and its result."""
    rank: int
    index: int  # position in the input list
    ref: int | str | None = None  # offer or candidate id, when provided
    result: MatchResult
