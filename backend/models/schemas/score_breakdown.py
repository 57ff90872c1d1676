"""Structured scorer output: named weighted contributions and sub-results."""

from pydantic import BaseModel


class ScoreContribution(BaseModel):
    """One term of the composite score: ``value * weight``."""
    name: str  # "skills" | "distance" | "experience"
    value: float
    weight: float

    model_config = {"frozen": True}

    @property
    def weighted(self) -> float:
        return self.value * self.weight


class ScoreBreakdown(BaseModel):
    contributions: tuple[ScoreContribution, ...] = ()
    skills_achieved: float = 0.0
    skills_total: float = 0.0
    skills_percentage: float = 0.0
    distance_score: float = 100.0
    experience_score: float = 100.0
    experience_gap: float = 0.0
    raw_score: float = 0.0  # before rounding and clamping

    def contribution(self, name: str) -> ScoreContribution | None:
        for item in self.contributions:
            if item.name == name:
                return item
        return None
