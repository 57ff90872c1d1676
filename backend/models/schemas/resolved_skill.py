"""Resolver contracts: canonical skill records and resolution results."""

from pydantic import BaseModel, Field


class SkillRecord(BaseModel):
    """A skill as stored in the canonical skill repository."""
    id: int | str
    slug: str
    display_name: str
    category: str = ""


class ResolvedSkill(BaseModel):
    """A parsed skill bound to its repository record."""
    skill_id: int | str
    slug: str
    display_name: str
    category: str = ""
    is_required: bool
    weight: int = Field(ge=1, le=5)

    def key(self) -> tuple:
        return (self.skill_id, self.is_required, self.weight)


class ResolutionReport(BaseModel):
    """Outcome of one resolver run, kept for operator visibility."""
    resolved: list[ResolvedSkill] = []
    unresolved: list[str] = []  # slugs the repository does not know
    failed: list[str] = []  # slugs whose lookup kept erroring or timing out

    @property
    def unresolved_count(self) -> int:
        return len(self.unresolved) + len(self.failed)
