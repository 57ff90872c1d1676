"""Batch parsing report: coverage statistics over many offers."""

from pydantic import BaseModel


class FailedOffer(BaseModel):
    id: int | str | None = None
    title: str = ""
    source: str | None = None
    reason: str  # "no_skills_parsed" | "no_skills_matched" | "error"
    parsed_skills: list[str] = []


class BatchReport(BaseModel):
    dictionary_version: str = ""
    total: int = 0
    processed: int = 0
    skipped: int = 0  # already had skills and were not re-parsed
    with_skills: int = 0  # parsed offers that kept at least one skill
    without_skills: int = 0  # parsed offers that kept none
    errors: int = 0
    skills_found: int = 0
    by_category: dict[str, int] = {}
    by_source: dict[str, int] = {}
    unresolved_slugs: dict[str, int] = {}
    failed_offers: list[FailedOffer] = []
    average_processing_ms: float = 0.0

    @property
    def average_skills_per_offer(self) -> float:
        return self.skills_found / self.with_skills if self.with_skills else 0.0

    @property
    def success_rate(self) -> float:
        """Share of parsed offers that ended up with at least one skill."""
        examined = self.with_skills + self.without_skills
        return self.with_skills / examined * 100 if examined else 0.0
