"""Dictionary vs. skill catalogue comparison."""

from pydantic import BaseModel


class MissingSkill(BaseModel):
    slug: str
    display_name: str
    category: str = ""
    suggestion: str | None = None  # closest slug on the other side, if any
    similarity: float = 0.0


class Inconsistency(BaseModel):
    slug: str
    field: str  # "display_name" | "category"
    dictionary: str
    catalogue: str


class SyncReport(BaseModel):
    dictionary_version: str = ""
    dictionary_count: int = 0
    catalogue_count: int = 0
    missing_in_catalogue: list[MissingSkill] = []
    missing_in_dictionary: list[MissingSkill] = []
    inconsistencies: list[Inconsistency] = []

    @property
    def in_sync(self) -> bool:
        return not (self.missing_in_catalogue or self.missing_in_dictionary)
