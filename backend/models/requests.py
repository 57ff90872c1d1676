from pydantic import BaseModel, Field, field_validator

from config import settings


class CandidateSkill(BaseModel):
    slug: str = Field(..., min_length=1)
    proficiency_level: int | str | None = None
    display_name: str | None = None


class OfferSkill(BaseModel):
    slug: str = Field(..., min_length=1)
    is_required: bool = True
    weight: int = Field(3, ge=1, le=5)
    display_name: str | None = None


class CandidateInput(BaseModel):
    id: int | str | None = None
    preferred_contracts: list[str] = []
    mobility_km: float = Field(default_factory=lambda: settings.default_mobility_km, ge=0, allow_inf_nan=False)
    experience_years: float = Field(0.0, ge=0, allow_inf_nan=False)
    latitude: float | None = Field(None, ge=-90, le=90)
    longitude: float | None = Field(None, ge=-180, le=180)
    skills: list[CandidateSkill] = []

    @field_validator("preferred_contracts", mode="before")
    @classmethod
    def _contracts_or_any(cls, value):
        # null means no preference, same as an empty list
        if value is None:
            return []
        if isinstance(value, (list, tuple, set)):
            return [c for c in value if c is not None]
        return value

    @field_validator("mobility_km", mode="before")
    @classmethod
    def _default_mobility(cls, value):
        return settings.default_mobility_km if value is None else value


class JobOfferInput(BaseModel):
    id: int | str | None = None
    title: str = ""
    description: str = ""
    contract_type: str | None = None
    experience_min: float | None = Field(None, ge=0, allow_inf_nan=False)
    latitude: float | None = Field(None, ge=-90, le=90)
    longitude: float | None = Field(None, ge=-180, le=180)
    skills: list[OfferSkill] = []
