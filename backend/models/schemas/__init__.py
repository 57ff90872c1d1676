"""Inter-stage Pydantic contracts for the matching engine."""

from models.schemas.skill_dictionary import ContextRule, DictionaryDocument, SkillDescriptor
from models.schemas.parsed_skill import ParsedSkill
from models.schemas.resolved_skill import ResolutionReport, ResolvedSkill, SkillRecord
from models.schemas.score_breakdown import ScoreBreakdown, ScoreContribution
from models.schemas.offer_analysis import OfferAnalysis
from models.schemas.batch_report import BatchReport, FailedOffer
from models.schemas.sync_report import Inconsistency, MissingSkill, SyncReport

__all__ = [
    "ContextRule",
    "DictionaryDocument",
    "SkillDescriptor",
    "ParsedSkill",
    "ResolutionReport",
    "ResolvedSkill",
    "SkillRecord",
    "ScoreBreakdown",
    "ScoreContribution",
    "OfferAnalysis",
    "BatchReport",
    "FailedOffer",
    "Inconsistency",
    "MissingSkill",
    "SyncReport",
]
