"""French, human-readable rationale for a match score.

Format: "Score 72 : vous correspondez sur 4 compétences (React, Node.js,
Docker...), mais il manque AWS et vous êtes éloigné de 80 km."
"""

import math

from config import settings
from models.responses import SkillOutcome


def _plural(count: float, word: str) -> str:
    return f"{word}s" if count > 1 else word


def format_number(value: float) -> str:
    """1 -> "1", 1.5 -> "1,5"."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.1f}".replace(".", ",")


def _matched_part(matched: list[SkillOutcome], limit: int) -> str:
    count = len(matched)
    label = f"vous correspondez sur {count} {_plural(count, 'compétence')}"
    if limit <= 0:
        return label
    names = ", ".join(s.skill for s in matched[:limit])
    if count > limit:
        names += "..."
    return f"{label} ({names})"


def _missing_part(missing_required: list[SkillOutcome], limit: int) -> str:
    if limit <= 0:
        count = len(missing_required)
        return f"il manque {count} {_plural(count, 'compétence')} {_plural(count, 'requise')}"
    names = " et ".join(s.skill for s in missing_required[:limit])
    more = len(missing_required) - limit
    if more > 0:
        return f"il manque {names} (et {more} {_plural(more, 'autre')})"
    return f"il manque {names}"


def build_explanation(
    score: int,
    matched: list[SkillOutcome],
    missing: list[SkillOutcome],
    distance_km: float | None = None,
    mobility_km: float | None = None,
    experience_gap: float = 0.0,
    max_matched: int | None = None,
    max_missing: int | None = None,
) -> str:
    if max_matched is None:
        max_matched = settings.explanation_max_matched
    if max_missing is None:
        max_missing = settings.explanation_max_missing

    positive: list[str] = []
    negative: list[str] = []

    if not matched and not missing:
        positive.append("cette offre n'a pas de compétences techniques définies, score basé sur l'expérience")
    elif matched:
        positive.append(_matched_part(matched, max_matched))
    else:
        negative.append("aucune compétence correspondante")

    missing_required = [s for s in missing if s.required]
    if missing_required:
        negative.append(_missing_part(missing_required, max_missing))
    optional_missing = len(missing) - len(missing_required)
    if optional_missing and not missing_required:
        negative.append(
            f"{optional_missing} {_plural(optional_missing, 'compétence')} "
            f"{_plural(optional_missing, 'appréciée')} non {_plural(optional_missing, 'couverte')}"
        )

    if distance_km is not None:
        rounded = round(distance_km)
        if mobility_km is not None and distance_km > mobility_km:
            negative.append(
                f"vous êtes éloigné de {rounded} km (mobilité : {format_number(mobility_km)} km)"
            )
        else:
            positive.append(f"l'offre est à {rounded} km")

    if experience_gap > 0 and math.isfinite(experience_gap):
        negative.append(
            f"{format_number(experience_gap)} {_plural(experience_gap, 'an')} d'expérience en moins que requis"
        )

    if positive and negative:
        body = f"{', '.join(positive)}, mais {' et '.join(negative)}"
    elif positive:
        body = ", ".join(positive)
    elif negative:
        body = ", ".join(negative)
    else:
        body = "profil général compatible avec l'offre"
    return f"Score {score} : {body}."


def contract_mismatch_explanation(contract_type: str, preferred: list[str]) -> str:
    return (
        f"Score 0 : type de contrat incompatible, {contract_type} non accepté "
        f"(contrats recherchés : {', '.join(preferred)})."
    )


def error_explanation() -> str:
    return "Score 0 : erreur lors du calcul de compatibilité, données du profil ou de l'offre invalides."
