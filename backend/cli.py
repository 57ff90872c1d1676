"""Command-line entry point for the matching engine.

    offer-match parse --title "Développeur Java" --description-file offer.txt
    offer-match score --candidate candidate.yaml --offer offer.yaml [--from-text]
    offer-match rank --candidate candidate.yaml --offers offers.yaml
    offer-match batch-parse --offers offers.yaml [--catalogue skills.yaml] [--force]
    offer-match verify-dictionary --catalogue skills.yaml

Input files are YAML or JSON. Results are printed as JSON on stdout.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

import yaml

from config import settings
from services.dictionary_sync import verify_dictionary_sync
from services.matching_scorer import calculate_matching_score
from services.offer_batch import parse_offers
from services.orchestrator import analyze_offer, score_offer_text
from services.ranking import rank_offers_for_candidate
from services.skill_dictionary import SkillDictionary, get_default_dictionary, load_dictionary
from services.skill_resolver import InMemorySkillRepository

logger = logging.getLogger(__name__)


def _read_data(path: str) -> Any:
    """YAML is a superset of JSON, so one loader covers both."""
    with open(path, encoding="utf-8") as fh:
        return yaml.safe_load(fh)


def _read_list(path: str, key: str) -> list:
    data = _read_data(path)
    if isinstance(data, dict):
        data = data.get(key, [])
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a list (or a mapping with a {key!r} list)")
    return data


def _dump(payload: Any) -> None:
    json.dump(payload, sys.stdout, ensure_ascii=False, indent=2, default=str)
    sys.stdout.write("\n")


def _dictionary(args: argparse.Namespace) -> SkillDictionary:
    if args.dictionary:
        return load_dictionary(args.dictionary)
    return get_default_dictionary()


# ---------------------------------------------------------------------------
# Subcommands
# ---------------------------------------------------------------------------

def cmd_parse(args: argparse.Namespace) -> int:
    description = args.description or ""
    if args.description_file:
        description = Path(args.description_file).read_text(encoding="utf-8")
    dictionary = _dictionary(args)
    offer = {"title": args.title or "", "description": description}
    repository = InMemorySkillRepository.load_catalogue(args.catalogue) if args.catalogue else None
    analysis = analyze_offer(offer, dictionary=dictionary, repository=repository)
    _dump(analysis.model_dump(mode="json", exclude={"offer_payload"}))
    return 0


def cmd_score(args: argparse.Namespace) -> int:
    candidate = _read_data(args.candidate)
    offer = _read_data(args.offer)
    if args.from_text:
        result = score_offer_text(candidate, offer, dictionary=_dictionary(args))
    else:
        result = calculate_matching_score(candidate, offer)
    _dump(result.to_payload(include_breakdown=args.breakdown))
    return 1 if result.error else 0


def cmd_rank(args: argparse.Namespace) -> int:
    candidate = _read_data(args.candidate)
    offers = _read_list(args.offers, "offers")
    ranked = rank_offers_for_candidate(candidate, offers, max_workers=args.workers)
    top = ranked[: args.top] if args.top else ranked
    _dump([
        {"rank": r.rank, "index": r.index, "ref": r.ref, **r.result.to_payload()}
        for r in top
    ])
    return 0


def cmd_batch_parse(args: argparse.Namespace) -> int:
    offers = _read_list(args.offers, "offers")
    repository = InMemorySkillRepository.load_catalogue(args.catalogue) if args.catalogue else None
    report = parse_offers(offers, dictionary=_dictionary(args), repository=repository, force=args.force)
    payload = report.model_dump(mode="json")
    payload["average_skills_per_offer"] = round(report.average_skills_per_offer, 2)
    payload["success_rate"] = round(report.success_rate, 1)
    _dump(payload)
    return 0


def cmd_verify_dictionary(args: argparse.Namespace) -> int:
    dictionary = _dictionary(args)
    repository = InMemorySkillRepository.load_catalogue(args.catalogue)
    report = verify_dictionary_sync(dictionary, repository.records)
    payload = report.model_dump(mode="json")
    payload["in_sync"] = report.in_sync
    _dump(payload)
    return 0 if report.in_sync else 1


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="offer-match", description="Candidate/offer matching engine")
    parser.add_argument("--dictionary", help="Skill dictionary YAML (defaults to the bundled one)")
    parser.add_argument("--log-level", default=None, help=f"Logging level (default: {settings.log_level})")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("parse", help="Extract skills from an offer text")
    p.add_argument("--title", default="")
    group = p.add_mutually_exclusive_group()
    group.add_argument("--description")
    group.add_argument("--description-file")
    p.add_argument("--catalogue", help="Skill catalogue (YAML/JSON) to resolve slugs against")
    p.set_defaults(func=cmd_parse)

    p = sub.add_parser("score", help="Score one candidate against one offer")
    p.add_argument("--candidate", required=True)
    p.add_argument("--offer", required=True)
    p.add_argument("--from-text", action="store_true", help="Extract offer skills from its title/description")
    p.add_argument("--breakdown", action="store_true", help="Include the structured score breakdown")
    p.set_defaults(func=cmd_score)

    p = sub.add_parser("rank", help="Rank offers for one candidate")
    p.add_argument("--candidate", required=True)
    p.add_argument("--offers", required=True)
    p.add_argument("--top", type=int, default=0, help="Only print the N best offers")
    p.add_argument("--workers", type=int, default=None)
    p.set_defaults(func=cmd_rank)

    p = sub.add_parser("batch-parse", help="Parse many offers and report coverage")
    p.add_argument("--offers", required=True)
    p.add_argument("--catalogue")
    p.add_argument("--force", action="store_true", help="Re-parse offers that already have skills")
    p.set_defaults(func=cmd_batch_parse)

    p = sub.add_parser("verify-dictionary", help="Compare the dictionary with a skill catalogue")
    p.add_argument("--catalogue", required=True)
    p.set_defaults(func=cmd_verify_dictionary)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    level = (args.log_level or settings.log_level).upper()
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
        stream=sys.stderr,
    )
    try:
        return args.func(args)
    except (OSError, ValueError, yaml.YAMLError) as e:
        # SkillDictionaryError and pydantic's ValidationError are ValueErrors
        logger.error("%s", e)
        return 2


if __name__ == "__main__":
    sys.exit(main())
