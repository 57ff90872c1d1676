"""Binds parsed skills to canonical repository records by exact slug.

The repository is an injected capability exposing ``lookup_by_slug``. Each
lookup runs with a timeout and a bounded number of retries; a slug that is
unknown, keeps failing or times out is dropped from the output and reported,
never fatal for the rest of the offer.
"""

import json
import logging
from collections.abc import Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from pathlib import Path
from typing import Any, Protocol

import yaml
from pydantic import ValidationError
from tenacity import Retrying, before_sleep_log, retry_if_exception_type, stop_after_attempt, wait_fixed

from config import settings
from models.schemas.parsed_skill import ParsedSkill
from models.schemas.resolved_skill import ResolutionReport, ResolvedSkill, SkillRecord
from services.skill_dictionary import SkillDictionary

logger = logging.getLogger(__name__)

_UNSET = object()


class SkillRepository(Protocol):
    def lookup_by_slug(self, slug: str) -> SkillRecord | None: ...


class SkillLookupTimeout(TimeoutError):
    """A single repository lookup took longer than the configured timeout."""


class InMemorySkillRepository:
    """Catalogue of ``SkillRecord`` kept in memory, keyed by slug."""

    def __init__(self, records: Iterable[SkillRecord | Mapping[str, Any]] = ()):
        self._records: dict[str, SkillRecord] = {}
        for record in records:
            if not isinstance(record, SkillRecord):
                record = SkillRecord.model_validate(record)
            self._records[record.slug] = record

    @classmethod
    def from_dictionary(cls, dictionary: SkillDictionary) -> "InMemorySkillRepository":
        """Catalogue mirroring the dictionary, with sequential ids."""
        return cls(
            SkillRecord(id=i, slug=d.slug, display_name=d.display_name, category=d.category)
            for i, d in enumerate(dictionary.skills, start=1)
        )

    @classmethod
    def load_catalogue(cls, path: str | Path) -> "InMemorySkillRepository":
        """Load a YAML/JSON catalogue: a list of records or ``{"skills": [...]}``."""
        path = Path(path)
        with path.open(encoding="utf-8") as fh:
            data = json.load(fh) if path.suffix == ".json" else yaml.safe_load(fh)
        if isinstance(data, dict):
            data = data.get("skills", [])
        if not isinstance(data, list):
            raise ValueError(f"{path}: expected a list of skill records")
        return cls(data)

    @property
    def records(self) -> list[SkillRecord]:
        return list(self._records.values())

    def lookup_by_slug(self, slug: str) -> SkillRecord | None:
        return self._records.get(slug)

    def __len__(self) -> int:
        return len(self._records)


class SkillResolver:
    def __init__(
        self,
        repository: SkillRepository,
        max_attempts: int | None = None,
        retry_wait_seconds: float | None = None,
        timeout_seconds: Any = _UNSET,
    ):
        self.repository = repository
        self.max_attempts = max(1, max_attempts or settings.resolver_max_attempts)
        self.retry_wait_seconds = (
            settings.resolver_retry_wait_seconds if retry_wait_seconds is None else retry_wait_seconds
        )
        self.timeout_seconds = (
            settings.resolver_lookup_timeout_seconds if timeout_seconds is _UNSET else timeout_seconds
        )

    def resolve(self, parsed_skills: Iterable[ParsedSkill | Mapping[str, Any]] | None) -> ResolutionReport:
        report = ResolutionReport()
        by_id: dict[Any, ResolvedSkill] = {}
        records: dict[str, SkillRecord | None] = {}

        for item in parsed_skills or []:
            try:
                parsed = item if isinstance(item, ParsedSkill) else ParsedSkill.model_validate(item)
            except ValidationError as e:
                logger.warning("Skipping malformed parsed skill %r: %s", item, e)
                continue
            if parsed.slug in report.failed:
                continue
            if parsed.slug not in records:
                try:
                    records[parsed.slug] = self._lookup(parsed.slug)
                except Exception as e:
                    logger.warning("Lookup failed for skill %r: %s", parsed.slug, e)
                    report.failed.append(parsed.slug)
                    continue
                if records[parsed.slug] is None:
                    logger.info("Skill %r not found in repository", parsed.slug)
                    report.unresolved.append(parsed.slug)
            record = records[parsed.slug]
            if record is None:
                continue

            resolved = ResolvedSkill(
                skill_id=record.id,
                slug=record.slug,
                display_name=record.display_name,
                category=record.category or parsed.category,
                is_required=parsed.is_required,
                weight=parsed.weight,
            )
            current = by_id.get(record.id)
            if current is None or (resolved.is_required, resolved.weight) > (current.is_required, current.weight):
                by_id[record.id] = resolved

        report.resolved = list(by_id.values())
        if report.unresolved_count:
            logger.info(
                "Resolved %d skills, %d unresolved, %d failed",
                len(report.resolved), len(report.unresolved), len(report.failed),
            )
        return report

    def _lookup(self, slug: str) -> SkillRecord | None:
        retrying = Retrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_fixed(self.retry_wait_seconds),
            retry=retry_if_exception_type(Exception),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        record = retrying(self._lookup_once, slug)
        if record is None or isinstance(record, SkillRecord):
            return record
        return SkillRecord.model_validate(record)

    def _lookup_once(self, slug: str) -> Any:
        if self.timeout_seconds is None:
            return self.repository.lookup_by_slug(slug)
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="skill-lookup")
        try:
            future = executor.submit(self.repository.lookup_by_slug, slug)
            try:
                return future.result(timeout=self.timeout_seconds)
            except FutureTimeout as e:
                future.cancel()
                raise SkillLookupTimeout(
                    f"lookup of {slug!r} exceeded {self.timeout_seconds}s"
                ) from e
        finally:
            executor.shutdown(wait=False, cancel_futures=True)


def match_skills_to_database(
    parsed_skills: Iterable[ParsedSkill | Mapping[str, Any]] | None,
    skill_repository: SkillRepository,
    resolver: SkillResolver | None = None,
) -> list[ResolvedSkill]:
    """Resolve parsed skills by slug; unresolved ones are dropped and logged."""
    resolver = resolver or SkillResolver(skill_repository)
    return resolver.resolve(parsed_skills).resolved
