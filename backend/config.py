from pathlib import Path

from pydantic_settings import BaseSettings

DEFAULT_DICTIONARY_PATH = (
    Path(__file__).resolve().parent / "services" / "dictionaries" / "skill_dictionary.yaml"
)


class Settings(BaseSettings):
    skill_dictionary_path: str = str(DEFAULT_DICTIONARY_PATH)

    # Skill resolver (the only component doing I/O)
    resolver_max_attempts: int = 3
    resolver_retry_wait_seconds: float = 0.2
    resolver_lookup_timeout_seconds: float | None = 5.0  # None disables the timeout

    # Scoring / ranking
    ranking_max_workers: int = 4
    default_mobility_km: float = 50.0
    explanation_max_matched: int = 3
    explanation_max_missing: int = 2

    log_level: str = "INFO"
    debug: bool = False

    model_config = {"env_prefix": "MATCHING_", "env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
