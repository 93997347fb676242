"""Load targeting defaults and env configuration."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from prospect_intel.errors import InvalidArgument
from prospect_intel.log import get_logger

log = get_logger(__name__)

load_dotenv()

ROOT_DIR: Path = Path(__file__).resolve().parent.parent
CONFIG_DIR: Path = ROOT_DIR / "config"
TARGETING_PATH: Path = CONFIG_DIR / "targeting.yaml"
REPORTS_DIR: Path = ROOT_DIR / "reports"
DATA_DIR: Path = ROOT_DIR / "data"

DEFAULT_TARGETING: dict[str, Any] = {
    "search_terms": ["customer service automation"],
    "max_results": 10,
    "draft_threshold": 70,
    "report_threshold": 60,
}


@dataclass(frozen=True)
class Settings:
    oracle_api_key: str
    oracle_base_url: str
    oracle_model: str
    store_path: Path
    delay_min_ms: int
    delay_max_ms: int
    sources: tuple[str, ...]
    headless: bool


def get_env(key: str, default: str = "") -> str:
    return os.environ.get(key, default).strip()


def _int_env(key: str, default: int) -> int:
    raw = get_env(key)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise InvalidArgument(f"{key} must be an integer, got {raw!r}") from None


def load_settings() -> Settings:
    delay_min = _int_env("ACQUISITION_DELAY_MIN_MS", 2000)
    delay_max = _int_env("ACQUISITION_DELAY_MAX_MS", 4000)
    if delay_min < 0 or delay_min > delay_max:
        raise InvalidArgument(
            f"Acquisition delay bounds are invalid: min={delay_min} max={delay_max}"
        )

    store_path = Path(get_env("STORE_PATH") or DATA_DIR / "prospects.csv")
    if not store_path.is_absolute():
        store_path = ROOT_DIR / store_path

    sources = tuple(
        s.strip().lower() for s in get_env("PROSPECT_SOURCES", "sample").split(",") if s.strip()
    )

    return Settings(
        oracle_api_key=get_env("ORACLE_API_KEY") or get_env("OPENAI_API_KEY"),
        oracle_base_url=get_env("ORACLE_BASE_URL"),
        oracle_model=get_env("ORACLE_MODEL", "gpt-4") or "gpt-4",
        store_path=store_path,
        delay_min_ms=delay_min,
        delay_max_ms=delay_max,
        sources=sources or ("sample",),
        headless=get_env("RUN_HEADLESS", "true").lower() in ("1", "true", "yes"),
    )


def load_targeting(path: Path | None = None) -> dict[str, Any]:
    """Targeting defaults from YAML, falling back to built-in values."""
    path = path or TARGETING_PATH
    data: dict[str, Any] = dict(DEFAULT_TARGETING)
    if not path.exists():
        log.debug("No targeting file at %s, using defaults", path)
        return data

    with open(path, "r") as f:
        loaded = yaml.safe_load(f) or {}

    # Accept the camelCase key used by the old web form
    if "searchTerms" in loaded and "search_terms" not in loaded:
        loaded["search_terms"] = loaded.pop("searchTerms")

    data.update({k: v for k, v in loaded.items() if k in DEFAULT_TARGETING})
    if isinstance(data["search_terms"], str):
        data["search_terms"] = [data["search_terms"]]
    return data


def ensure_dirs() -> None:
    for d in (REPORTS_DIR, DATA_DIR):
        d.mkdir(parents=True, exist_ok=True)
