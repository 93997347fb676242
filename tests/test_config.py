from __future__ import annotations

from pathlib import Path

import pytest

from prospect_intel import config
from prospect_intel.errors import InvalidArgument

_ENV_KEYS = (
    "ORACLE_API_KEY", "OPENAI_API_KEY", "ORACLE_BASE_URL", "ORACLE_MODEL", "STORE_PATH",
    "ACQUISITION_DELAY_MIN_MS", "ACQUISITION_DELAY_MAX_MS", "PROSPECT_SOURCES", "RUN_HEADLESS",
)


@pytest.fixture
def clean_env(monkeypatch):
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


def test_settings_defaults(clean_env):
    settings = config.load_settings()

    assert settings.oracle_api_key == ""
    assert settings.oracle_model == "gpt-4"
    assert (settings.delay_min_ms, settings.delay_max_ms) == (2000, 4000)
    assert settings.sources == ("sample",)
    assert settings.headless is True
    assert settings.store_path == config.DATA_DIR / "prospects.csv"


def test_settings_from_env(clean_env, tmp_path: Path):
    clean_env.setenv("OPENAI_API_KEY", "sk-test")
    clean_env.setenv("ORACLE_MODEL", "llama-3.3-70b-versatile")
    clean_env.setenv("STORE_PATH", str(tmp_path / "p.csv"))
    clean_env.setenv("ACQUISITION_DELAY_MIN_MS", "0")
    clean_env.setenv("ACQUISITION_DELAY_MAX_MS", "0")
    clean_env.setenv("PROSPECT_SOURCES", "Remotive, sample")
    clean_env.setenv("RUN_HEADLESS", "false")

    settings = config.load_settings()

    assert settings.oracle_api_key == "sk-test"
    assert settings.oracle_model == "llama-3.3-70b-versatile"
    assert settings.store_path == tmp_path / "p.csv"
    assert settings.sources == ("remotive", "sample")
    assert settings.headless is False


@pytest.mark.parametrize("low,high", [("5000", "1000"), ("-1", "10"), ("soon", "10")])
def test_bad_delay_bounds_rejected(clean_env, low, high):
    clean_env.setenv("ACQUISITION_DELAY_MIN_MS", low)
    clean_env.setenv("ACQUISITION_DELAY_MAX_MS", high)

    with pytest.raises(InvalidArgument):
        config.load_settings()


def test_targeting_defaults_when_file_missing(tmp_path: Path):
    assert config.load_targeting(tmp_path / "missing.yaml") == config.DEFAULT_TARGETING


def test_targeting_from_yaml(tmp_path: Path):
    path = tmp_path / "targeting.yaml"
    path.write_text("searchTerms: clinic scheduling\ndraft_threshold: 75\nunrelated: 1\n")

    targeting = config.load_targeting(path)

    assert targeting["search_terms"] == ["clinic scheduling"]
    assert targeting["draft_threshold"] == 75
    assert targeting["report_threshold"] == 60
    assert "unrelated" not in targeting
