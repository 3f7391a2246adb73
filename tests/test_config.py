"""Settings resolution"""

from pathlib import Path

import pytest

from quickapply.config import TIMING_PROFILES, load_settings, timing_violations
from quickapply.errors import ConfigError

CONFIG = """
platforms:
  linkedin:
    enabled: true
    search_url: https://www.linkedin.com/jobs/search/?keywords=python
    max_applications_per_run: 7
  dice:
    enabled: false
    keywords: [python developer]
behavior:
  headless: false
  max_retries: 4
  min_delay_between_applications: 6000
paths:
  database_path: db/ledger.db
"""


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(CONFIG, encoding="utf-8")
    return path


def test_defaults_without_any_source():
    settings = load_settings()
    assert settings.enabled_platforms() == []
    assert settings.headless is True
    assert settings.max_retries == 2
    assert settings.timing() == TIMING_PROFILES["default"]


def test_yaml_values(config_file):
    settings = load_settings(config_file)
    assert settings.enabled_platforms() == ["linkedin"]
    assert settings.platforms["linkedin"].max_applications == 7
    assert settings.platforms["dice"].keywords == ["python developer"]
    assert settings.headless is False
    assert settings.max_retries == 4
    assert settings.database_path == Path("db/ledger.db")
    assert settings.timing()["app_delay_min"] == 6000


def test_env_overrides_yaml(config_file, monkeypatch):
    monkeypatch.setenv("HEADLESS", "true")
    monkeypatch.setenv("MAX_RETRIES", "1")
    monkeypatch.setenv("PLATFORMS", "indeed,dice")
    monkeypatch.setenv("MAX_APPLICATIONS", "3")

    settings = load_settings(config_file)
    assert settings.headless is True
    assert settings.max_retries == 1
    assert settings.enabled_platforms() == ["indeed", "dice"]
    assert settings.platforms["dice"].max_applications == 3


def test_cli_overrides_env(config_file, monkeypatch):
    monkeypatch.setenv("DRY_RUN", "false")
    monkeypatch.setenv("PLATFORMS", "indeed")

    settings = load_settings(
        config_file,
        {"dry_run": True, "platforms": ["jobright"], "max_applications": 1, "speed": None},
    )
    assert settings.dry_run is True
    assert settings.enabled_platforms() == ["jobright"]
    assert settings.platforms["jobright"].max_applications == 1
    assert settings.speed == "default"


def test_dotenv_file_is_read(tmp_path):
    (tmp_path / ".env").write_text("MAX_RETRIES=5\n", encoding="utf-8")
    assert load_settings().max_retries == 5


def test_all_platforms():
    settings = load_settings(overrides={"platforms": ["all"]})
    assert settings.enabled_platforms() == ["linkedin", "indeed", "dice", "jobright"]


@pytest.mark.parametrize(
    "overrides",
    [
        {"platforms": ["monster"]},
        {"speed": "ludicrous"},
        {"max_steps": 20},
        {"max_steps": 5},
        {"no_such_setting": 1},
    ],
)
def test_invalid_overrides(overrides):
    with pytest.raises(ConfigError):
        load_settings(overrides=overrides)


def test_invalid_env_values(monkeypatch):
    monkeypatch.setenv("DRY_RUN", "sometimes")
    with pytest.raises(ConfigError):
        load_settings()


def test_unknown_platform_in_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("platforms:\n  monster:\n    enabled: true\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_settings(path)


def test_timing_delay_range_validated(monkeypatch):
    monkeypatch.setenv("DELAY_MIN_BETWEEN_APPS", "9000")
    monkeypatch.setenv("DELAY_MAX_BETWEEN_APPS", "1000")
    with pytest.raises(ConfigError):
        load_settings().timing()


def test_shipped_profiles_are_valid():
    for profile in TIMING_PROFILES.values():
        assert timing_violations(profile) == []
