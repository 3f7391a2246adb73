"""Configuration and timing profiles for the application engine"""

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, List, Optional

import yaml
from dotenv import load_dotenv

from quickapply.errors import ConfigError

# ========================================
# TIMING PROFILES
# ========================================
# All delays are in milliseconds (ms). Every wait is drawn from its
# [min, max] range by Pacing, so behaviour stays randomized in all modes.
# - default: production pacing
# - dev: roughly 2x faster, for watching a headed run
# - super: fastest safe pacing for debugging selectors

TIMING_PROFILES = {
    "default": {
        "field_delay_min": 1500,  # Between filling two fields
        "field_delay_max": 4000,
        "app_delay_min": 5000,  # Between two applications
        "app_delay_max": 15000,
        "key_delay_min": 50,  # Per typed character
        "key_delay_max": 150,
        "key_pause_chance": 0.05,  # 1 in 20 characters gets a longer pause
        "key_pause_min": 300,
        "key_pause_max": 800,
        "step_settle_min": 800,  # Waiting for a form step to render
        "step_settle_max": 1500,
        "page_settle_min": 2000,  # After navigation
        "page_settle_max": 4000,
        "click_settle_min": 500,  # After a click that changes the UI
        "click_settle_max": 1000,
        "dropdown_open_min": 300,  # Custom dropdown needs time to open
        "dropdown_open_max": 500,
    },
    "dev": {
        "field_delay_min": 700,
        "field_delay_max": 1800,
        "app_delay_min": 2500,
        "app_delay_max": 6000,
        "key_delay_min": 35,
        "key_delay_max": 90,
        "key_pause_chance": 0.05,
        "key_pause_min": 200,
        "key_pause_max": 450,
        "step_settle_min": 600,
        "step_settle_max": 1000,
        "page_settle_min": 1500,
        "page_settle_max": 2500,
        "click_settle_min": 400,
        "click_settle_max": 700,
        "dropdown_open_min": 200,
        "dropdown_open_max": 350,
    },
    "super": {
        "field_delay_min": 250,
        "field_delay_max": 600,
        "app_delay_min": 1500,
        "app_delay_max": 3000,
        "key_delay_min": 25,
        "key_delay_max": 50,
        "key_pause_chance": 0.0,
        "key_pause_min": 0,
        "key_pause_max": 0,
        "step_settle_min": 400,
        "step_settle_max": 600,
        "page_settle_min": 1000,
        "page_settle_max": 1500,
        "click_settle_min": 400,
        "click_settle_max": 500,
        "dropdown_open_min": 150,
        "dropdown_open_max": 200,
    },
}

# ========================================
# SAFETY VALIDATIONS
# ========================================
_MIN_KEY_DELAY_MS = 25
_MIN_SETTLE_MS = 400


def timing_violations(profile):
    """List of human-readable constraint violations for a timing profile"""
    violations = []
    for key, value in profile.items():
        if key.startswith("key_delay") and value < _MIN_KEY_DELAY_MS:
            violations.append(f"{key}={value}ms < {_MIN_KEY_DELAY_MS}ms minimum")
        if "settle" in key and value < _MIN_SETTLE_MS:
            violations.append(f"{key}={value}ms < {_MIN_SETTLE_MS}ms minimum")
        if key.endswith("_min"):
            upper = profile.get(key[:-4] + "_max")
            if upper is not None and upper < value:
                violations.append(f"{key}={value}ms above its max {upper}ms")
    return violations


# ========================================
# SETTINGS
# ========================================
PLATFORM_NAMES = ("linkedin", "indeed", "dice", "jobright")

DEFAULT_CONFIG_PATH = Path("config.yaml")
DEFAULT_ENV_PATH = Path(".env")

# Absolute bound on form steps per application
STEP_CEILING_RANGE = (8, 12)


@dataclass
class PlatformSettings:
    name: str
    enabled: bool = False
    search_url: str = ""
    keywords: List[str] = field(default_factory=list)
    location: str = ""
    max_applications: int = 10


@dataclass
class Settings:
    platforms: Dict[str, PlatformSettings]
    dry_run: bool = False
    headless: bool = True
    speed: str = "default"
    max_retries: int = 2
    max_steps: Optional[int] = None
    screenshot_on_error: bool = True
    app_delay_min_ms: Optional[int] = None
    app_delay_max_ms: Optional[int] = None
    database_path: Path = Path("data/quickapply.db")
    answers_path: Path = Path("answers.yaml")
    resume_path: Optional[Path] = None
    browser_data_dir: Path = Path("browser_data")
    snapshot_dir: Path = Path("logs/screenshots")
    debug_unresolved: bool = False

    def enabled_platforms(self):
        return [name for name in PLATFORM_NAMES if self.platforms[name].enabled]

    def timing(self):
        """Active timing profile with the configured between-application range"""
        profile = dict(TIMING_PROFILES[self.speed])
        if self.app_delay_min_ms is not None:
            profile["app_delay_min"] = self.app_delay_min_ms
        if self.app_delay_max_ms is not None:
            profile["app_delay_max"] = self.app_delay_max_ms
        violations = timing_violations(profile)
        if violations:
            raise ConfigError("Invalid timing: " + "; ".join(violations))
        return profile

    def ensure_dirs(self):
        for d in (self.database_path.parent, self.snapshot_dir, self.browser_data_dir):
            d.mkdir(parents=True, exist_ok=True)


def get_env(key, default=""):
    return os.environ.get(key, default).strip()


def _as_bool(value, key):
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in ("1", "true", "yes", "on"):
        return True
    if text in ("0", "false", "no", "off"):
        return False
    raise ConfigError(f"{key}: expected a boolean, got {value!r}")


def _as_int(value, key, minimum=0):
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{key}: expected an integer, got {value!r}") from None
    if number < minimum:
        raise ConfigError(f"{key}: must be >= {minimum}, got {number}")
    return number


def _read_yaml(path):
    if not path.exists():
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"{path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: top level must be a mapping")
    return data


def _platforms_from_yaml(raw):
    platforms = {}
    section = raw.get("platforms") or {}
    unknown = set(section) - set(PLATFORM_NAMES)
    if unknown:
        raise ConfigError(f"Unknown platform(s) in config: {', '.join(sorted(unknown))}")
    search = raw.get("search") or {}
    for name in PLATFORM_NAMES:
        entry = section.get(name) or {}
        platforms[name] = PlatformSettings(
            name=name,
            enabled=_as_bool(entry.get("enabled", False), f"platforms.{name}.enabled"),
            search_url=entry.get("search_url", ""),
            keywords=list(entry.get("keywords", search.get("keywords", []))),
            location=entry.get("location", search.get("location", "")),
            max_applications=_as_int(
                entry.get("max_applications_per_run", 10),
                f"platforms.{name}.max_applications_per_run",
            ),
        )
    return platforms


def load_settings(config_path=None, overrides=None):
    """
    Resolve settings with priority CLI overrides > environment (.env) > YAML > defaults.

    `overrides` holds already-parsed CLI values; None entries are ignored.
    """
    load_dotenv(DEFAULT_ENV_PATH)
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
    raw = _read_yaml(path)

    behavior = raw.get("behavior") or {}
    paths = raw.get("paths") or {}
    settings = Settings(platforms=_platforms_from_yaml(raw))

    # YAML
    settings.headless = _as_bool(behavior.get("headless", settings.headless), "behavior.headless")
    settings.dry_run = _as_bool(behavior.get("dry_run", settings.dry_run), "behavior.dry_run")
    settings.speed = behavior.get("speed", settings.speed)
    settings.max_retries = _as_int(behavior.get("max_retries", settings.max_retries), "behavior.max_retries")
    if behavior.get("max_steps") is not None:
        settings.max_steps = _as_int(behavior["max_steps"], "behavior.max_steps")
    settings.screenshot_on_error = _as_bool(
        behavior.get("screenshot_on_error", settings.screenshot_on_error), "behavior.screenshot_on_error"
    )
    if "min_delay_between_applications" in behavior:
        settings.app_delay_min_ms = _as_int(behavior["min_delay_between_applications"], "behavior.min_delay_between_applications")
    if "max_delay_between_applications" in behavior:
        settings.app_delay_max_ms = _as_int(behavior["max_delay_between_applications"], "behavior.max_delay_between_applications")
    for key in ("database_path", "answers_path", "browser_data_dir", "snapshot_dir"):
        if paths.get(key):
            setattr(settings, key, Path(paths[key]))
    if paths.get("resume_path"):
        settings.resume_path = Path(paths["resume_path"])

    # Environment
    if get_env("DRY_RUN"):
        settings.dry_run = _as_bool(get_env("DRY_RUN"), "DRY_RUN")
    if get_env("HEADLESS"):
        settings.headless = _as_bool(get_env("HEADLESS"), "HEADLESS")
    if get_env("SCREENSHOT_ON_ERROR"):
        settings.screenshot_on_error = _as_bool(get_env("SCREENSHOT_ON_ERROR"), "SCREENSHOT_ON_ERROR")
    if get_env("MAX_RETRIES"):
        settings.max_retries = _as_int(get_env("MAX_RETRIES"), "MAX_RETRIES")
    if get_env("DELAY_MIN_BETWEEN_APPS"):
        settings.app_delay_min_ms = _as_int(get_env("DELAY_MIN_BETWEEN_APPS"), "DELAY_MIN_BETWEEN_APPS")
    if get_env("DELAY_MAX_BETWEEN_APPS"):
        settings.app_delay_max_ms = _as_int(get_env("DELAY_MAX_BETWEEN_APPS"), "DELAY_MAX_BETWEEN_APPS")
    if get_env("RESUME_PATH"):
        settings.resume_path = Path(get_env("RESUME_PATH"))
    if get_env("MAX_APPLICATIONS"):
        _apply_max(settings, _as_int(get_env("MAX_APPLICATIONS"), "MAX_APPLICATIONS"))
    if get_env("PLATFORMS"):
        _apply_platforms(settings, get_env("PLATFORMS").split(","))

    # CLI
    overrides = {k: v for k, v in (overrides or {}).items() if v is not None}
    if "platforms" in overrides:
        _apply_platforms(settings, overrides.pop("platforms"))
    if "max_applications" in overrides:
        _apply_max(settings, overrides.pop("max_applications"))
    for key, value in overrides.items():
        if not hasattr(settings, key):
            raise ConfigError(f"Unknown setting: {key}")
        setattr(settings, key, value)

    if settings.speed not in TIMING_PROFILES:
        raise ConfigError(f"Unknown speed profile: {settings.speed}")
    low, high = STEP_CEILING_RANGE
    if settings.max_steps is not None and not low <= settings.max_steps <= high:
        raise ConfigError(f"max_steps must be between {low} and {high}, got {settings.max_steps}")
    return settings


def _apply_platforms(settings, names):
    names = [n.strip().lower() for n in names if n.strip()]
    if "all" in names:
        names = list(PLATFORM_NAMES)
    unknown = set(names) - set(PLATFORM_NAMES)
    if unknown:
        raise ConfigError(f"Unknown platform(s): {', '.join(sorted(unknown))}")
    for name in PLATFORM_NAMES:
        settings.platforms[name] = replace(settings.platforms[name], enabled=name in names)


def _apply_max(settings, maximum):
    for name in PLATFORM_NAMES:
        settings.platforms[name] = replace(settings.platforms[name], max_applications=maximum)
