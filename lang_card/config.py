import json
import logging
import os
import re

from lang_card.render import DEFAULT_THEME, THEMES

logger = logging.getLogger(__name__)

MIN_LANGS = 1
MAX_LANGS = 20
LEADING_INT = re.compile(r"\s*[+-]?\d+")

DEFAULT_CONFIG = {
    "default_theme": DEFAULT_THEME,
    "default_max_langs": 8,
    "excluded_languages": [],
    "excluded_repositories": [],
    "request_timeout": 10,
}


def config_path():
    return os.getenv(
        "LANG_CARD_CONFIG", os.path.join(os.path.dirname(__file__), "config.json")
    )


def load_config():
    """
    Load configuration from config.json, falling back to defaults
    """
    config = dict(DEFAULT_CONFIG)
    path = config_path()
    try:
        with open(path, "r") as f:
            loaded = json.load(f)
    except FileNotFoundError:
        return config
    except json.JSONDecodeError:
        logger.warning("Invalid %s format, using default configuration", path)
        return config

    if not isinstance(loaded, dict):
        logger.warning("%s must contain a JSON object, using default configuration", path)
        return config

    config.update({key: value for key, value in loaded.items() if key in DEFAULT_CONFIG})
    return config


def github_token():
    return os.getenv("GITHUB_TOKEN") or None


def log_level():
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    # getLevelName maps unknown names to a "Level X" string
    if not isinstance(logging.getLevelName(level), int):
        return "INFO"
    return level


def resolve_theme(name, default=DEFAULT_THEME):
    if name in THEMES:
        return name
    return default if default in THEMES else DEFAULT_THEME


def resolve_max_langs(raw, default=8):
    """
    Parse a requested language count and clamp it to 1..20.
    Only the leading integer is read, so "3.5" and "3abc" mean 3.
    Missing, non-numeric or zero values use `default`.
    """
    match = LEADING_INT.match(str(raw)) if raw is not None else None
    value = int(match.group()) if match else 0
    if not value:
        value = default
    return min(max(value, MIN_LANGS), MAX_LANGS)
