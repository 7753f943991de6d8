from constants import *
import copy
import yaml
import os

import logging

# Retrieve main logger
logger = logging.getLogger("main")

# Environment overrides: (env var, section, key, cast)
ENV_OVERRIDES = [
    ("CATALOG_DATABASE_URL", "database", "url", str),
    ("CATALOG_CACHE_TTL", "cache", "ttl_seconds", int),
    ("CATALOG_CACHE_MAX_ENTRIES", "cache", "max_entries", int),
]

# Cache variable
_cached_settings = None


def merge_settings(overrides):
    """Deep merge a settings dict over DEFAULT_SETTINGS, section by section"""
    merged_settings = copy.deepcopy(DEFAULT_SETTINGS)
    for section, values in (overrides or {}).items():
        if isinstance(values, dict) and section in merged_settings and isinstance(merged_settings[section], dict):
            merged_settings[section].update(values)
        else:
            merged_settings[section] = values
    return merged_settings


def apply_env_overrides(settings):
    for env_var, section, key, cast in ENV_OVERRIDES:
        raw = os.environ.get(env_var)
        if raw is None or raw == "":
            continue
        try:
            settings.setdefault(section, {})[key] = cast(raw)
        except ValueError:
            logger.warning(f"Ignoring invalid value for {env_var}: {raw!r}")
    return settings


def load_settings(force=False):
    global _cached_settings

    if _cached_settings and not force:
        return _cached_settings

    file_settings = {}
    if os.path.exists(CONFIG_FILE):
        logger.debug(f"Reading configuration file: {CONFIG_FILE}")
        with open(CONFIG_FILE, "r") as yaml_file:
            file_settings = yaml.safe_load(yaml_file) or {}
    else:
        logger.debug(f"Configuration file {CONFIG_FILE} not found, using defaults.")

    settings = apply_env_overrides(merge_settings(file_settings))
    verify_settings(settings)

    _cached_settings = settings
    return settings


def reload_settings():
    return load_settings(force=True)


def verify_settings(settings):
    """Raise ValueError when a section holds an unusable value"""
    cache = settings["cache"]
    if int(cache["ttl_seconds"]) <= 0:
        raise ValueError("cache.ttl_seconds must be positive")
    if int(cache["max_entries"]) <= 0:
        raise ValueError("cache.max_entries must be positive")

    listings = settings["listings"]
    for key in ("recent_limit", "upcoming_limit", "ranking_default_limit", "ranking_max_limit"):
        if int(listings[key]) <= 0:
            raise ValueError(f"listings.{key} must be positive")
    if int(listings["ranking_default_limit"]) > int(listings["ranking_max_limit"]):
        raise ValueError("listings.ranking_default_limit cannot exceed listings.ranking_max_limit")
    return True
