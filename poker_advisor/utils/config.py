"""Advisor configuration loaded from JSON."""

from __future__ import annotations

import json
import logging
import random
from dataclasses import dataclass, fields, replace
from pathlib import Path

logger = logging.getLogger("poker_advisor.config")

DEFAULT_CONFIG_PATH = Path.home() / ".poker_advisor" / "config.json"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class AdvisorConfig:
    """Tunables for simulations and the CLI."""

    random_iterations: int = 1000  # Monte Carlo samples vs a random hand
    range_iterations: int = 500  # Monte Carlo samples vs a range
    parallel_threshold: int = 500  # Below this, simulate in-process
    max_workers: int | None = None  # None = pick from CPU count
    villain_range: tuple[str, ...] = ()  # Hand tokens; empty = random villain
    seed: int | None = None  # Fixed seed for reproducible sessions
    log_level: str = "WARNING"


def _validate(key: str, value: object) -> object:
    """Return a cleaned value or raise ValueError."""
    if key == "villain_range":
        if not isinstance(value, list) or not all(
            isinstance(token, str) for token in value
        ):
            raise ValueError("villain_range must be a list of hand tokens")
        return tuple(value)
    if key == "log_level":
        if not isinstance(value, str) or value.upper() not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}")
        return value.upper()
    if key in ("max_workers", "seed") and value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{key} must be an integer")
    if key == "seed":
        return value
    if value < 1:
        raise ValueError(f"{key} must be positive")
    return value


def load_config(config_path: Path | None = None) -> AdvisorConfig:
    """Load advisor configuration from a JSON file.

    Default path: ~/.poker_advisor/config.json

    A missing file gives the defaults. An unreadable file, or a value of the
    wrong type, logs a warning and falls back to the default for that part.

    Expected JSON format (every key optional):
        {
            "random_iterations": 1000,
            "range_iterations": 500,
            "parallel_threshold": 500,
            "max_workers": 4,
            "villain_range": ["QQ+", "AKs", "AKo"],
            "seed": 42,
            "log_level": "INFO"
        }
    """
    path = config_path or DEFAULT_CONFIG_PATH
    config = AdvisorConfig()
    if not path.exists():
        return config

    try:
        with open(path) as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Failed to read advisor config at %s: %s", path, e)
        return config

    if not isinstance(data, dict):
        logger.warning("Advisor config at %s is not a JSON object", path)
        return config

    known = {f.name for f in fields(AdvisorConfig)}
    updates: dict[str, object] = {}
    for key, value in data.items():
        if key not in known:
            logger.warning("Ignoring unknown advisor config key: %s", key)
            continue
        try:
            updates[key] = _validate(key, value)
        except ValueError as e:
            logger.warning("Invalid advisor config value for %s: %s", key, e)

    return replace(config, **updates)


def make_rng(config: AdvisorConfig) -> random.Random:
    """Random source for a session, seeded when the config fixes a seed."""
    return random.Random(config.seed)
