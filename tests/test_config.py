"""Tests for advisor configuration loading."""

import json
import logging
from pathlib import Path
from unittest.mock import patch

from poker_advisor.utils.config import AdvisorConfig, load_config, make_rng


def _write(path: Path, data: object) -> Path:
    path.write_text(json.dumps(data))
    return path


class TestLoadConfig:
    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        assert load_config(tmp_path / "nope.json") == AdvisorConfig()

    def test_default_path(self, tmp_path: Path) -> None:
        with patch(
            "poker_advisor.utils.config.DEFAULT_CONFIG_PATH", tmp_path / "nope.json"
        ):
            assert load_config() == AdvisorConfig()

    def test_full_config(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "config.json", {
            "random_iterations": 2000,
            "range_iterations": 800,
            "parallel_threshold": 1000,
            "max_workers": 2,
            "villain_range": ["QQ+", "AKs"],
            "seed": 42,
            "log_level": "info",
        })
        config = load_config(path)
        assert config.random_iterations == 2000
        assert config.range_iterations == 800
        assert config.parallel_threshold == 1000
        assert config.max_workers == 2
        assert config.villain_range == ("QQ+", "AKs")
        assert config.seed == 42
        assert config.log_level == "INFO"

    def test_partial_config_keeps_defaults(self, tmp_path: Path) -> None:
        config = load_config(_write(tmp_path / "c.json", {"seed": 7}))
        assert config.seed == 7
        assert config.random_iterations == 1000

    def test_bad_json_warns(self, tmp_path: Path, caplog) -> None:
        path = tmp_path / "c.json"
        path.write_text("{not json")
        with caplog.at_level(logging.WARNING, logger="poker_advisor.config"):
            config = load_config(path)
        assert config == AdvisorConfig()
        assert "Failed to read advisor config" in caplog.text

    def test_non_object_json(self, tmp_path: Path, caplog) -> None:
        with caplog.at_level(logging.WARNING, logger="poker_advisor.config"):
            config = load_config(_write(tmp_path / "c.json", [1, 2]))
        assert config == AdvisorConfig()
        assert "not a JSON object" in caplog.text

    def test_invalid_value_falls_back(self, tmp_path: Path, caplog) -> None:
        path = _write(tmp_path / "c.json", {
            "random_iterations": "lots",
            "range_iterations": -5,
            "max_workers": True,
            "villain_range": "QQ+",
            "log_level": "LOUD",
            "seed": 3,
        })
        with caplog.at_level(logging.WARNING, logger="poker_advisor.config"):
            config = load_config(path)
        assert config.random_iterations == 1000
        assert config.range_iterations == 500
        assert config.max_workers is None
        assert config.villain_range == ()
        assert config.log_level == "WARNING"
        assert config.seed == 3
        assert "random_iterations" in caplog.text

    def test_unknown_key_ignored(self, tmp_path: Path, caplog) -> None:
        with caplog.at_level(logging.WARNING, logger="poker_advisor.config"):
            config = load_config(_write(tmp_path / "c.json", {"colour": "red"}))
        assert config == AdvisorConfig()
        assert "colour" in caplog.text

    def test_null_workers_allowed(self, tmp_path: Path) -> None:
        config = load_config(_write(tmp_path / "c.json", {"max_workers": None}))
        assert config.max_workers is None


class TestMakeRng:
    def test_seeded(self) -> None:
        config = AdvisorConfig(seed=5)
        assert make_rng(config).random() == make_rng(config).random()

    def test_unseeded(self) -> None:
        assert 0.0 <= make_rng(AdvisorConfig()).random() < 1.0
