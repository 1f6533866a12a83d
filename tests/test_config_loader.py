"""Tests for configuration loading and environment overrides."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from countrystats.config.loader import (
    apply_env_overrides,
    build_settings,
    load_config,
    load_settings,
)


def test_load_config_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError, match="Config file not found"):
        load_config(tmp_path / "nope.yaml")


def test_load_config_rejects_non_mapping(tmp_path):
    cfg = tmp_path / "countrystats.config.yaml"
    cfg.write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ValueError, match="must be a dictionary"):
        load_config(cfg)


def test_load_config_rejects_non_mapping_section(tmp_path):
    cfg = tmp_path / "countrystats.config.yaml"
    cfg.write_text("server: 8080\n", encoding="utf-8")

    with pytest.raises(ValueError, match="server"):
        load_config(cfg)


def test_empty_config_file_is_empty_dict(tmp_path):
    cfg = tmp_path / "countrystats.config.yaml"
    cfg.write_text("", encoding="utf-8")

    assert load_config(cfg) == {}


def test_build_settings_defaults():
    settings = build_settings({}, environ={})

    assert settings.storage.sqlite_path == "countrystats.db"
    assert settings.server.port == 3001
    assert settings.server.cors_origins == ["*"]
    assert settings.server.static_dir is None
    assert settings.view.page_size == 25
    assert settings.view.page_size_options == [10, 25, 50, 100]
    assert settings.view.date_timezone == "UTC"


def test_env_overrides_take_precedence_over_file():
    config = {"server": {"port": 4000, "cors_origins": ["https://file.example"]}}
    environ = {
        "PORT": "8080",
        "CORS_ORIGIN": "https://a.example, https://b.example,",
        "COUNTRYSTATS_DB_PATH": "/data/stats.db",
        "API_BASE_URL": "https://api.example",
        "LOG_LEVEL": "DEBUG",
    }

    settings = build_settings(config, environ=environ)

    assert settings.server.port == 8080
    assert settings.server.cors_origins == ["https://a.example", "https://b.example"]
    assert settings.storage.sqlite_path == "/data/stats.db"
    assert settings.client.api_base_url == "https://api.example"
    assert settings.log_level == "DEBUG"


def test_apply_env_overrides_does_not_mutate_input():
    config = {"server": {"port": 4000}}

    apply_env_overrides(config, {"PORT": "9000"})

    assert config == {"server": {"port": 4000}}


def test_blank_env_values_are_ignored():
    settings = build_settings({"server": {"port": 4000}}, environ={"PORT": ""})

    assert settings.server.port == 4000


def test_load_settings_reads_file(tmp_path):
    cfg = tmp_path / "countrystats.config.yaml"
    cfg.write_text(
        "storage:\n  sqlite_path: custom.db\nview:\n  page_size: 50\n  date_timezone: local\n",
        encoding="utf-8",
    )

    settings = load_settings(cfg, environ={})

    assert settings.storage.sqlite_path == "custom.db"
    assert settings.view.page_size == 50
    assert settings.view.date_timezone == "local"


def test_repository_example_config_is_valid():
    example = Path(__file__).resolve().parents[1] / "countrystats.config.yaml"

    settings = load_settings(example, environ={})

    assert settings.server.port == 3001
    assert settings.demo.countries_csv == "data/countries.csv"


@pytest.mark.parametrize(
    "view",
    [{"page_size": 0}, {"page_size": -5}, {"page_size_options": [10, 0]}, {"page_size_options": []}],
)
def test_invalid_page_sizes_rejected_at_load(view):
    with pytest.raises(ValidationError):
        build_settings({"view": view}, environ={})
