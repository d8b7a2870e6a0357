"""Tests for startup configuration loading."""

import pytest

from emiten_store.config.loader import (
    CONFIG_PATH_ENV,
    DEFAULT_PAGE_SIZE,
    KEY_ENV,
    URL_ENV,
    load_config,
    load_store_config,
)
from emiten_store.errors import ConfigurationError

ENV = {
    URL_ENV: "postgresql+psycopg2://postgres@db.example.com:5432/postgres",
    KEY_ENV: "service-key",
}


def test_defaults_without_yaml(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    config = load_store_config(env=ENV)

    assert config.url == ENV[URL_ENV]
    assert config.access_key == "service-key"
    assert config.default_page_size == DEFAULT_PAGE_SIZE
    assert config.create_tables is False
    assert config.log_level == "INFO"


@pytest.mark.parametrize("missing", [URL_ENV, KEY_ENV])
def test_missing_required_value_is_fatal(missing):
    env = {k: v for k, v in ENV.items() if k != missing}

    with pytest.raises(ConfigurationError) as exc_info:
        load_store_config(env=env)

    assert exc_info.value.details["setting"] == missing


def test_blank_required_value_is_fatal():
    with pytest.raises(ConfigurationError):
        load_store_config(env={**ENV, KEY_ENV: "   "})


def test_yaml_overrides(tmp_path):
    cfg = tmp_path / "store.yaml"
    cfg.write_text(
        "history:\n"
        "  default_page_size: 25\n"
        "storage:\n"
        "  create_tables: true\n"
        "logging:\n"
        "  level: debug\n",
        encoding="utf-8",
    )

    config = load_store_config(env=ENV, path=cfg)

    assert config.default_page_size == 25
    assert config.create_tables is True
    assert config.echo is False
    assert config.log_level == "DEBUG"


def test_invalid_page_size(tmp_path):
    cfg = tmp_path / "store.yaml"
    cfg.write_text("history:\n  default_page_size: 0\n", encoding="utf-8")

    with pytest.raises(ConfigurationError, match="default_page_size"):
        load_store_config(env=ENV, path=cfg)


def test_explicit_missing_file_is_an_error(tmp_path):
    with pytest.raises(ConfigurationError, match="Config file not found"):
        load_config(tmp_path / "nope.yaml")


def test_non_mapping_yaml_is_rejected(tmp_path):
    cfg = tmp_path / "store.yaml"
    cfg.write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ConfigurationError):
        load_config(cfg)


def test_config_path_from_environment(tmp_path):
    cfg = tmp_path / "store.yaml"
    cfg.write_text("history:\n  default_page_size: 10\n", encoding="utf-8")

    config = load_store_config(env={**ENV, CONFIG_PATH_ENV: str(cfg)})

    assert config.default_page_size == 10


def test_missing_config_path_from_environment_is_fatal(tmp_path):
    with pytest.raises(ConfigurationError, match="Config file not found"):
        load_store_config(env={**ENV, CONFIG_PATH_ENV: str(tmp_path / "missing.yaml")})


def test_access_key_not_in_repr(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    config = load_store_config(env=ENV)

    assert "service-key" not in repr(config)
