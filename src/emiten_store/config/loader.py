import os
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, Mapping

import yaml
from pydantic import BaseModel, ConfigDict, Field

from ..errors import ConfigurationError

DEFAULT_CONFIG_PATH = Path("emiten_store.config.yaml")

URL_ENV = "EMITEN_STORE_URL"
KEY_ENV = "EMITEN_STORE_KEY"
CONFIG_PATH_ENV = "EMITEN_STORE_CONFIG"

DEFAULT_PAGE_SIZE = 50

BASE_DEFAULTS: Dict[str, Dict[str, Any]] = {
    "history": {
        "default_page_size": DEFAULT_PAGE_SIZE,
    },
    "storage": {
        "create_tables": False,
        "echo": False,
    },
    "logging": {
        "level": "INFO",
    },
}


class StoreConfig(BaseModel):
    """Startup configuration, read once and passed to the client."""

    model_config = ConfigDict(frozen=True)

    url: str = Field(..., description="SQLAlchemy database URL of the hosted store")
    access_key: str = Field(..., repr=False, description="Opaque store access key")
    default_page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1)
    create_tables: bool = False
    echo: bool = False
    log_level: str = "INFO"


def _merge_defaults(config: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
    """Resolve section defaults with built-in fallbacks."""
    merged: Dict[str, Dict[str, Any]] = {}
    for section, defaults in BASE_DEFAULTS.items():
        user_section = config.get(section) or {}
        if not isinstance(user_section, dict):
            raise ConfigurationError(f"Config section '{section}' must be a dictionary", setting=section)
        merged[section] = {**deepcopy(defaults), **user_section}
    return merged


def load_config(path: Path | None = None) -> Dict[str, Any]:
    """
    Load the optional YAML settings file.

    Args:
        path: Optional path to the YAML file. Defaults to
            emiten_store.config.yaml in the working directory, which may be absent.

    Returns:
        Dictionary with every section present (missing default file means all defaults)

    Raises:
        ConfigurationError: If an explicit path does not exist or the file is not a mapping
    """
    cfg_path = path or DEFAULT_CONFIG_PATH
    if not cfg_path.exists():
        if path is not None:
            raise ConfigurationError(f"Config file not found: {cfg_path}", setting=CONFIG_PATH_ENV)
        return _merge_defaults({})
    with cfg_path.open("r", encoding="utf-8") as f:
        config = yaml.safe_load(f) or {}

    if not isinstance(config, dict):
        raise ConfigurationError("Config file must be a dictionary", setting=str(cfg_path))

    return _merge_defaults(config)


def _require(env: Mapping[str, str], name: str) -> str:
    value = (env.get(name) or "").strip()
    if not value:
        raise ConfigurationError(f"Required environment value {name} is not set", setting=name)
    return value


def load_store_config(
    env: Mapping[str, str] | None = None,
    path: Path | None = None,
) -> StoreConfig:
    """
    Build the StoreConfig from the environment and the optional YAML file.

    Both EMITEN_STORE_URL and EMITEN_STORE_KEY are required; a missing value is
    a fatal startup condition.

    Args:
        env: Environment mapping (defaults to os.environ)
        path: Optional YAML settings path (falls back to $EMITEN_STORE_CONFIG)

    Raises:
        ConfigurationError: If a required value is missing or a setting is invalid
    """
    env = os.environ if env is None else env
    url = _require(env, URL_ENV)
    access_key = _require(env, KEY_ENV)

    if path is None and env.get(CONFIG_PATH_ENV):
        path = Path(env[CONFIG_PATH_ENV])
    settings = load_config(path)
    page_size = settings["history"].get("default_page_size")
    if not isinstance(page_size, int) or page_size < 1:
        raise ConfigurationError(
            "history.default_page_size must be a positive integer",
            setting="history.default_page_size",
        )

    return StoreConfig(
        url=url,
        access_key=access_key,
        default_page_size=page_size,
        create_tables=bool(settings["storage"].get("create_tables")),
        echo=bool(settings["storage"].get("echo")),
        log_level=str(settings["logging"].get("level") or "INFO").upper(),
    )
