import os
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, Mapping

import yaml

from countrystats.config.settings import Settings

DEFAULT_CONFIG_PATH = Path("countrystats.config.yaml")

# Environment variable -> (section, key)
ENV_OVERRIDES: Dict[str, tuple[str | None, str]] = {
    "COUNTRYSTATS_DB_PATH": ("storage", "sqlite_path"),
    "PORT": ("server", "port"),
    "CORS_ORIGIN": ("server", "cors_origins"),
    "API_BASE_URL": ("client", "api_base_url"),
    "LOG_LEVEL": (None, "log_level"),
}


def load_config(path: Path | None = None) -> Dict[str, Any]:
    """
    Load raw configuration from YAML file.

    Args:
        path: Optional path to config file. Defaults to countrystats.config.yaml

    Returns:
        Dictionary with configuration (empty dict for an empty file)

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If the file does not hold a mapping
    """
    cfg_path = path or DEFAULT_CONFIG_PATH
    if not cfg_path.exists():
        raise FileNotFoundError(f"Config file not found: {cfg_path}")
    with cfg_path.open("r", encoding="utf-8") as f:
        config = yaml.safe_load(f) or {}

    if not isinstance(config, dict):
        raise ValueError("Config must be a dictionary")
    for section in ("storage", "server", "client", "view", "demo"):
        if config.get(section) is not None and not isinstance(config[section], dict):
            raise ValueError(f"Config section '{section}' must be a dictionary if provided")

    return config


def apply_env_overrides(config: Dict[str, Any], environ: Mapping[str, str]) -> Dict[str, Any]:
    """Return a copy of config with deployment environment variables applied."""
    merged = deepcopy(config)
    for env_name, (section, key) in ENV_OVERRIDES.items():
        value = environ.get(env_name)
        if value is None or value == "":
            continue
        if section is None:
            merged[key] = value
        else:
            merged.setdefault(section, {})
            if merged[section] is None:
                merged[section] = {}
            merged[section][key] = value
    return merged


def build_settings(
    config: Dict[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """
    Build the typed Settings passed to the server and client at startup.

    Args:
        config: Raw config dict (from load_config). None means defaults only.
        environ: Environment mapping. None means os.environ.

    Returns:
        Validated Settings
    """
    if environ is None:
        environ = os.environ
    merged = apply_env_overrides(config or {}, environ)
    return Settings.model_validate({k: v for k, v in merged.items() if v is not None})


def load_settings(path: Path | None = None, environ: Mapping[str, str] | None = None) -> Settings:
    """Load settings from the config file if present, else from defaults."""
    cfg_path = path or DEFAULT_CONFIG_PATH
    config: Dict[str, Any] = {}
    if path is not None or cfg_path.exists():
        config = load_config(cfg_path)
    return build_settings(config, environ)
