# src/gptsession/config/loader.py
"""
Discovery and loading of the ``.openai.yaml`` configuration file.

The file is looked up in the starting directory and then in every parent
directory up to the filesystem root; the first match wins. Its layout::

    openai:
      model: gpt-4o
      token: sk-...            # optional, OPENAI_API_KEY is used otherwise
      endpoint: https://...    # optional
      params:
        max-tokens: 150
        n: 1
        temperature: 0.7
"""

import logging
import os
import pathlib
from typing import Any, Dict, Mapping, Optional, Union

import yaml
from pydantic import ValidationError

from ..exceptions import ConfigError
from .models import ClientConfig

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".openai.yaml"
TOKEN_ENV_VAR = "OPENAI_API_KEY"

PathLike = Union[str, pathlib.Path]


def find_config_file(start_dir: Optional[PathLike] = None) -> Optional[pathlib.Path]:
    """
    Walks from ``start_dir`` (default: the current directory) up to the root
    looking for ``.openai.yaml``.

    Returns:
        The path of the first file found, or None.
    """
    current = pathlib.Path(start_dir or os.getcwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / CONFIG_FILE_NAME
        if candidate.is_file():
            logger.debug(f"Found configuration file: {candidate}")
            return candidate
    logger.debug(f"No {CONFIG_FILE_NAME} found from {current} upwards.")
    return None


def load_config_file(path: PathLike) -> Dict[str, Any]:
    """
    Parses a YAML configuration file.

    Raises:
        ConfigError: If the file cannot be read or is not a YAML mapping.
    """
    config_path = pathlib.Path(path)
    try:
        with config_path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read configuration file '{config_path}': {e}")
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in configuration file '{config_path}': {e}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file '{config_path}' must contain a mapping, got {type(data).__name__}.")
    return data


def _section(data: Mapping[str, Any], *keys: str) -> Dict[str, Any]:
    current: Any = data
    for key in keys:
        if not isinstance(current, Mapping):
            return {}
        current = current.get(key)
    return dict(current) if isinstance(current, Mapping) else {}


def resolve_config(
    token: Optional[str] = None,
    model: Optional[str] = None,
    config_file: Optional[PathLike] = None,
    start_dir: Optional[PathLike] = None,
    env: Optional[Mapping[str, str]] = None,
    **overrides: Any,
) -> ClientConfig:
    """
    Builds the effective configuration.

    Explicit arguments win over the configuration file, which wins over
    the environment (token only) and the built-in defaults. When
    ``config_file`` is None the file is discovered from ``start_dir``.

    Raises:
        ConfigError: If the token or model cannot be resolved, or a value
                     fails validation.
    """
    env = os.environ if env is None else env

    cfg_path = pathlib.Path(config_file) if config_file else find_config_file(start_dir)
    file_data: Dict[str, Any] = load_config_file(cfg_path) if cfg_path else {}

    openai_section = _section(file_data, "openai")
    params = _section(file_data, "openai", "params")

    resolved_token = token or openai_section.get("token") or env.get(TOKEN_ENV_VAR)
    resolved_model = model or openai_section.get("model")

    if not resolved_token:
        raise ConfigError("Error: Token not found")
    if not resolved_model:
        if cfg_path is None:
            raise ConfigError(f"Error: {CONFIG_FILE_NAME} not found and no model given")
        raise ConfigError("Error: Model missing")

    values: Dict[str, Any] = {
        "token": resolved_token,
        "model": resolved_model,
        "config_file": str(cfg_path) if cfg_path else None,
    }
    if params.get("max-tokens") is not None:
        values["max_tokens"] = params["max-tokens"]
    if params.get("n") is not None:
        values["n"] = params["n"]
    if params.get("temperature") is not None:
        values["temperature"] = params["temperature"]
    if openai_section.get("endpoint"):
        values["endpoint_uri"] = openai_section["endpoint"]
    values.update({k: v for k, v in overrides.items() if v is not None})

    try:
        config = ClientConfig(**values)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}")

    logger.debug(
        f"Resolved configuration: model='{config.model}', max_tokens={config.max_tokens}, "
        f"n={config.n}, endpoint='{config.endpoint_uri}', file={config.config_file}"
    )
    return config
