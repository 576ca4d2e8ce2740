# src/gptsession/config/__init__.py
"""
Configuration for the gptsession library.
"""

from .loader import (CONFIG_FILE_NAME, TOKEN_ENV_VAR, find_config_file,
                     load_config_file, resolve_config)
from .models import ClientConfig

__all__ = [
    "CONFIG_FILE_NAME",
    "TOKEN_ENV_VAR",
    "ClientConfig",
    "find_config_file",
    "load_config_file",
    "resolve_config",
]
