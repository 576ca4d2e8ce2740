# src/gptsession/__init__.py
"""
gptsession: multi-turn chat completion sessions with incremental persistence.

Main components:
    - GPTClient: facade owning configuration; creates sessions, messages and requests
    - Session: append-only conversation history with optional auto-sync to JSON Lines
    - Message: a chat turn with text and/or image content
    - Request / Response: one-shot completion exchange and its sealed result
    - ToolManager: function definitions offered to the model
"""

__version__ = "0.3.0"

from .api import GPTClient
from .attachments import encode_file_as_base64, encode_image_data_uri
from .config import ClientConfig, find_config_file, resolve_config
from .exceptions import (ConfigError, ExchangeError, GPTSessionError,
                         NotPreparedError, ParseError, RequestError,
                         SessionError, SessionFileNotFoundError,
                         SessionSyncError, TransportError)
from .models import Message, Response, ResponseBuilder, Role
from .providers import OpenAIProvider
from .request import Request
from .sessions import Session
from .tools import Tool, ToolManager

__all__ = [
    "__version__",
    "GPTClient",
    "ClientConfig",
    "find_config_file",
    "resolve_config",
    "Session",
    "Message",
    "Role",
    "Request",
    "Response",
    "ResponseBuilder",
    "OpenAIProvider",
    "Tool",
    "ToolManager",
    "encode_file_as_base64",
    "encode_image_data_uri",
    "GPTSessionError",
    "ConfigError",
    "SessionError",
    "ParseError",
    "SessionFileNotFoundError",
    "SessionSyncError",
    "RequestError",
    "NotPreparedError",
    "TransportError",
    "ExchangeError",
]
