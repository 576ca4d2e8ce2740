# src/gptsession/api.py
"""
Client facade for the gptsession library.

Example::

    client = GPTClient()
    session = client.new_session()

    session.enable_auto_sync("chat.history", lambda: session.append(
        session.new_message("system").set_text("You are a helpful assistant.")))

    session.append(lambda s: s.new_message().set_role("user").set_text(prompt))

    response = client.new_request(lambda req: req.attach_session(session))

    if response.success and response.completion:
        print(response.completion)
        session.append(session.new_message("assistant").set_text(response.completion))
"""

import logging
import sys
from typing import Any, Callable, Optional, Union

import httpx

from .attachments import encode_file_as_base64
from .config.loader import PathLike, resolve_config
from .config.models import ClientConfig
from .exceptions import ConfigError
from .models import Message, Response, Role
from .providers.openai_provider import OpenAIProvider
from .request import Request
from .sessions.session import Session

logger = logging.getLogger(__name__)


class GPTClient:
    """
    Owns the effective configuration and creates sessions, messages and
    requests bound to it.

    Missing required configuration (token or model) is fatal: the error is
    written to stderr and the process exits with status 1.
    """

    def __init__(
        self,
        token: Optional[str] = None,
        model: Optional[str] = None,
        config_file: Optional[PathLike] = None,
        config: Optional[ClientConfig] = None,
        transport: Optional[httpx.BaseTransport] = None,
        **overrides: Any,
    ):
        """
        Initializes the client.

        Args:
            token: Bearer token. Falls back to the config file, then OPENAI_API_KEY.
            model: Model identifier. Falls back to the config file.
            config_file: Explicit ``.openai.yaml``; discovered from the
                         current directory upwards when omitted.
            config: A fully resolved configuration; skips resolution.
            transport: Optional httpx transport for the provider.
            **overrides: Other ``ClientConfig`` fields (e.g. ``max_tokens``).
        """
        if config is None:
            try:
                config = resolve_config(token=token, model=model, config_file=config_file, **overrides)
            except ConfigError as e:
                self._die(str(e))
        self.config: ClientConfig = config # type: ignore[assignment]
        self.provider = OpenAIProvider(self.config, transport=transport)
        logger.info(f"GPTClient initialized: model='{self.config.model}', endpoint='{self.config.endpoint_uri}'")

    @staticmethod
    def _die(message: str) -> None:
        logger.critical(message)
        sys.stderr.write(f"{message}\n")
        sys.exit(1)

    def __enter__(self) -> "GPTClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def token(self) -> str:
        return self.config.token

    @property
    def model(self) -> str:
        return self.config.model

    @property
    def max_tokens(self) -> int:
        return self.config.max_tokens

    @property
    def n(self) -> int:
        return self.config.n

    @property
    def temperature(self) -> float:
        return self.config.temperature

    @property
    def endpoint_uri(self) -> str:
        return self.config.endpoint_uri

    def new_session(self, builder: Optional[Callable[[Session], Any]] = None) -> Session:
        session = Session(client=self)
        if builder:
            builder(session)
        return session

    def new_message(self, role: Union[str, Role] = Role.USER, builder: Optional[Callable[[Message], Any]] = None) -> Message:
        message = Message(role=role)
        if builder:
            builder(message)
        return message

    def new_request(self, builder: Optional[Callable[[Request], Request]] = None) -> Union[Request, Response]:
        """
        Creates a request.

        Without ``builder`` the unprepared request is returned. With it,
        ``builder(request)`` configures the request, which is then prepared
        and run; the sealed response is returned.
        """
        request = Request(self)
        if builder is None:
            return request
        configured = builder(request) or request
        return configured.prepare().run()

    def encode_file_as_base64(self, file_path: PathLike) -> Optional[str]:
        return encode_file_as_base64(file_path)

    def close(self) -> None:
        self.provider.close()
