# src/gptsession/request.py
"""
The one-shot completion request.

A ``Request`` moves through a fixed lifecycle::

    unattached -> attached(session) -> prepared -> completed

``prepare()`` snapshots the session history and sampling settings into an
outbound payload; ``run()`` consumes that payload in exactly one network
exchange and seals a ``Response``. ``run()`` never raises: every failure is
returned as an unsuccessful response.
"""

import copy
import logging
import re
from typing import TYPE_CHECKING, Any, Dict, Optional

from .exceptions import NotPreparedError, RequestError, TransportError
from .models import Response, ResponseBuilder
from .sessions.session import Session
from .tools import ToolManager

if TYPE_CHECKING:
    from .api import GPTClient

logger = logging.getLogger(__name__)

# Sampling constants sent with every request. The configured temperature
# is intentionally not used here.
TOP_P = 0.1
TEMPERATURE = 0.2

# Opening line of a markdown code fence at the very start of a completion.
_LEADING_FENCE_RE = re.compile(r"\A```.*\n")


def strip_leading_fence(text: str) -> str:
    """Removes a single leading ```` ```lang ```` line; the closing fence is kept."""
    return _LEADING_FENCE_RE.sub("", text, count=1)


class Request:
    """
    Builds a completion payload from a session and performs the exchange.
    """

    def __init__(self, client: "GPTClient"):
        self._client = client
        self._session: Optional[Session] = None
        self._tools: Optional[ToolManager] = None
        self._payload: Optional[Dict[str, Any]] = None

    def __repr__(self) -> str:
        return f"Request(prepared={self.prepared}, tools={self._tools is not None})"

    def attach_session(self, session: Optional[Session] = None) -> "Request":
        """Attaches ``session``, or a new empty session when None."""
        self._session = session if session is not None else Session(client=self._client)
        return self

    def attach_tools(self, tools: Optional[ToolManager]) -> "Request":
        self._tools = tools
        return self

    @property
    def session(self) -> Session:
        """The attached session; an empty one is attached on first access."""
        if self._session is None:
            self.attach_session()
        return self._session # type: ignore[return-value]

    @property
    def tools(self) -> Optional[ToolManager]:
        return self._tools

    @property
    def prepared(self) -> bool:
        return self._payload is not None

    @property
    def payload(self) -> Optional[Dict[str, Any]]:
        """A copy of the prepared payload, or None when not prepared."""
        return copy.deepcopy(self._payload)

    def _fail(self, error: str) -> ResponseBuilder:
        return ResponseBuilder.failed(self, error)

    def _succeed(self) -> ResponseBuilder:
        return ResponseBuilder.succeeded(self)

    def prepare(self) -> "Request":
        """
        Snapshots the session into the outbound payload.

        Calling it again replaces the previous snapshot.
        """
        client = self._client
        payload: Dict[str, Any] = {
            "model": client.model,
            "max_tokens": client.max_tokens,
            "n": client.n,
            "top_p": TOP_P,
            "temperature": TEMPERATURE,
            "messages": self.session.dump(),
        }
        if self._tools is not None:
            payload["functions"] = self._tools.serialized_definition()

        self._payload = payload
        logger.debug(f"Request prepared: model='{client.model}', messages={len(payload['messages'])}, "
                     f"functions={len(payload.get('functions', []))}")
        return self

    def run(self) -> Response:
        """
        Performs the exchange with the prepared payload.

        The prepared payload is consumed whatever the outcome; running again
        requires another ``prepare()``.

        Returns:
            The sealed response. On failure ``success`` is False and
            ``error`` describes the problem.
        """
        if self._payload is None:
            logger.warning("Request.run() called before prepare().")
            return self._seal(self._fail(str(NotPreparedError())))

        payload, self._payload = self._payload, None

        try:
            body = self._client.provider.post_chat_completion(payload)

            message = body["choices"][0]["message"]
            function_call = message.get("function_call")
            if function_call and self._tools is not None:
                self._tools.try_call(function_call)

            completion = message.get("content")
            if completion is not None:
                completion = strip_leading_fence(f"{completion}\n")

            return self._seal(self._succeed().function_call(function_call).completion(completion))
        except TransportError as e:
            return self._seal(self._fail(str(e)))
        except Exception as e:
            logger.error(f"Completion exchange failed: {e}", exc_info=True)
            return self._seal(self._fail(str(e)))

    def _seal(self, builder: ResponseBuilder) -> Response:
        response = builder.seal()
        if response is None:
            raise RequestError("Response builder was already sealed.")
        if response.success:
            logger.info(f"Completion received (function_call={response.function_call is not None}).")
        else:
            logger.info(f"Completion failed: {response.error}")
        return response
