# src/gptsession/providers/openai_provider.py
"""
HTTP transport for OpenAI-compatible chat completion endpoints.

Performs a single synchronous POST per call with bearer-token
authentication. There is no retry and no streaming: one call, one
round trip.
"""

import json
import logging
from typing import Any, Dict, Optional

import httpx

from ..config.models import ClientConfig
from ..exceptions import ExchangeError, TransportError

logger = logging.getLogger(__name__)

# Used for the connect, write and pool phases; reads use the configured timeout.
CONNECT_TIMEOUT = 30.0


class OpenAIProvider:
    """
    Sends prepared chat completion payloads to the configured endpoint.

    One ``httpx.Client`` is created per provider and reused for every call;
    TLS is used whenever the endpoint URL is ``https``.
    """

    def __init__(self, config: ClientConfig, transport: Optional[httpx.BaseTransport] = None):
        """
        Initializes the provider.

        Args:
            config: The effective client configuration (token, endpoint, timeout).
            transport: Optional httpx transport, e.g. ``httpx.MockTransport`` in tests.
        """
        self.endpoint_uri = config.endpoint_uri
        self.timeout = config.timeout
        self.log_raw_payloads_enabled = config.log_raw_payloads
        self._token = config.token
        self._client: Optional[httpx.Client] = httpx.Client(
            timeout=httpx.Timeout(connect=CONNECT_TIMEOUT, read=self.timeout, write=CONNECT_TIMEOUT, pool=CONNECT_TIMEOUT),
            transport=transport,
        )
        logger.debug(f"OpenAIProvider initialized for endpoint {self.endpoint_uri}")

    def get_name(self) -> str:
        return "openai"

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self._token}",
            "Content-Type": "application/json",
        }

    def post_chat_completion(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Posts a chat completion payload and returns the decoded answer.

        Args:
            payload: The JSON body to send.

        Returns:
            The decoded JSON response body.

        Raises:
            TransportError: If the endpoint answers with a non-2xx status.
            ExchangeError: On connection failures, timeouts or an undecodable body.
        """
        if self._client is None:
            raise ExchangeError("OpenAIProvider is closed.")

        if self.log_raw_payloads_enabled and logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"RAW LLM REQUEST ({self.get_name()} @ {payload.get('model')}): {json.dumps(payload, indent=2)}")

        logger.debug(f"Sending request to {self.endpoint_uri}: model='{payload.get('model')}', num_messages={len(payload.get('messages', []))}")

        try:
            response = self._client.post(self.endpoint_uri, json=payload, headers=self._headers())
        except httpx.TimeoutException as e:
            logger.error(f"Request to {self.endpoint_uri} timed out after {self.timeout} seconds.")
            raise ExchangeError(f"Request timed out after {self.timeout}s: {e}")
        except httpx.RequestError as e:
            logger.error(f"Request to {self.endpoint_uri} failed: {e}")
            raise ExchangeError(f"Request to {self.endpoint_uri} failed: {e}")

        if not response.is_success:
            logger.error(f"Completion endpoint returned status {response.status_code} ({response.reason_phrase}).")
            raise TransportError(response.status_code, response.reason_phrase)

        if self.log_raw_payloads_enabled and logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"RAW LLM RESPONSE ({self.get_name()}): {response.text}")

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Could not decode completion response as JSON: {e}")
            raise ExchangeError(f"Invalid JSON in completion response: {e}")

    def close(self) -> None:
        """Closes the underlying HTTP client."""
        if self._client:
            self._client.close()
            logger.debug("OpenAIProvider HTTP client closed.")
            self._client = None
