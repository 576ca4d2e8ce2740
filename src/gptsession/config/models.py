# src/gptsession/config/models.py
"""
Pydantic model for the effective client configuration.

All values are resolved once, when the client is created, from explicit
arguments, the ``.openai.yaml`` file and the environment (see
``gptsession.config.loader``). Request code reads plain attributes and
never repeats the fallback chain.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_ENDPOINT_URI = "https://api.openai.com/v1/chat/completions"
DEFAULT_MAX_TOKENS = 150
DEFAULT_N = 1
DEFAULT_TEMPERATURE = 0.7
DEFAULT_READ_TIMEOUT = 600.0


class ClientConfig(BaseModel):
    """
    Effective configuration of a ``GPTClient``.

    ``temperature`` is exposed for callers but is not sent with requests;
    request payloads use fixed sampling constants.
    """
    model_config = ConfigDict(frozen=True)

    token: str = Field(description="Bearer token for the completion endpoint.")
    model: str = Field(description="Model identifier sent with every request.")
    max_tokens: int = Field(DEFAULT_MAX_TOKENS, description="Maximum tokens to generate per completion.")
    n: int = Field(DEFAULT_N, description="Number of completions to request.")
    temperature: float = Field(DEFAULT_TEMPERATURE, description="Configured sampling temperature (not sent).")
    endpoint_uri: str = Field(DEFAULT_ENDPOINT_URI, description="Chat completion endpoint URL.")
    timeout: float = Field(DEFAULT_READ_TIMEOUT, description="Read timeout for the exchange, in seconds.")
    log_raw_payloads: bool = Field(False, description="Log request and response bodies at DEBUG level.")
    config_file: Optional[str] = Field(None, description="The configuration file the values came from, if any.")

    @field_validator("token", "model")
    @classmethod
    def check_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("must not be empty")
        return v.strip()

    @field_validator("max_tokens", "n")
    @classmethod
    def check_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("must be a positive integer")
        return v

    @field_validator("endpoint_uri")
    @classmethod
    def check_endpoint(cls, v: str) -> str:
        if not v.startswith(("https://", "http://")):
            raise ValueError(f"endpoint_uri must be an http(s) URL, got '{v}'")
        return v
