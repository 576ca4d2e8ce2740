# src/gptsession/models.py
"""
Core data models for the gptsession library.

This module defines the chat turn model (``Message``) used to build
wire-format message records, the ``Role`` enumeration, and the two-phase
result types of a completion request: the mutable ``ResponseBuilder`` and
the immutable ``Response`` it seals.
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .attachments import encode_image_data_uri

logger = logging.getLogger(__name__)


class Role(str, Enum):
    """
    Enumeration of the well-known roles in a conversation.
    Messages store roles as plain strings, so other values remain usable.
    """
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    FUNCTION = "function"

    @classmethod
    def _missing_(cls, value: object): # type: ignore[misc]
        """Handles case-insensitive matching, e.g. "User" maps to Role.USER."""
        if isinstance(value, str):
            lower_value = value.lower()
            for member in cls:
                if member.value == lower_value:
                    return member
        return None


class Message(BaseModel):
    """
    A single chat turn, built through chained setters.

    Setters return the message itself, so a turn can be built inline::

        message = Message().set_role("user").set_text("Describe this").set_image("cat.png")

    Attributes:
        role: The role of the entity producing the message.
        text: Optional text content.
        image: Optional image as a ``data:`` URI.
    """
    model_config = ConfigDict(validate_assignment=True)

    role: str = Field(default=Role.USER.value, description="Role of the message sender.")
    text: Optional[str] = Field(default=None, description="Text content of the message.")
    image: Optional[str] = Field(default=None, description="Image content as a data URI.")

    @field_validator("role", mode="before")
    @classmethod
    def normalize_role(cls, value: Any) -> str:
        """Stores Role members by value and leaves other strings untouched."""
        if isinstance(value, Role):
            return value.value
        return value

    def set_text(self, text: Optional[str]) -> "Message":
        self.text = text
        return self

    def set_role(self, role: Union[str, Role]) -> "Message":
        self.role = role
        return self

    def set_image(self, path: Optional[str]) -> "Message":
        """
        Attaches the image stored at ``path``.

        Passing None is a no-op. If the file cannot be encoded the image
        slot is left as it was and the message stays text-only.
        """
        if not path:
            return self

        data_uri = encode_image_data_uri(path)
        if data_uri is None:
            logger.debug(f"Image '{path}' not attached; message stays text-only.")
            return self
        self.image = data_uri
        return self

    def set_image_data(self, data_uri: Optional[str]) -> "Message":
        """Sets an already encoded image data URI, bypassing file encoding."""
        self.image = data_uri
        return self

    def to_dict(self) -> Dict[str, Any]:
        """
        Serializes the message to its wire-format record.

        With an image, ``content`` is a list holding the image part followed
        by the text part (if any). Otherwise ``content`` is the bare text, or
        absent when the message has no text.
        """
        record: Dict[str, Any] = {"role": self.role}

        if self.image:
            parts: List[Dict[str, Any]] = [
                {"type": "image_url", "image_url": {"url": self.image}},
            ]
            if self.text is not None:
                parts.append({"type": "text", "text": self.text})
            record["content"] = parts
        elif self.text is not None:
            record["content"] = self.text

        return record

    def clone(self) -> "Message":
        """Returns an independent copy of this message."""
        return self.model_copy(deep=True)


class Response(BaseModel):
    """
    The immutable outcome of a completion request.

    Attributes:
        request: The request that produced this response (informational).
        success: Whether the exchange succeeded.
        error: Error description, set when the exchange failed.
        completion: The reply text extracted from the model answer.
        function_call: The raw function call descriptor returned by the model.
    """
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    request: Any = Field(default=None, exclude=True, repr=False)
    success: bool = False
    error: Optional[str] = None
    completion: Optional[str] = None
    function_call: Optional[Dict[str, Any]] = None

    def __bool__(self) -> bool:
        return self.success


class ResponseBuilder:
    """
    Collects the parts of a ``Response`` and seals them exactly once.

    ``seal()`` returns the response on the first call and None on every
    later call, so a builder cannot hand out a second result.
    """

    def __init__(self, request: Any = None):
        self._request = request
        self._success = False
        self._error: Optional[str] = None
        self._completion: Optional[str] = None
        self._function_call: Optional[Dict[str, Any]] = None
        self._valid = True

    @classmethod
    def succeeded(cls, request: Any = None) -> "ResponseBuilder":
        return cls(request).success(True)

    @classmethod
    def failed(cls, request: Any, error: str) -> "ResponseBuilder":
        return cls(request).success(False).error(error)

    def success(self, value: bool = True) -> "ResponseBuilder":
        self._success = value
        return self

    def error(self, message: Optional[str]) -> "ResponseBuilder":
        self._error = message
        return self

    def completion(self, text: Optional[str]) -> "ResponseBuilder":
        self._completion = text
        return self

    def function_call(self, call: Optional[Dict[str, Any]]) -> "ResponseBuilder":
        self._function_call = call
        return self

    @property
    def sealed(self) -> bool:
        return not self._valid

    def seal(self) -> Optional[Response]:
        if not self._valid:
            logger.warning("ResponseBuilder.seal() called on an already sealed builder.")
            return None

        response = Response(
            request=self._request,
            success=self._success,
            error=self._error,
            completion=self._completion,
            function_call=self._function_call,
        )
        self._valid = False
        return response
