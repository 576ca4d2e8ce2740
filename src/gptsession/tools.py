# src/gptsession/tools.py
"""
Function definitions offered to the model and dispatch of its function calls.

A ``ToolManager`` holds callables together with their JSON Schema
descriptions. Requests include ``serialized_definition()`` in the payload's
``functions`` field, and hand any ``function_call`` the model returns to
``try_call()``.
"""

import json
import logging
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

EMPTY_PARAMETERS_SCHEMA: Dict[str, Any] = {"type": "object", "properties": {}}


class Tool(BaseModel):
    """
    Definition of a function the model may call.

    Attributes:
        name: Function name, as the model will reference it.
        description: What the function does.
        parameters: JSON Schema of the function arguments.
    """
    name: str = Field(min_length=1)
    description: str = ""
    parameters: Dict[str, Any] = Field(default_factory=lambda: dict(EMPTY_PARAMETERS_SCHEMA))


class ToolManager:
    """
    Registry of callable functions exposed to the model.
    """

    def __init__(self):
        self._tool_definitions: Dict[str, Tool] = {}
        self._implementations: Dict[str, Callable[..., Any]] = {}

    def __len__(self) -> int:
        return len(self._tool_definitions)

    def register(
        self,
        name: str,
        func: Callable[..., Any],
        description: str = "",
        parameters: Optional[Dict[str, Any]] = None,
    ) -> "ToolManager":
        """
        Registers ``func`` under ``name``. A later registration with the same
        name replaces the earlier one.
        """
        tool = Tool(name=name, description=description or (func.__doc__ or "").strip(),
                    parameters=parameters or dict(EMPTY_PARAMETERS_SCHEMA))
        if name in self._tool_definitions:
            logger.warning(f"Tool '{name}' is already registered; replacing it.")
        self._tool_definitions[name] = tool
        self._implementations[name] = func
        logger.debug(f"Registered tool '{name}'")
        return self

    def tool(self, name: Optional[str] = None, description: str = "",
             parameters: Optional[Dict[str, Any]] = None) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Decorator form of ``register``."""
        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            self.register(name or func.__name__, func, description, parameters)
            return func
        return decorator

    def get_tool_names(self) -> List[str]:
        return list(self._tool_definitions.keys())

    def has_tool(self, tool_name: str) -> bool:
        return tool_name in self._tool_definitions

    def serialized_definition(self) -> List[Dict[str, Any]]:
        """Returns the definitions in the wire format of the ``functions`` field."""
        return [tool.model_dump() for tool in self._tool_definitions.values()]

    def try_call(self, call: Optional[Dict[str, Any]]) -> Any:
        """
        Dispatches a function call descriptor returned by the model.

        The descriptor holds ``name`` and ``arguments``, where ``arguments``
        is a JSON object encoded as a string (or already a dict). Unknown
        functions, undecodable arguments and errors raised by the function
        are logged and yield None; this method does not raise.

        Returns:
            The function's return value, or None.
        """
        if not call:
            return None
        if not isinstance(call, dict):
            logger.error(f"Function call descriptor is not an object: {call!r}")
            return None

        tool_name = call.get("name")
        if tool_name not in self._implementations:
            logger.error(f"Model called unknown function '{tool_name}'. Available: {self.get_tool_names()}")
            return None

        raw_arguments = call.get("arguments") or {}
        try:
            arguments = json.loads(raw_arguments) if isinstance(raw_arguments, str) else dict(raw_arguments)
        except (json.JSONDecodeError, TypeError, ValueError) as e:
            logger.error(f"Invalid arguments for function '{tool_name}': {e}")
            return None
        if not isinstance(arguments, dict):
            logger.error(f"Arguments for function '{tool_name}' must be a JSON object, got {type(arguments).__name__}.")
            return None

        logger.debug(f"Calling function '{tool_name}' with arguments: {arguments}")
        try:
            result = self._implementations[tool_name](**arguments)
        except TypeError as e:
            logger.error(f"Invalid arguments for function '{tool_name}': {e}", exc_info=True)
            return None
        except Exception as e:
            logger.error(f"Error executing function '{tool_name}': {e}", exc_info=True)
            return None

        logger.debug(f"Function '{tool_name}' executed successfully")
        return result
