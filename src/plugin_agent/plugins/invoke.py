"""Typed calls into dynamically dispatched plugin state."""

from __future__ import annotations

import logging
from typing import Any, TypeVar

from pydantic_core import PydanticSerializationError, to_jsonable_python

from plugin_agent.exceptions import PayloadDecodeError
from plugin_agent.plugins.base import PluginData, decode_value

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def invoke(
    data: PluginData, name: str, request: Any, result_type: type[T]
) -> T:
    """
    Run an operation on a plugin's state object with typed values.

    The request is converted to plain JSON-compatible data before dispatch,
    and the untyped result is checked against ``result_type`` without any
    coercion.

    Args:
        data: The target state object.
        name: The operation name.
        request: The typed request; pydantic models, dataclasses and plain
            values are all accepted.
        result_type: The type the result must have.

    Returns:
        The operation result as ``result_type``.

    Raises:
        PayloadDecodeError: If the request cannot be encoded or the result
            does not fit ``result_type``.

    Example:
        ```python
        count = await invoke(chatgpt_data, "len", True, int)
        ```
    """
    try:
        payload = to_jsonable_python(request)
    except PydanticSerializationError as e:
        raise PayloadDecodeError(
            data.plugin_name, name, f"cannot encode request: {e}"
        ) from e

    logger.debug(f"Invoking '{name}' on plugin '{data.plugin_name}'")
    result = await data.apply(name, payload)

    return decode_value(data.plugin_name, name, result, result_type)
