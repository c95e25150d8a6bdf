"""Tests for the dispatch entry point and typed invocation."""

from typing import Any

import pytest
from pydantic import BaseModel

from plugin_agent.exceptions import (
    NoSuchOperationError,
    PayloadDecodeError,
    ProviderError,
)
from plugin_agent.plugins.base import PluginData
from plugin_agent.plugins.invoke import invoke


class Point(BaseModel):
    x: int
    y: int


class EchoData(PluginData):
    """State object whose operations return whatever they are told to."""

    plugin_name = "Echo"

    def __init__(self):
        self.calls: list[tuple[str, Any]] = []

    async def apply(self, name: str, value: Any) -> Any:
        self.calls.append((name, value))
        if name == "echo":
            return value
        if name == "number":
            return 42
        if name == "point":
            point = self.decode(name, value, Point)
            return {"x": point.y, "y": point.x}
        if name == "fail":
            raise ProviderError("echo", "upstream is down")
        raise self.no_such_operation(name)


class TestDispatch:
    """Tests for PluginData.apply."""

    @pytest.mark.asyncio
    async def test_unknown_operation_names_plugin_and_operation(self):
        data = EchoData()

        with pytest.raises(NoSuchOperationError) as exc_info:
            await data.apply("nonexistent", None)

        assert exc_info.value.plugin_name == "Echo"
        assert exc_info.value.operation == "nonexistent"
        assert "Echo" in str(exc_info.value)
        assert "nonexistent" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_decode_rejects_wrong_shape(self):
        data = EchoData()

        with pytest.raises(PayloadDecodeError) as exc_info:
            await data.apply("point", {"x": "one", "y": 2})

        assert exc_info.value.plugin_name == "Echo"
        assert exc_info.value.operation == "point"

    def test_concrete_state_object_needs_a_name(self):
        with pytest.raises(TypeError, match="plugin_name"):

            class NamelessData(PluginData):
                async def apply(self, name: str, value: Any) -> Any:
                    raise self.no_such_operation(name)

    def test_abstract_state_object_may_omit_name(self):
        class NamedLater(PluginData):
            pass

        class Concrete(NamedLater):
            plugin_name = "Concrete"

            async def apply(self, name: str, value: Any) -> Any:
                return value

        assert Concrete().plugin_name == "Concrete"

    @pytest.mark.asyncio
    async def test_default_close_is_a_no_op(self):
        data = EchoData()

        await data.close()

        assert data.calls == []


class TestInvoke:
    """Tests for invoke."""

    @pytest.mark.asyncio
    async def test_returns_typed_result(self):
        assert await invoke(EchoData(), "number", True, int) == 42

    @pytest.mark.asyncio
    async def test_encodes_models_as_plain_data(self):
        data = EchoData()

        result = await invoke(data, "point", Point(x=1, y=2), Point)

        assert result == Point(x=2, y=1)
        assert data.calls == [("point", {"x": 1, "y": 2})]

    @pytest.mark.asyncio
    async def test_list_results_decode_into_models(self):
        result = await invoke(
            EchoData(), "echo", [{"x": 1, "y": 2}, {"x": 3, "y": 4}], list[Point]
        )

        assert result == [Point(x=1, y=2), Point(x=3, y=4)]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "operation, request_value, result_type",
        [
            ("number", True, str),
            ("number", True, bool),
            ("echo", "5", int),
            ("echo", True, int),
            ("echo", {"x": 1}, Point),
            ("echo", [1, 2], list[str]),
        ],
    )
    async def test_mismatched_result_is_decode_error(
        self, operation, request_value, result_type
    ):
        with pytest.raises(PayloadDecodeError) as exc_info:
            await invoke(EchoData(), operation, request_value, result_type)

        assert exc_info.value.plugin_name == "Echo"
        assert exc_info.value.operation == operation

    @pytest.mark.asyncio
    async def test_unencodable_request_is_decode_error(self):
        data = EchoData()

        with pytest.raises(PayloadDecodeError):
            await invoke(data, "echo", object(), str)

        assert data.calls == []

    @pytest.mark.asyncio
    async def test_unknown_operation_propagates(self):
        with pytest.raises(NoSuchOperationError) as exc_info:
            await invoke(EchoData(), "nonexistent", True, bool)

        assert exc_info.value.operation == "nonexistent"

    @pytest.mark.asyncio
    async def test_operation_failure_propagates_unchanged(self):
        with pytest.raises(ProviderError, match="upstream is down"):
            await invoke(EchoData(), "fail", True, str)
