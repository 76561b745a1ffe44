"""
Tool Registry Tests

Registration rules and the dispatch boundary.
"""
import pytest
from pydantic import BaseModel

from hyperindex_mcp.envelope import DomainError, ErrorKind, ToolResponse
from hyperindex_mcp.registry import ToolRegistrationError, ToolRegistry
from hyperindex_mcp.schema import Text, ToolParams


class EchoParams(ToolParams):
    message: Text


def echo(params: EchoParams) -> ToolResponse:
    return ToolResponse.text(params.message)


class TestRegistration:
    def test_distinct_names_are_independently_dispatchable(self):
        registry = ToolRegistry()
        registry.register("echo", "Echo", EchoParams, echo)
        registry.register("shout", "Shout", EchoParams, lambda p: p.message.upper())
        assert registry.names() == ["echo", "shout"]
        assert len(registry) == 2
        assert "echo" in registry

    def test_duplicate_name_is_fatal(self):
        registry = ToolRegistry()
        registry.register("echo", "Echo", EchoParams, echo)
        with pytest.raises(ToolRegistrationError, match="already registered"):
            registry.register("echo", "Echo again", EchoParams, echo)

    def test_empty_name_rejected(self):
        with pytest.raises(ToolRegistrationError):
            ToolRegistry().register("  ", "Blank", EchoParams, echo)

    def test_schema_must_be_a_model_class(self):
        with pytest.raises(ToolRegistrationError, match="pydantic model"):
            ToolRegistry().register("echo", "Echo", {"message": "string"}, echo)

    def test_unrenderable_schema_is_malformed(self):
        class Opaque:
            pass

        class BadParams(BaseModel):
            model_config = {"arbitrary_types_allowed": True}
            thing: Opaque

        with pytest.raises(ToolRegistrationError, match="malformed schema"):
            ToolRegistry().register("bad", "Bad", BadParams, echo)

    def test_handler_must_be_callable(self):
        with pytest.raises(ToolRegistrationError, match="not callable"):
            ToolRegistry().register("echo", "Echo", EchoParams, "echo")

    def test_descriptor_is_immutable(self):
        registry = ToolRegistry()
        descriptor = registry.register("echo", "Echo", EchoParams, echo)
        with pytest.raises(AttributeError):
            descriptor.name = "other"
        assert registry.get("echo") is descriptor

    def test_get_unknown(self):
        with pytest.raises(KeyError):
            ToolRegistry().get("missing")


class TestDispatch:
    @pytest.fixture
    def registry(self):
        registry = ToolRegistry()
        registry.register("echo", "Echo", EchoParams, echo)
        return registry

    async def test_success(self, registry):
        response = await registry.dispatch("echo", {"message": "hi"})
        assert response.is_error is False
        assert response.joined_text == "hi"

    async def test_unknown_tool_is_in_band(self, registry):
        response = await registry.dispatch("nope", {})
        assert response.is_error is True
        assert "Tool 'nope' not found" in response.joined_text
        assert "echo" in response.joined_text

    async def test_invalid_params_never_reach_handler(self):
        calls = []
        registry = ToolRegistry()
        registry.register("echo", "Echo", EchoParams, lambda p: calls.append(p))
        response = await registry.dispatch("echo", {"message": 42})
        assert response.is_error is True
        assert "Invalid parameters for tool 'echo'" in response.joined_text
        assert calls == []

    async def test_handler_exception_becomes_error_envelope(self):
        def boom(params):
            raise RuntimeError("kaboom")

        registry = ToolRegistry()
        registry.register("boom", "Boom", EchoParams, boom)
        response = await registry.dispatch("boom", {"message": "x"})
        assert response.is_error is True
        assert "kaboom" in response.joined_text

        # the registry keeps serving after a fault
        response = await registry.dispatch("boom", {"message": "again"})
        assert response.is_error is True

    async def test_exception_without_message_uses_class_name(self):
        def boom(params):
            raise KeyError()

        registry = ToolRegistry()
        registry.register("boom", "Boom", EchoParams, boom)
        response = await registry.dispatch("boom", {"message": "x"})
        assert "KeyError" in response.joined_text

    async def test_async_handler(self):
        async def later(params):
            return ToolResponse.text(params.message[::-1])

        registry = ToolRegistry()
        registry.register("reverse", "Reverse", EchoParams, later)
        response = await registry.dispatch("reverse", {"message": "abc"})
        assert response.joined_text == "cba"

    async def test_domain_error_is_converted(self):
        registry = ToolRegistry()
        registry.register(
            "deny", "Deny", EchoParams, lambda p: DomainError(ErrorKind.UNSUPPORTED, "not today")
        )
        response = await registry.dispatch("deny", {"message": "x"})
        assert response.is_error is True
        assert response.joined_text == "not today"

    async def test_plain_string_is_wrapped(self):
        registry = ToolRegistry()
        registry.register("plain", "Plain", EchoParams, lambda p: p.message)
        response = await registry.dispatch("plain", {"message": "ok"})
        assert response.is_error is False
        assert response.joined_text == "ok"

    async def test_unsupported_result_type(self):
        registry = ToolRegistry()
        registry.register("num", "Num", EchoParams, lambda p: 42)
        response = await registry.dispatch("num", {"message": "x"})
        assert response.is_error is True
        assert "unsupported result type: int" in response.joined_text


def test_wire_format():
    assert ToolResponse.error("bad").to_wire() == {
        "content": [{"type": "text", "text": "bad"}],
        "isError": True,
    }
    assert ToolResponse.text("a", "b").to_wire()["isError"] is False
