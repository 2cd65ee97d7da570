"""Unit tests for the Anthropic inference provider."""

from unittest.mock import AsyncMock, Mock, patch

import anthropic
import httpx
import pytest

from workflow_agents.providers.anthropic import (
    AnthropicInferenceProvider,
    map_anthropic_error,
    parse_messages_response,
)
from workflow_agents.providers.base import InferenceUsage, ProviderError

MESSAGES_URL = "https://api.anthropic.com/v1/messages"


def make_message(blocks, input_tokens=10, output_tokens=5):
    message = Mock()
    message.content = blocks
    message.stop_reason = "end_turn"
    message.model = "claude-test"
    message.usage = Mock(input_tokens=input_tokens, output_tokens=output_tokens)
    return message


def tool_use_block(name, arguments, block_id="toolu_1"):
    block = Mock(type="tool_use", input=arguments, id=block_id)
    block.name = name
    return block


class TestParseMessagesResponse:
    """Test response normalization."""

    def test_text_and_usage(self):
        """Test text blocks are joined and usage is totalled."""
        message = make_message([Mock(type="text", text="Hello "), Mock(type="text", text="world")])

        result = parse_messages_response(message)

        assert result.text == "Hello world"
        assert result.usage.prompt_tokens == 10
        assert result.usage.completion_tokens == 5
        assert result.usage.total_tokens == 15
        assert result.model == "claude-test"
        assert result.finish_reason == "end_turn"
        assert result.tool_calls == []

    def test_tool_use_blocks(self):
        """Test tool_use blocks become tool call requests."""
        message = make_message([
            Mock(type="text", text="Checking."),
            tool_use_block("scan_for_secrets", {"workflow_code": "x"}),
        ])

        result = parse_messages_response(message)

        assert result.text == "Checking."
        assert len(result.tool_calls) == 1
        assert result.tool_calls[0].tool_name == "scan_for_secrets"
        assert result.tool_calls[0].arguments == {"workflow_code": "x"}
        assert result.tool_calls[0].id == "toolu_1"

    def test_usage_total_defaults_to_sum(self):
        """Test total tokens are derived when not given."""
        assert InferenceUsage(prompt_tokens=3, completion_tokens=4).total_tokens == 7
        assert InferenceUsage(prompt_tokens=3, completion_tokens=4, total_tokens=9).total_tokens == 9


class TestErrorMapping:
    """Test mapping of SDK exceptions."""

    def test_rate_limit_is_retryable(self):
        """Test 429 maps to a retryable error with retry-after."""
        response = httpx.Response(
            429,
            request=httpx.Request("POST", MESSAGES_URL),
            headers={"retry-after": "2"},
        )
        error = anthropic.RateLimitError("rate limited", response=response, body=None)

        mapped = map_anthropic_error(error)

        assert isinstance(mapped, ProviderError)
        assert mapped.provider == "anthropic"
        assert mapped.status_code == 429
        assert mapped.retry_after == 2.0
        assert mapped.is_retryable is True
        assert mapped.original_error is error

    def test_authentication_is_not_retryable(self):
        """Test 401 maps to a non-retryable error."""
        response = httpx.Response(401, request=httpx.Request("POST", MESSAGES_URL))
        error = anthropic.AuthenticationError("bad key", response=response, body=None)

        mapped = map_anthropic_error(error)

        assert mapped.status_code == 401
        assert mapped.is_retryable is False
        assert "authentication failed" in str(mapped)

    def test_connection_error_is_retryable(self):
        """Test transport failures are retryable."""
        error = anthropic.APIConnectionError(request=httpx.Request("POST", MESSAGES_URL))

        assert map_anthropic_error(error).is_retryable is True

    def test_unknown_error(self):
        """Test arbitrary exceptions are wrapped."""
        mapped = map_anthropic_error(ValueError("odd"))

        assert mapped.status_code is None
        assert mapped.is_retryable is False
        assert "odd" in str(mapped)


class TestAnthropicInferenceProvider:
    """Test the provider against a mocked client."""

    @pytest.fixture
    def provider(self):
        """Create provider instance."""
        with patch.dict('os.environ', {'ANTHROPIC_API_KEY': 'test-key'}):
            return AnthropicInferenceProvider(model="claude-test")

    @pytest.mark.asyncio
    async def test_infer_builds_request(self, provider):
        """Test request parameters sent to messages.create."""
        client = Mock()
        client.messages.create = AsyncMock(return_value=make_message([Mock(type="text", text="ok")]))
        provider._client = client
        tools = [{"name": "t", "description": "d", "input_schema": {"type": "object"}}]

        result = await provider.infer("system", "user", max_tokens=100, temperature=0.3, tools=tools)

        assert result.text == "ok"
        kwargs = client.messages.create.call_args.kwargs
        assert kwargs["model"] == "claude-test"
        assert kwargs["system"] == "system"
        assert kwargs["messages"] == [{"role": "user", "content": "user"}]
        assert kwargs["max_tokens"] == 100
        assert kwargs["temperature"] == 0.3
        assert kwargs["tools"] == tools

    @pytest.mark.asyncio
    async def test_infer_omits_empty_tools(self, provider):
        """Test no tools key when the agent has no tools."""
        client = Mock()
        client.messages.create = AsyncMock(return_value=make_message([Mock(type="text", text="ok")]))
        provider._client = client

        await provider.infer("system", "user", max_tokens=100, temperature=0.3)

        assert "tools" not in client.messages.create.call_args.kwargs

    @pytest.mark.asyncio
    async def test_infer_maps_errors(self, provider):
        """Test SDK errors surface as ProviderError."""
        client = Mock()
        client.messages.create = AsyncMock(side_effect=RuntimeError("boom"))
        provider._client = client

        with pytest.raises(ProviderError) as exc_info:
            await provider.infer("system", "user", max_tokens=100, temperature=0.3)

        assert "boom" in str(exc_info.value)

    def test_missing_api_key(self):
        """Test the client is not created without a key."""
        with patch.dict('os.environ', {}, clear=True):
            provider = AnthropicInferenceProvider()

        assert provider.is_available() is False
        with pytest.raises(ProviderError) as exc_info:
            provider.client
        assert exc_info.value.status_code == 401

    def test_provider_name(self, provider):
        assert provider.get_provider_name() == "anthropic"
