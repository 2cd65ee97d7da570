import logging
import os
from typing import Any, Dict, List, Optional

import anthropic
import httpx
from anthropic import AsyncAnthropic
from dotenv import load_dotenv

from ..config.constants import DEFAULT_MODEL, ENV_API_KEY
from ..models.tools import ToolCallRequest
from .base import InferenceProvider, InferenceResult, InferenceUsage, ProviderError

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504, 529}


def parse_messages_response(response: Any) -> InferenceResult:
    """Normalize an Anthropic ``messages.create`` response."""
    text_parts: List[str] = []
    tool_calls: List[ToolCallRequest] = []
    for block in getattr(response, "content", None) or []:
        block_type = getattr(block, "type", None)
        if block_type == "text":
            text_parts.append(getattr(block, "text", "") or "")
        elif block_type == "tool_use":
            tool_calls.append(
                ToolCallRequest(
                    tool_name=block.name,
                    arguments=dict(getattr(block, "input", None) or {}),
                    id=getattr(block, "id", None),
                )
            )

    usage = getattr(response, "usage", None)
    prompt_tokens = int(getattr(usage, "input_tokens", 0) or 0)
    completion_tokens = int(getattr(usage, "output_tokens", 0) or 0)

    return InferenceResult(
        text="".join(text_parts),
        usage=InferenceUsage(prompt_tokens=prompt_tokens, completion_tokens=completion_tokens),
        tool_calls=tool_calls,
        model=getattr(response, "model", None),
        finish_reason=getattr(response, "stop_reason", None),
    )


def map_anthropic_error(error: Exception) -> ProviderError:
    """Map an Anthropic SDK or transport exception to ProviderError."""
    status_code = getattr(error, "status_code", None)
    retry_after = None
    response = getattr(error, "response", None)
    if response is not None and hasattr(response, "headers"):
        header = response.headers.get("retry-after")
        if header:
            try:
                retry_after = float(header)
            except ValueError:
                pass

    if isinstance(error, anthropic.RateLimitError):
        message = f"Anthropic rate limit exceeded: {error}"
        status_code = status_code or 429
    elif isinstance(error, anthropic.AuthenticationError):
        message = f"Anthropic authentication failed: {error}"
        status_code = status_code or 401
    else:
        message = f"Anthropic API error: {error}"

    provider_error = ProviderError(
        message=message,
        provider="anthropic",
        status_code=status_code,
        retry_after=retry_after
    )
    provider_error.is_retryable = (
        status_code in RETRYABLE_STATUS_CODES
        or isinstance(error, (anthropic.APITimeoutError, anthropic.APIConnectionError))
        or isinstance(error, (httpx.TimeoutException, httpx.ConnectError))
    )
    provider_error.original_error = error
    return provider_error


class AnthropicInferenceProvider(InferenceProvider):
    """Claude via the Anthropic Messages API."""

    def __init__(self, api_key: Optional[str] = None, model: str = DEFAULT_MODEL):
        self._client: Optional[AsyncAnthropic] = None
        self._api_key = api_key or os.getenv(ENV_API_KEY)
        self.model = model

    @property
    def client(self) -> AsyncAnthropic:
        """Lazy initialization of Anthropic client."""
        if self._client is None:
            if not self._api_key:
                raise ProviderError(
                    f"Anthropic API key not found; set {ENV_API_KEY}",
                    provider="anthropic",
                    status_code=401
                )
            self._client = AsyncAnthropic(api_key=self._api_key)
        return self._client

    def is_available(self) -> bool:
        return bool(self._api_key)

    async def infer(
        self,
        system_prompt: str,
        user_message: str,
        max_tokens: int,
        temperature: float,
        tools: Optional[List[Dict[str, Any]]] = None
    ) -> InferenceResult:
        params: Dict[str, Any] = {
            "model": self.model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "system": system_prompt,
            "messages": [{"role": "user", "content": user_message}],
        }
        if tools:
            params["tools"] = tools

        client = self.client
        try:
            response = await client.messages.create(**params)
        except Exception as e:
            raise map_anthropic_error(e) from e

        result = parse_messages_response(response)
        logger.debug(
            f"[provider=anthropic model={self.model}] Token usage "
            f"prompt_tokens={result.usage.prompt_tokens} "
            f"completion_tokens={result.usage.completion_tokens} "
            f"tool_calls={len(result.tool_calls)}"
        )
        return result
