"""
Inference Provider Interface

The orchestrator talks to language models only through ``InferenceProvider``.
Implementations translate a single system prompt plus user message into a
provider call and normalize the result into ``InferenceResult``.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from ..models.tools import ToolCallRequest


class InferenceUsage(BaseModel):
    """Token usage reported by the provider."""

    prompt_tokens: int = Field(0, ge=0)
    completion_tokens: int = Field(0, ge=0)
    total_tokens: int = Field(0, ge=0)

    def model_post_init(self, __context: Any) -> None:
        if not self.total_tokens:
            self.total_tokens = self.prompt_tokens + self.completion_tokens


class InferenceResult(BaseModel):
    """Normalized result of one inference call."""

    text: str = ""
    usage: InferenceUsage = Field(default_factory=InferenceUsage)
    tool_calls: List[ToolCallRequest] = Field(default_factory=list)
    model: Optional[str] = None
    finish_reason: Optional[str] = None


class InferenceProvider(ABC):
    """
    Abstract base class for inference providers.

    Providers are responsible for:
    - Making the API call
    - Normalizing text, usage and requested tool calls
    - Mapping provider errors to ProviderError

    Providers must NOT contain orchestration logic or cost accounting.
    """

    @abstractmethod
    async def infer(
        self,
        system_prompt: str,
        user_message: str,
        max_tokens: int,
        temperature: float,
        tools: Optional[List[Dict[str, Any]]] = None
    ) -> InferenceResult:
        """
        Run one inference call.

        Args:
            system_prompt: Full system prompt (instructions and context)
            user_message: The user's message
            max_tokens: Completion token limit
            temperature: Sampling temperature
            tools: Tool schemas the model may call, as produced by
                ``Tool.to_provider_schema()``

        Returns:
            InferenceResult with text, usage and any requested tool calls

        Raises:
            ProviderError: For transport, authentication or API errors
        """
        pass

    def get_provider_name(self) -> str:
        """Provider name derived from the class name."""
        class_name = self.__class__.__name__
        for suffix in ("InferenceProvider", "Provider"):
            if class_name.endswith(suffix):
                return class_name[:-len(suffix)].lower()
        return class_name.lower()


class ProviderError(Exception):
    """
    Exception raised by inference providers.

    Attributes:
        message: Error message
        provider: Provider name
        status_code: HTTP status code if applicable
        retry_after: Seconds to wait before retry if applicable
        is_retryable: Whether this error could succeed if retried
        original_error: The original exception if wrapped
    """

    def __init__(
        self,
        message: str,
        provider: str,
        status_code: Optional[int] = None,
        retry_after: Optional[float] = None
    ):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code
        self.retry_after = retry_after
        self.is_retryable = False  # Set by the provider's error mapping
        self.original_error: Optional[Exception] = None
