"""Inference providers."""

from .base import InferenceProvider, InferenceResult, InferenceUsage, ProviderError
from .anthropic import AnthropicInferenceProvider

__all__ = [
    "InferenceProvider",
    "InferenceResult",
    "InferenceUsage",
    "ProviderError",
    "AnthropicInferenceProvider",
]
