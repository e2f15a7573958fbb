#!/usr/bin/env python3
from __future__ import annotations

from .anthropic import AnthropicProvider
from .base import ProviderAdapter
from .factory import PROVIDERS, available_providers, create_provider
from .gemini import GeminiProvider
from .ollama import OllamaProvider
from .openai import OpenAIProvider
from .streaming import FragmentStream

__all__ = [
	"AnthropicProvider",
	"FragmentStream",
	"GeminiProvider",
	"OllamaProvider",
	"OpenAIProvider",
	"PROVIDERS",
	"ProviderAdapter",
	"available_providers",
	"create_provider",
]
