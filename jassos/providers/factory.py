#!/usr/bin/env python3
"""
Build the adapter named by the effective configuration.
"""

from __future__ import annotations

# Standard Library
import logging

# local repo modules
from ..config import ConfigResolver
from ..errors import ProviderNotConfigured, UnknownProvider
from .anthropic import AnthropicProvider
from .base import ProviderAdapter
from .gemini import GeminiProvider
from .ollama import OllamaProvider
from .openai import OpenAIProvider

logger = logging.getLogger(__name__)

PROVIDERS: dict[str, type] = {
	"openai": OpenAIProvider,
	"anthropic": AnthropicProvider,
	"gemini": GeminiProvider,
	"ollama": OllamaProvider,
}

#============================================


def available_providers() -> list[str]:
	return list(PROVIDERS)


#============================================


def create_provider(resolver: ConfigResolver | None = None, model: str | None = None) -> ProviderAdapter:
	"""
	Instantiate a fresh adapter for the active provider.

	Args:
		resolver: Configuration source (default: global/project files).
		model: Optional model override taking precedence over the stored one.

	Returns:
		Adapter owning one credential and one resolved model.
	"""
	if resolver is None:
		resolver = ConfigResolver()
	config = resolver.get_effective()
	provider_id = config.active
	if not provider_id:
		raise ProviderNotConfigured("", "No active provider set. Run: jassos init")
	settings = config.providers.get(provider_id)
	if settings is None:
		raise ProviderNotConfigured(provider_id)
	adapter_cls = PROVIDERS.get(provider_id)
	if adapter_cls is None:
		raise UnknownProvider(provider_id)
	if adapter_cls.requires_api_key and not settings.api_key:
		raise ProviderNotConfigured(
			provider_id,
			f"No API key configured for {provider_id}. Run: jassos init -p {provider_id}",
		)
	adapter = adapter_cls(
		api_key=settings.api_key,
		model=model or settings.model,
		base_url=settings.base_url,
	)
	logger.info("Using %s with model %s", provider_id, adapter.model)
	return adapter
