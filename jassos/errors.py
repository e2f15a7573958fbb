#!/usr/bin/env python3
"""
Error taxonomy shared by the core and the CLI boundary.
"""

from __future__ import annotations

#============================================


class JassosError(RuntimeError):
	"""
	Base class for every error the CLI reports and exits on.
	"""


class ConfigurationError(JassosError):
	"""
	Raised when a persisted configuration record cannot be read.
	"""


class ConfigurationMissing(ConfigurationError):
	"""
	Raised when no configuration exists because init never ran.
	"""

	def __init__(self, message: str = "No configuration found. Run: jassos init") -> None:
		super().__init__(message)


class ProviderNotConfigured(JassosError):
	"""
	Raised when the active or requested provider has no credentials.
	"""

	def __init__(self, provider: str, message: str = "") -> None:
		if not message:
			message = f"Provider {provider} not configured. Run: jassos init -p {provider}"
		super().__init__(message)
		self.provider = provider


class UnknownProvider(JassosError):
	"""
	Raised when a provider id does not match any adapter.
	"""

	def __init__(self, provider: str) -> None:
		super().__init__(f"Unknown provider: {provider}")
		self.provider = provider


class BackendError(JassosError):
	"""
	Raised on transport, authentication or rate-limit failures from a backend.
	"""

	def __init__(self, provider: str, detail: str) -> None:
		super().__init__(f"{provider} backend error: {detail}")
		self.provider = provider
		self.detail = detail
