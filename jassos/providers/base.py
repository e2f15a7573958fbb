#!/usr/bin/env python3
"""
Adapter interface for LLM backends.
"""

from __future__ import annotations

# Standard Library
from typing import Iterator, Protocol

# local repo modules
from ..messages import GenerationOptions, Message


class ProviderAdapter(Protocol):
	name: str
	model: str

	def generate(self, messages: list[Message], options: GenerationOptions | None = None) -> str:
		"""
		Send a conversation and return the first textual response segment.
		"""

	def stream_generate(
		self, messages: list[Message], options: GenerationOptions | None = None
	) -> Iterator[str]:
		"""
		Send a conversation and yield text fragments as the backend emits them.
		"""
