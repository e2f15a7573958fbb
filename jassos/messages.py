#!/usr/bin/env python3
"""
Conversation and generation request types.
"""

from __future__ import annotations

# Standard Library
from dataclasses import dataclass
from typing import Literal

Role = Literal["system", "user", "assistant"]

DEFAULT_MAX_TOKENS = 4096
DEFAULT_TEMPERATURE = 0.7

#============================================


@dataclass(slots=True, frozen=True)
class Message:
	role: Role
	content: str

	def as_dict(self) -> dict[str, str]:
		return {"role": self.role, "content": self.content}


@dataclass(slots=True, frozen=True)
class GenerationOptions:
	"""
	Per-call generation knobs recognized by every adapter.

	Attributes:
		max_tokens: Output token budget.
		temperature: Sampling temperature.
	"""
	max_tokens: int = DEFAULT_MAX_TOKENS
	temperature: float = DEFAULT_TEMPERATURE


#============================================
def split_system(messages: list[Message]) -> tuple[str | None, list[Message]]:
	"""
	Separate the leading system instruction from the turn history.

	Args:
		messages: Ordered conversation.

	Returns:
		Tuple of (system text or None, remaining non-system messages).
	"""
	system: str | None = None
	turns: list[Message] = []
	for message in messages:
		if message.role == "system":
			if system is None:
				system = message.content
			continue
		turns.append(message)
	return system, turns


#============================================
def resolve_options(options: GenerationOptions | None) -> GenerationOptions:
	if options is None:
		return GenerationOptions()
	return options
