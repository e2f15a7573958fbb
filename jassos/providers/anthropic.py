#!/usr/bin/env python3
"""
Anthropic messages adapter.
"""

from __future__ import annotations

# PIP3 modules
import anthropic

# local repo modules
from ..errors import BackendError
from ..messages import GenerationOptions, Message, resolve_options, split_system
from .streaming import FragmentStream


class AnthropicProvider:
	name = "anthropic"
	default_model = "claude-sonnet-4-5-20250929"
	requires_api_key = True

	def __init__(
		self,
		api_key: str,
		model: str | None = None,
		base_url: str | None = None,
		client: object | None = None,
	) -> None:
		self.model = model or self.default_model
		if client is None:
			client = anthropic.Anthropic(api_key=api_key, base_url=base_url)
		self._client = client

	#============================================
	def _request(self, messages: list[Message], options: GenerationOptions | None) -> dict:
		opts = resolve_options(options)
		system, turns = split_system(messages)
		request = {
			"model": self.model,
			"max_tokens": opts.max_tokens,
			"messages": [message.as_dict() for message in turns],
			"temperature": opts.temperature,
		}
		if system is not None:
			request["system"] = system
		return request

	#============================================
	def generate(self, messages: list[Message], options: GenerationOptions | None = None) -> str:
		try:
			response = self._client.messages.create(**self._request(messages, options))
		except anthropic.AnthropicError as exc:
			raise BackendError(self.name, str(exc)) from exc
		for block in response.content or []:
			if getattr(block, "type", None) == "text":
				return block.text
		return ""

	#============================================
	def stream_generate(
		self, messages: list[Message], options: GenerationOptions | None = None
	) -> FragmentStream:
		request = self._request(messages, options)

		def _open():
			return self._client.messages.create(stream=True, **request)

		return FragmentStream(self.name, _open, _FirstTextBlock(), errors=(anthropic.AnthropicError,))


#============================================


class _FirstTextBlock:
	"""
	Stateful unwrap keeping only the deltas of the first text content block,
	so the streamed text matches what generate() returns.
	"""

	def __init__(self) -> None:
		self.index: int | None = None

	def __call__(self, event) -> str | None:
		event_type = getattr(event, "type", None)
		if event_type == "content_block_start":
			block = getattr(event, "content_block", None)
			if self.index is None and getattr(block, "type", None) == "text":
				self.index = event.index
			return None
		if event_type != "content_block_delta" or event.index != self.index:
			return None
		delta = event.delta
		if getattr(delta, "type", None) != "text_delta":
			return None
		return delta.text
