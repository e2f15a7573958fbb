#!/usr/bin/env python3
"""
OpenAI chat completions adapter.
"""

from __future__ import annotations

# PIP3 modules
import openai

# local repo modules
from ..errors import BackendError
from ..messages import GenerationOptions, Message, resolve_options, split_system
from .streaming import FragmentStream


class OpenAIProvider:
	name = "openai"
	default_model = "gpt-4-turbo-preview"
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
			client = openai.OpenAI(api_key=api_key, base_url=base_url)
		self._client = client

	#============================================
	def _request(self, messages: list[Message], options: GenerationOptions | None) -> dict:
		# system instructions travel as the first chat message
		opts = resolve_options(options)
		system, turns = split_system(messages)
		chat = [message.as_dict() for message in turns]
		if system is not None:
			chat.insert(0, {"role": "system", "content": system})
		return {
			"model": self.model,
			"messages": chat,
			"temperature": opts.temperature,
			"max_tokens": opts.max_tokens,
		}

	#============================================
	def generate(self, messages: list[Message], options: GenerationOptions | None = None) -> str:
		try:
			response = self._client.chat.completions.create(**self._request(messages, options))
		except openai.OpenAIError as exc:
			raise BackendError(self.name, str(exc)) from exc
		if not response.choices:
			return ""
		return response.choices[0].message.content or ""

	#============================================
	def stream_generate(
		self, messages: list[Message], options: GenerationOptions | None = None
	) -> FragmentStream:
		request = self._request(messages, options)

		def _open():
			return self._client.chat.completions.create(stream=True, **request)

		return FragmentStream(self.name, _open, _delta_text, errors=(openai.OpenAIError,))


#============================================
def _delta_text(chunk) -> str | None:
	if not chunk.choices:
		return None
	return chunk.choices[0].delta.content
