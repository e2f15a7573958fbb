#!/usr/bin/env python3
"""
Ollama chat adapter.
"""

from __future__ import annotations

# Standard Library
import json

# local repo modules
from ..errors import BackendError
from ..messages import GenerationOptions, Message, resolve_options, split_system
from .rest import DEFAULT_TIMEOUT, TRANSPORT_ERRORS, open_json, post_json
from .streaming import FragmentStream

DEFAULT_BASE_URL = "http://localhost:11434"


class OllamaProvider:
	name = "ollama"
	default_model = "llama3.2"
	requires_api_key = False

	def __init__(
		self,
		api_key: str = "",
		model: str | None = None,
		base_url: str | None = None,
		timeout: float = DEFAULT_TIMEOUT,
	) -> None:
		self.api_key = api_key
		self.model = model or self.default_model
		self.base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
		self.timeout = timeout

	#============================================
	def _payload(self, messages: list[Message], options: GenerationOptions | None, stream: bool) -> dict:
		opts = resolve_options(options)
		system, turns = split_system(messages)
		chat = [message.as_dict() for message in turns]
		if system is not None:
			chat.insert(0, {"role": "system", "content": system})
		return {
			"model": self.model,
			"messages": chat,
			"stream": stream,
			"options": {"num_predict": opts.max_tokens, "temperature": opts.temperature},
		}

	#============================================
	def _headers(self) -> dict[str, str]:
		if not self.api_key:
			return {}
		return {"Authorization": f"Bearer {self.api_key}"}

	#============================================
	def generate(self, messages: list[Message], options: GenerationOptions | None = None) -> str:
		parsed = post_json(
			self.name,
			f"{self.base_url}/api/chat",
			self._payload(messages, options, stream=False),
			headers=self._headers(),
			timeout=self.timeout,
		)
		return _message_text(parsed) or ""

	#============================================
	def stream_generate(
		self, messages: list[Message], options: GenerationOptions | None = None
	) -> FragmentStream:
		payload = self._payload(messages, options, stream=True)

		def _open():
			return open_json(
				self.name,
				f"{self.base_url}/api/chat",
				payload,
				headers=self._headers(),
				timeout=self.timeout,
			)

		return FragmentStream(self.name, _open, _line_text, errors=TRANSPORT_ERRORS)


#============================================
def _message_text(parsed: dict) -> str | None:
	if parsed.get("error"):
		raise BackendError("ollama", str(parsed["error"]))
	message = parsed.get("message") or {}
	return message.get("content")


#============================================
def _line_text(line: bytes | str) -> str | None:
	if isinstance(line, bytes):
		line = line.decode("utf-8")
	line = line.strip()
	if not line:
		return None
	return _message_text(json.loads(line))
