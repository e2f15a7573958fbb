#!/usr/bin/env python3
"""
Google Gemini adapter over the generativelanguage REST API.
"""

from __future__ import annotations

# Standard Library
import json
import urllib.parse

# local repo modules
from ..errors import BackendError
from ..messages import GenerationOptions, Message, resolve_options, split_system
from .rest import DEFAULT_TIMEOUT, TRANSPORT_ERRORS, open_json, post_json
from .streaming import FragmentStream

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


class GeminiProvider:
	name = "gemini"
	default_model = "gemini-2.5-flash"
	requires_api_key = True

	def __init__(
		self,
		api_key: str,
		model: str | None = None,
		base_url: str | None = None,
		timeout: float = DEFAULT_TIMEOUT,
	) -> None:
		self.api_key = api_key
		self.model = model or self.default_model
		self.base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
		self.timeout = timeout

	#============================================
	def _url(self, method: str, query: str = "") -> str:
		model = urllib.parse.quote(self.model, safe="")
		url = f"{self.base_url}/models/{model}:{method}"
		if query:
			url = f"{url}?{query}"
		return url

	#============================================
	def _payload(self, messages: list[Message], options: GenerationOptions | None) -> dict:
		"""
		Build a generateContent body.

		Gemini has no system role in chat history, so the system text is
		prefixed onto the current turn. Earlier turns become history with
		assistant mapped to the model role.
		"""
		opts = resolve_options(options)
		system, turns = split_system(messages)
		history = turns[:-1]
		last = turns[-1].content if turns else ""
		prompt = f"{system}\n\n{last}" if system else last
		contents = [
			{
				"role": "model" if message.role == "assistant" else "user",
				"parts": [{"text": message.content}],
			}
			for message in history
		]
		contents.append({"role": "user", "parts": [{"text": prompt}]})
		return {
			"contents": contents,
			"generationConfig": {
				"temperature": opts.temperature,
				"maxOutputTokens": opts.max_tokens,
			},
		}

	#============================================
	def _headers(self) -> dict[str, str]:
		return {"x-goog-api-key": self.api_key}

	#============================================
	def generate(self, messages: list[Message], options: GenerationOptions | None = None) -> str:
		parsed = post_json(
			self.name,
			self._url("generateContent"),
			self._payload(messages, options),
			headers=self._headers(),
			timeout=self.timeout,
		)
		return _candidate_text(parsed)

	#============================================
	def stream_generate(
		self, messages: list[Message], options: GenerationOptions | None = None
	) -> FragmentStream:
		payload = self._payload(messages, options)

		def _open():
			return open_json(
				self.name,
				self._url("streamGenerateContent", "alt=sse"),
				payload,
				headers=self._headers(),
				timeout=self.timeout,
			)

		return FragmentStream(self.name, _open, _sse_text, errors=TRANSPORT_ERRORS)


#============================================
def _candidate_text(parsed: dict) -> str:
	"""
	Join the text parts of the first candidate.
	"""
	error = parsed.get("error")
	if isinstance(error, dict):
		raise BackendError("gemini", str(error.get("message") or error))
	candidates = parsed.get("candidates") or []
	if not candidates:
		return ""
	content = candidates[0].get("content") or {}
	parts = content.get("parts") or []
	return "".join(part.get("text", "") for part in parts if isinstance(part, dict))


#============================================
def _sse_text(line: bytes | str) -> str | None:
	if isinstance(line, bytes):
		line = line.decode("utf-8")
	line = line.strip()
	if not line.startswith("data:"):
		return None
	data = line[len("data:"):].strip()
	if not data:
		return None
	return _candidate_text(json.loads(data))
