#!/usr/bin/env python3
"""
Tests for the Gemini and Ollama REST adapters.
"""

import io
import json

import pytest

from jassos.errors import BackendError
from jassos.messages import GenerationOptions, Message
from jassos.providers import gemini, ollama
from jassos.providers.gemini import GeminiProvider
from jassos.providers.ollama import OllamaProvider

CONVERSATION = [
	Message(role="system", content="be terse"),
	Message(role="user", content="hi"),
	Message(role="assistant", content="hello"),
	Message(role="user", content="write code"),
]


class Recorder:
	def __init__(self, result):
		self.result = result
		self.calls: list[dict] = []

	def __call__(self, provider, url, payload, headers=None, timeout=None):
		self.calls.append({"provider": provider, "url": url, "payload": payload, "headers": headers})
		return self.result


def _gemini_body(*texts: str) -> dict:
	return {"candidates": [{"content": {"role": "model", "parts": [{"text": t} for t in texts]}}]}


def test_gemini_prefixes_system_onto_last_turn(monkeypatch):
	recorder = Recorder(_gemini_body("done"))
	monkeypatch.setattr(gemini, "post_json", recorder)
	provider = GeminiProvider("g-key")
	text = provider.generate(CONVERSATION, GenerationOptions(max_tokens=100, temperature=0.2))
	assert text == "done"
	call = recorder.calls[0]
	assert call["url"].endswith("/models/gemini-2.5-flash:generateContent")
	assert call["headers"] == {"x-goog-api-key": "g-key"}
	contents = call["payload"]["contents"]
	assert [c["role"] for c in contents] == ["user", "model", "user"]
	assert contents[-1]["parts"][0]["text"] == "be terse\n\nwrite code"
	assert call["payload"]["generationConfig"] == {"temperature": 0.2, "maxOutputTokens": 100}


def test_gemini_without_system_sends_last_turn_verbatim(monkeypatch):
	recorder = Recorder(_gemini_body("ok"))
	monkeypatch.setattr(gemini, "post_json", recorder)
	GeminiProvider("g-key").generate([Message(role="user", content="only")])
	contents = recorder.calls[0]["payload"]["contents"]
	assert contents == [{"role": "user", "parts": [{"text": "only"}]}]


def test_gemini_joins_parts_and_handles_no_candidates(monkeypatch):
	monkeypatch.setattr(gemini, "post_json", Recorder(_gemini_body("a", "b")))
	assert GeminiProvider("g-key").generate(CONVERSATION) == "ab"
	monkeypatch.setattr(gemini, "post_json", Recorder({"candidates": []}))
	assert GeminiProvider("g-key").generate(CONVERSATION) == ""


def test_gemini_stream_reads_sse_data_lines(monkeypatch):
	lines = [
		"data: " + json.dumps(_gemini_body("Hel")),
		"",
		": keep-alive",
		"data: " + json.dumps(_gemini_body("lo")),
		"",
	]
	body = io.BytesIO("\r\n".join(lines).encode("utf-8"))
	recorder = Recorder(body)
	monkeypatch.setattr(gemini, "open_json", recorder)
	fragments = list(GeminiProvider("g-key").stream_generate(CONVERSATION))
	assert fragments == ["Hel", "lo"]
	assert recorder.calls[0]["url"].endswith(":streamGenerateContent?alt=sse")


def test_gemini_error_payload_raises(monkeypatch):
	monkeypatch.setattr(gemini, "post_json", Recorder({"error": {"message": "API key not valid"}}))
	with pytest.raises(BackendError, match="API key not valid"):
		GeminiProvider("bad").generate(CONVERSATION)


def test_ollama_generate_keeps_system_first(monkeypatch):
	recorder = Recorder({"message": {"role": "assistant", "content": "done"}, "done": True})
	monkeypatch.setattr(ollama, "post_json", recorder)
	provider = OllamaProvider(base_url="http://gpu:11434/")
	assert provider.generate(CONVERSATION, GenerationOptions(max_tokens=64)) == "done"
	call = recorder.calls[0]
	assert call["url"] == "http://gpu:11434/api/chat"
	assert call["headers"] == {}
	payload = call["payload"]
	assert payload["stream"] is False
	assert payload["messages"][0] == {"role": "system", "content": "be terse"}
	assert payload["options"]["num_predict"] == 64


def test_ollama_empty_content_is_empty_string(monkeypatch):
	monkeypatch.setattr(ollama, "post_json", Recorder({"message": {}}))
	assert OllamaProvider().generate(CONVERSATION) == ""


def test_ollama_stream_reads_json_lines(monkeypatch):
	lines = [
		json.dumps({"message": {"content": "Hel"}, "done": False}),
		json.dumps({"message": {"content": "lo"}, "done": False}),
		json.dumps({"message": {"content": ""}, "done": True}),
	]
	recorder = Recorder(io.BytesIO("\n".join(lines).encode("utf-8")))
	monkeypatch.setattr(ollama, "open_json", recorder)
	assert "".join(OllamaProvider().stream_generate(CONVERSATION)) == "Hello"
	assert recorder.calls[0]["payload"]["stream"] is True


def test_ollama_stream_error_line_raises(monkeypatch):
	body = io.BytesIO(json.dumps({"error": "model not found"}).encode("utf-8"))
	monkeypatch.setattr(ollama, "open_json", Recorder(body))
	with pytest.raises(BackendError, match="model not found"):
		list(OllamaProvider().stream_generate(CONVERSATION))


def test_ollama_api_key_sent_as_bearer(monkeypatch):
	recorder = Recorder({"message": {"content": "x"}})
	monkeypatch.setattr(ollama, "post_json", recorder)
	OllamaProvider(api_key="secret").generate(CONVERSATION)
	assert recorder.calls[0]["headers"] == {"Authorization": "Bearer secret"}


def _gemini_pair(monkeypatch, parts):
	monkeypatch.setattr(gemini, "post_json", Recorder(_gemini_body(*parts)))
	# each SSE chunk carries a multi-part candidate
	events = [
		"data: " + json.dumps(_gemini_body(*parts[index:index + 2]))
		for index in range(0, len(parts), 2)
	]
	body = io.BytesIO("\n\n".join(events).encode("utf-8"))
	monkeypatch.setattr(gemini, "open_json", Recorder(body))
	return GeminiProvider("g-key")


def _ollama_pair(monkeypatch, parts):
	reply = {"message": {"role": "assistant", "content": "".join(parts)}, "done": True}
	monkeypatch.setattr(ollama, "post_json", Recorder(reply))
	lines = [json.dumps({"message": {"content": part}, "done": False}) for part in parts]
	lines.append(json.dumps({"message": {"content": ""}, "done": True}))
	monkeypatch.setattr(ollama, "open_json", Recorder(io.BytesIO("\n".join(lines).encode("utf-8"))))
	return OllamaProvider()


@pytest.mark.parametrize("build", [_gemini_pair, _ollama_pair], ids=["gemini", "ollama"])
def test_stream_concatenation_equals_generate(monkeypatch, build):
	parts = ["FILE: a.txt\n", "```text\n", "hel", "lo\n```"]
	provider = build(monkeypatch, parts)
	streamed = "".join(provider.stream_generate(CONVERSATION))
	assert streamed == provider.generate(CONVERSATION)
	assert streamed == "FILE: a.txt\n```text\nhello\n```"
