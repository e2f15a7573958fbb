#!/usr/bin/env python3
"""
Interactive streaming chat shell.
"""

from __future__ import annotations

# Standard Library
import json
import logging
import sys
from pathlib import Path
from typing import Callable, TextIO

# local repo modules
from .errors import BackendError
from .messages import Message
from .providers.base import ProviderAdapter

logger = logging.getLogger(__name__)

EXIT_WORDS = {"exit", "quit"}
HISTORY_FILENAME = "history.json"

#============================================


def _color(text: str, code: str, stream: TextIO) -> str:
	if stream.isatty():
		return f"\033[{code}m{text}\033[0m"
	return text


#============================================


def load_history(path: Path) -> list[Message]:
	"""
	Read a saved conversation; unreadable files start a fresh one.
	"""
	if not path.exists():
		return []
	try:
		raw = json.loads(path.read_text(encoding="utf-8"))
	except (OSError, ValueError) as exc:
		logger.warning("Ignoring unreadable history %s: %s", path, exc)
		return []
	messages: list[Message] = []
	for item in raw if isinstance(raw, list) else []:
		if not isinstance(item, dict):
			continue
		role = item.get("role")
		content = item.get("content")
		if role in ("user", "assistant") and isinstance(content, str):
			messages.append(Message(role=role, content=content))
	return messages


#============================================


def save_history(path: Path, messages: list[Message]) -> None:
	path.parent.mkdir(parents=True, exist_ok=True)
	data = [message.as_dict() for message in messages]
	path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")


#============================================


class ChatSession:
	"""
	Multi-turn conversation with one provider, streamed to an output sink.

	Args:
		provider: Adapter used for every turn.
		history_path: Where the conversation is persisted (None disables it).
		messages: Prior turns to continue from.
	"""

	def __init__(
		self,
		provider: ProviderAdapter,
		history_path: Path | None = None,
		messages: list[Message] | None = None,
	) -> None:
		self.provider = provider
		self.history_path = history_path
		self.messages: list[Message] = list(messages or [])

	#============================================
	def send(self, user_input: str, sink: TextIO) -> str:
		"""
		Stream one reply into sink and record both turns.

		Any failure, an interrupt included, drops the user turn and propagates.
		"""
		self.messages.append(Message(role="user", content=user_input))
		chunks: list[str] = []
		stream = self.provider.stream_generate(self.messages)
		try:
			for fragment in stream:
				sink.write(fragment)
				sink.flush()
				chunks.append(fragment)
		except BaseException:
			self.messages.pop()
			raise
		finally:
			close = getattr(stream, "close", None)
			if close is not None:
				close()
		reply = "".join(chunks)
		self.messages.append(Message(role="assistant", content=reply))
		if self.history_path is not None:
			save_history(self.history_path, self.messages)
		return reply

	#============================================
	def run(
		self,
		read: Callable[[str], str] | None = None,
		out: TextIO | None = None,
		err: TextIO | None = None,
	) -> None:
		"""
		Read-eval loop; ends on an exit word or end of input.
		"""
		read = read or input
		out = out or sys.stdout
		err = err or sys.stderr
		print(_color("Jassos Interactive Shell", "34", out), file=out)
		print(_color('Type your message and press Enter. Type "exit" to quit.\n', "90", out), file=out)
		while True:
			try:
				user_input = read(_color("you> ", "32", out)).strip()
			except EOFError:
				break
			if user_input in EXIT_WORDS:
				break
			if not user_input:
				continue
			out.write(_color("assistant> ", "34", out))
			try:
				self.send(user_input, out)
			except BackendError as exc:
				print(_color(f"\nError: {exc}\n", "31", err), file=err)
				continue
			print("\n", file=out)
		print(_color("\nGoodbye!", "90", out), file=out)
