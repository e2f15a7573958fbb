#!/usr/bin/env python3
"""
Bounded pull channel between a backend connection and its consumer.
"""

from __future__ import annotations

# Standard Library
import logging
import queue
import threading
from typing import Any, Callable, Iterable

# local repo modules
from ..errors import BackendError

logger = logging.getLogger(__name__)

_POLL_SECONDS = 0.1
_DONE = object()

#============================================


class _Failure:
	__slots__ = ("exc",)

	def __init__(self, exc: BaseException) -> None:
		self.exc = exc


#============================================


class FragmentStream:
	"""
	Lazy, finite, non-restartable iterator of text fragments.

	A producer thread opens the backend connection on the first pull, unwraps
	each envelope event into text and pushes it into a bounded queue. The
	consumer drains the queue one fragment at a time. close() shuts the
	channel and aborts the underlying connection.

	Args:
		provider: Provider id used in error messages.
		open_source: Opens the connection and returns an iterable of events.
		unwrap: Maps one event to its text, or None for non-text events.
		errors: Exception types translated into BackendError.
		maxsize: Channel capacity.
	"""

	def __init__(
		self,
		provider: str,
		open_source: Callable[[], Iterable[Any]],
		unwrap: Callable[[Any], str | None],
		errors: tuple[type[BaseException], ...] = (Exception,),
		maxsize: int = 1,
	) -> None:
		self.provider = provider
		self._open_source = open_source
		self._unwrap = unwrap
		self._errors = errors
		self._queue: queue.Queue = queue.Queue(maxsize=maxsize)
		self._closed = threading.Event()
		self._thread: threading.Thread | None = None
		self._source: Any = None
		self._finished = False

	#============================================
	def __iter__(self) -> FragmentStream:
		return self

	#============================================
	def __next__(self) -> str:
		if self._finished or self._closed.is_set():
			raise StopIteration
		if self._thread is None:
			self._start()
		item = self._queue.get()
		if item is _DONE:
			self._finished = True
			raise StopIteration
		if isinstance(item, _Failure):
			self._finished = True
			self._abort_source()
			translated = self._translate(item.exc)
			if translated is item.exc:
				raise translated
			raise translated from item.exc
		return item

	#============================================
	def __enter__(self) -> FragmentStream:
		return self

	#============================================
	def __exit__(self, *exc_info: object) -> None:
		self.close()

	#============================================
	@property
	def closed(self) -> bool:
		return self._closed.is_set()

	#============================================
	def close(self) -> None:
		"""
		Close the channel and abort the backend connection.
		"""
		if self._closed.is_set():
			return
		self._closed.set()
		self._abort_source()
		while True:
			try:
				self._queue.get_nowait()
			except queue.Empty:
				break
		if self._thread is not None:
			self._thread.join(timeout=1.0)

	#============================================
	def _start(self) -> None:
		self._thread = threading.Thread(
			target=self._produce, name=f"{self.provider}-stream", daemon=True
		)
		self._thread.start()

	#============================================
	def _produce(self) -> None:
		try:
			self._source = self._open_source()
			if self._closed.is_set():
				self._abort_source()
				return
			for event in self._source:
				if self._closed.is_set():
					return
				text = self._unwrap(event)
				if not text:
					continue
				if not self._put(text):
					return
		# the consumer must never block on a dead producer
		except BaseException as exc:
			if not self._closed.is_set():
				self._put(_Failure(exc))
			return
		self._put(_DONE)

	#============================================
	def _put(self, item: object) -> bool:
		while not self._closed.is_set():
			try:
				self._queue.put(item, timeout=_POLL_SECONDS)
				return True
			except queue.Full:
				continue
		return False

	#============================================
	def _abort_source(self) -> None:
		source = self._source
		close = getattr(source, "close", None)
		if close is None:
			return
		try:
			close()
		except Exception as exc:
			logger.debug("Ignoring error while closing %s stream: %s", self.provider, exc)

	#============================================
	def _translate(self, exc: BaseException) -> BaseException:
		if isinstance(exc, BackendError):
			return exc
		if isinstance(exc, self._errors):
			return BackendError(self.provider, str(exc))
		return exc
