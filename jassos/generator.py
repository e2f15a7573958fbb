#!/usr/bin/env python3
"""
Code generator: prompt -> provider -> materialized files.
"""

from __future__ import annotations

# Standard Library
import logging
from dataclasses import dataclass, field
from pathlib import Path

# local repo modules
from .materializer import materialize
from .messages import GenerationOptions
from .prompts import build_generation_messages
from .providers.base import ProviderAdapter

logger = logging.getLogger(__name__)

GENERATION_MAX_TOKENS = 8000

#============================================


@dataclass(slots=True)
class GenerationResult:
	"""
	Outcome of one generation request.

	Attributes:
		text: Raw model reply.
		files: Relative paths written, in order.
		dry_run: True when nothing was written to disk.
	"""
	text: str
	files: list[str] = field(default_factory=list)
	dry_run: bool = False

	#============================================
	@property
	def degraded(self) -> bool:
		"""
		True when the reply held no file blocks and is only a message.
		"""
		return not self.files


#============================================


class CodeGenerator:
	"""
	Wraps a prompt with the FILE: grammar instruction and materializes the reply.
	"""

	def __init__(self, provider: ProviderAdapter, temperature: float | None = None) -> None:
		self.provider = provider
		self.temperature = temperature

	#============================================
	def _options(self) -> GenerationOptions:
		if self.temperature is None:
			return GenerationOptions(max_tokens=GENERATION_MAX_TOKENS)
		return GenerationOptions(max_tokens=GENERATION_MAX_TOKENS, temperature=self.temperature)

	#============================================
	def generate(
		self,
		prompt: str,
		directory: str | Path | None = None,
		dry_run: bool = False,
	) -> GenerationResult:
		"""
		Generate files for a prompt.

		Args:
			prompt: User request.
			directory: Base directory for writes (default: current directory).
			dry_run: Parse the reply without writing files.

		Returns:
			GenerationResult with the raw text and written paths.
		"""
		base_dir = Path(directory) if directory is not None else Path.cwd()
		messages = build_generation_messages(prompt)
		logger.info("Requesting generation from %s (%s)", self.provider.name, self.provider.model)
		text = self.provider.generate(messages, self._options())
		files = materialize(text, base_dir, dry_run=dry_run)
		if not files:
			logger.info("No file blocks in reply; surfacing text as a message")
		return GenerationResult(text=text, files=files, dry_run=dry_run)
