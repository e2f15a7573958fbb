#!/usr/bin/env python3
"""
Turn FILE: blocks in a model reply into file writes.

Grammar, one block per file:

	FILE: relative/path.ext
	```optional-language
	file content
	```

Scanning is a three-state machine (seek marker, expect fence, in body)
rather than a regex, so malformed and nested-fence input behaves
predictably.
"""

from __future__ import annotations

# Standard Library
import logging
from dataclasses import dataclass
from pathlib import Path

# local repo modules
from .prompts import FENCE, FILE_MARKER

logger = logging.getLogger(__name__)

_SEEK_MARKER = "seek"
_EXPECT_FENCE = "fence"
_IN_BODY = "body"

#============================================


@dataclass(slots=True, frozen=True)
class ParsedFile:
	path: str
	content: str


#============================================


def _marker_path(line: str) -> str | None:
	stripped = line.lstrip()
	if not stripped.startswith(FILE_MARKER):
		return None
	return stripped[len(FILE_MARKER):].strip()


#============================================


def _is_opening_fence(line: str) -> bool:
	stripped = line.strip()
	if not stripped.startswith(FENCE):
		return False
	tag = stripped[len(FENCE):]
	if FENCE[0] in tag:
		return False
	return not any(ch.isspace() for ch in tag)


#============================================


def _is_closing_fence(line: str) -> bool:
	return line.strip() == FENCE


#============================================


def parse_file_blocks(text: str) -> list[ParsedFile]:
	"""
	Scan text for FILE: blocks.

	A marker line must be immediately followed by an opening fence; the body
	runs until the first line that is exactly a closing fence. A fence with a
	language tag inside a body is content. Unclosed blocks and blocks with an
	empty path are dropped.

	Args:
		text: Raw model reply.

	Returns:
		Parsed files in source order, path and content whitespace-trimmed.
	"""
	files: list[ParsedFile] = []
	state = _SEEK_MARKER
	path = ""
	body: list[str] = []
	# split on \n only so other line-break characters stay in file content
	for line in text.split("\n"):
		if state == _EXPECT_FENCE:
			if _is_opening_fence(line):
				body = []
				state = _IN_BODY
				continue
			# marker without a fence: rescan this line as a possible marker
			state = _SEEK_MARKER
		if state == _SEEK_MARKER:
			marker = _marker_path(line)
			if marker is not None:
				path = marker
				state = _EXPECT_FENCE
			continue
		if _is_closing_fence(line):
			if path:
				files.append(ParsedFile(path=path, content="\n".join(body).strip()))
			else:
				logger.warning("Skipping %s block with an empty path", FILE_MARKER)
			state = _SEEK_MARKER
			continue
		body.append(line)
	if state == _IN_BODY:
		logger.warning("Dropping unterminated block for %s", path or "<empty path>")
	return files


#============================================


def _target_path(base_dir: Path, relative: str) -> Path:
	# joined like a plain string join: a leading slash does not escape base_dir
	target = base_dir / relative.lstrip("/\\")
	try:
		target.resolve().relative_to(base_dir.resolve())
	except ValueError:
		logger.warning("%s resolves outside %s", relative, base_dir)
	return target


#============================================


def materialize(text: str, base_dir: str | Path, dry_run: bool = False) -> list[str]:
	"""
	Write every FILE: block in text under base_dir.

	Writes are sequential and not transactional: the first filesystem error
	propagates and later blocks are never attempted. A repeated path is
	overwritten, so the last occurrence wins.

	Args:
		text: Raw model reply.
		base_dir: Directory the relative paths are joined onto.
		dry_run: When True, nothing is written.

	Returns:
		Relative paths in write order; empty when no blocks were found.
	"""
	base = Path(base_dir)
	written: list[str] = []
	for parsed in parse_file_blocks(text):
		target = _target_path(base, parsed.path)
		if dry_run:
			logger.info("Would write %s (%d chars)", target, len(parsed.content))
		else:
			target.parent.mkdir(parents=True, exist_ok=True)
			target.write_text(parsed.content, encoding="utf-8", newline="")
			logger.info("Wrote %s (%d chars)", target, len(parsed.content))
		written.append(parsed.path)
	return written
