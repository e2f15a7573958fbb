#!/usr/bin/env python3
"""
Fixed system instruction describing the FILE: block output grammar.
"""

from __future__ import annotations

# local repo modules
from .messages import Message

FILE_MARKER = "FILE:"
FENCE = "```"

GENERATION_SYSTEM_PROMPT = f"""You are a code generation assistant. Generate complete, production-ready code based on the user's request.

Output format:
1. Start with a brief description
2. Then output files in this format:

{FILE_MARKER} path/to/file.ext
{FENCE}language
// code here
{FENCE}

Example:
{FILE_MARKER} package.json
{FENCE}json
{{
  "name": "my-app"
}}
{FENCE}

{FILE_MARKER} src/index.js
{FENCE}javascript
console.log('Hello');
{FENCE}

Generate all necessary files for a complete, working project."""

#============================================


def build_generation_messages(prompt: str) -> list[Message]:
	"""
	Wrap a user prompt with the generation system instruction.
	"""
	return [
		Message(role="system", content=GENERATION_SYSTEM_PROMPT),
		Message(role="user", content=prompt),
	]
