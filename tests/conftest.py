"""
Pytest config to ensure local package imports work without installation.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest


def _add_repo_root_to_path() -> None:
	"""
	Insert the repo root into sys.path for local imports.
	"""
	repo_root = Path(__file__).resolve().parent.parent
	repo_root_str = str(repo_root)
	if repo_root_str not in sys.path:
		sys.path.insert(0, repo_root_str)


_add_repo_root_to_path()

from jassos.config import ConfigResolver  # noqa: E402


class StubProvider:
	"""
	Test-only adapter returning canned text and fragments.
	"""

	name = "stub"
	requires_api_key = False

	def __init__(self, text: str = "", fragments: list[str] | None = None, model: str = "stub-model") -> None:
		self.model = model
		self.text = text
		self.fragments = list(fragments) if fragments is not None else [text]
		self.calls: list[tuple[list, object]] = []

	def generate(self, messages, options=None) -> str:
		self.calls.append((list(messages), options))
		return self.text

	def stream_generate(self, messages, options=None):
		self.calls.append((list(messages), options))
		for fragment in self.fragments:
			yield fragment


@pytest.fixture
def resolver(tmp_path: Path) -> ConfigResolver:
	home = tmp_path / "home"
	project = tmp_path / "project"
	home.mkdir()
	project.mkdir()
	return ConfigResolver(home=home, project_root=project)
