#!/usr/bin/env python3
"""
Repo-root runner for jassos.

Examples:
	python run_jassos.py init -p anthropic
	python run_jassos.py run "a flask hello world app" --dry-run
"""

from __future__ import annotations

import sys
from pathlib import Path


def main() -> int:
	"""
	Run the CLI entrypoint with repo-root import behavior.
	"""
	repo_root = Path(__file__).resolve().parent
	if str(repo_root) not in sys.path:
		sys.path.insert(0, str(repo_root))

	from jassos.cli import main as cli_main

	return cli_main()


if __name__ == "__main__":
	sys.exit(main())
