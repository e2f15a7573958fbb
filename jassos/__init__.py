"""
jassos
======

Terminal-based AI development assistant: one CLI, interchangeable LLM backends,
and generated files materialized straight onto disk.
"""

__all__ = [
	"config",
	"errors",
	"generator",
	"materializer",
	"messages",
	"providers",
]
