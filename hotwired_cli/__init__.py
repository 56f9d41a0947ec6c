"""Hotwired CLI package.

Command-line client for Hotwired multi-agent workflow runs. Every command is a
single request to the local Hotwired backend over its Unix socket.

Usage:
    hotwired status
    hotwired send builder "Plan is ready for review"
    hotwired inbox --watch
    hotwired run list
"""

__version__ = '0.1.0'

__all__ = ['main', '__version__']


def __getattr__(name: str):
	"""Lazy import to avoid runpy warnings when running as module."""
	if name == 'main':
		from hotwired_cli.main import main

		return main
	raise AttributeError(f'module {__name__!r} has no attribute {name!r}')
