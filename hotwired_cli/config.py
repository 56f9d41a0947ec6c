"""Invocation context - everything the CLI reads from the environment.

Built once at startup and handed to every component, so nothing below the
dispatcher touches os.environ directly.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

# Name of the terminal-multiplexer session this process runs in
TERMINAL_SESSION_ENV = 'ZELLIJ_SESSION_NAME'
PROJECT_DIR_ENV = 'CLAUDE_PROJECT_DIR'
HOME_ENV = 'HOTWIRED_HOME'
SOCKET_ENV = 'HOTWIRED_SOCKET'

SOCKET_FILENAME = 'hotwired.sock'
TOKEN_FILENAME = 'auth_token'


def get_home_dir(environ: Mapping[str, str] | None = None) -> Path:
	"""Get hotwired state directory (~/.hotwired unless overridden)."""
	env = os.environ if environ is None else environ
	if override := env.get(HOME_ENV):
		return Path(override).expanduser()
	return Path.home() / '.hotwired'


@dataclass(frozen=True)
class InvocationContext:
	"""Per-process view of the environment."""

	home_dir: Path
	socket_path: Path
	token_path: Path
	terminal_session: str | None
	project_dir: str | None
	cwd: Path

	@classmethod
	def from_env(cls, socket_path: str | None = None, environ: Mapping[str, str] | None = None) -> 'InvocationContext':
		env = os.environ if environ is None else environ
		home_dir = get_home_dir(env)

		if socket_path:
			sock = Path(socket_path).expanduser()
		elif env.get(SOCKET_ENV):
			sock = Path(env[SOCKET_ENV]).expanduser()
		else:
			sock = home_dir / SOCKET_FILENAME

		terminal_session = (env.get(TERMINAL_SESSION_ENV) or '').strip() or None
		project_dir = (env.get(PROJECT_DIR_ENV) or '').strip() or None

		return cls(
			home_dir=home_dir,
			socket_path=sock,
			token_path=home_dir / TOKEN_FILENAME,
			terminal_session=terminal_session,
			project_dir=project_dir,
			cwd=Path.cwd(),
		)

	def read_auth_token(self) -> str | None:
		"""Return the trimmed token, or None when missing, unreadable or empty."""
		try:
			token = self.token_path.read_text().strip()
		except (OSError, UnicodeDecodeError):
			return None
		return token or None

	def auth_token_state(self) -> str:
		if not self.token_path.exists():
			return 'not configured'
		return 'configured' if self.read_auth_token() else 'empty'
