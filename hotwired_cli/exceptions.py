"""Error types raised by the hotwired CLI.

Every error carries the text shown to the user (or agent) before the process
exits with code 1. The message comes first, followed by optional hint lines
telling the caller what to do next.
"""

from collections.abc import Iterable, Sequence


class HotwiredError(Exception):
	"""Base class for every error the CLI reports."""

	prefix = 'error'

	def __init__(self, message: str, hint_lines: Iterable[str] = ()):
		self.message = message
		self.hint_lines = list(hint_lines)
		super().__init__(message)

	def render(self) -> list[str]:
		"""Lines written to stderr by the dispatcher."""
		lines = [f'{self.prefix}: {self.message}']
		if self.hint_lines:
			lines.append('')
			lines.extend(self.hint_lines)
		return lines


# =============================================================================
# Transport
# =============================================================================


class IpcError(HotwiredError):
	"""The request never produced a usable response."""

	pass


class NotConnected(IpcError):
	"""Socket file is missing, so no connection was attempted."""

	def __init__(self, socket_path: str):
		self.socket_path = socket_path
		super().__init__(
			f'Hotwired backend is not running (socket not found at {socket_path})',
			['Is the Hotwired desktop app running?'],
		)


class ConnectionFailed(IpcError):
	def __init__(self, reason: str):
		super().__init__(f'Connection failed: {reason}')


class RequestFailed(IpcError):
	def __init__(self, reason: str):
		super().__init__(f'Request failed: {reason}')


class InvalidResponse(IpcError):
	def __init__(self, reason: str):
		super().__init__(f'Invalid response: {reason}')


# =============================================================================
# Session validation
# =============================================================================

_JOIN_OR_START_HINT = [
	'To join an existing run:',
	'  hotwired pair <RUN_ID>',
	'',
	'To start a new run:',
	'  hotwired hotwire --intent "what you want to do"',
]


class SessionValidationError(HotwiredError):
	"""The terminal is not entitled to act on behalf of a run."""

	prefix = 'ERROR'


class NoTerminalSession(SessionValidationError):
	def __init__(self):
		super().__init__(
			'Not running in a Zellij session.',
			[
				'The hotwired CLI must be run from within a Hotwired-managed terminal.',
				'Start a terminal from the Hotwired app, or check $ZELLIJ_SESSION_NAME.',
			],
		)


class SessionNotRegistered(SessionValidationError):
	def __init__(self):
		super().__init__('This terminal is not registered with Hotwired.', _JOIN_OR_START_HINT)


class NotAttachedToRun(SessionValidationError):
	def __init__(self):
		super().__init__('This terminal is not attached to any workflow run.', _JOIN_OR_START_HINT)


class RunNotActive(SessionValidationError):
	def __init__(self, status: str):
		self.status = status
		super().__init__(
			f'The attached run is no longer active (status: {status}).',
			['To join a different run:', '  hotwired pair <RUN_ID>'],
		)


# =============================================================================
# Identifier resolution
# =============================================================================


class IdResolutionError(HotwiredError):
	"""A short identifier did not resolve to exactly one full identifier."""

	def __init__(self, message: str, kind: str, candidate: str, hint_lines: Iterable[str] = ()):
		self.kind = kind
		self.candidate = candidate
		super().__init__(message, hint_lines)


class NoMatch(IdResolutionError):
	def __init__(self, kind: str, candidate: str):
		super().__init__(f"no {kind} matching '{candidate}'", kind, candidate)


class AmbiguousId(IdResolutionError):
	def __init__(self, kind: str, candidate: str, matches: Sequence[str]):
		self.matches = list(matches)
		super().__init__(
			f"ambiguous {kind} id '{candidate}', be more specific",
			kind,
			candidate,
			[f'{len(self.matches)} matches: {", ".join(self.matches)}', 'Supply more characters to pick one.'],
		)


# =============================================================================
# Domain
# =============================================================================


class BackendError(HotwiredError):
	"""The backend answered with success: false."""

	def __init__(self, error: str, hint_lines: Iterable[str] = ()):
		self.error = error
		super().__init__(error, hint_lines)


class CommandError(HotwiredError):
	"""A local precondition of the command does not hold."""

	pass
