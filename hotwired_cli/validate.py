"""Session validation for workflow commands.

Every workflow command except `hotwire` and `pair` validates session state
first. The checks run in a fixed order and stop at the first failure:

1. a terminal session name is present in the environment
2. the backend knows that session
3. the session is attached to a run
4. the run is active or paused
5. the role is read, defaulting to 'unknown'

Transport failures propagate as IpcError, never as a validation error, so a
down backend is not mistaken for "you are not allowed".
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from hotwired_cli.exceptions import NoTerminalSession, NotAttachedToRun, RunNotActive, SessionNotRegistered
from hotwired_cli.views import SessionStateData, parse_payload

if TYPE_CHECKING:
	from hotwired_cli.config import InvocationContext
	from hotwired_cli.ipc import HotwiredClient

logger = logging.getLogger(__name__)

# TODO: revisit if the backend adds more non-terminal run statuses
ACTIVE_RUN_STATUSES = ('active', 'paused')
UNKNOWN = 'unknown'


@dataclass(frozen=True)
class SessionState:
	"""Identity of the calling terminal within its run."""

	terminal_session: str
	run_id: str
	role_id: str
	run_status: str


def require_terminal_session(ctx: 'InvocationContext') -> str:
	"""Step 1 on its own, for the commands that create the attachment."""
	if not ctx.terminal_session:
		raise NoTerminalSession()
	return ctx.terminal_session


def validate_session(client: 'HotwiredClient', ctx: 'InvocationContext') -> SessionState:
	"""Validate session state - call this FIRST in every command except hotwire/pair."""
	terminal_session = require_terminal_session(ctx)

	response = client.request('get_session_state', {'zellij_session': terminal_session})
	if not response.success or response.data is None:
		logger.debug(f'Session {terminal_session} not registered: {response.error}')
		raise SessionNotRegistered()

	state = parse_payload(response.data, SessionStateData)

	if not state.attached_run_id:
		raise NotAttachedToRun()

	# Absent status means an older backend; only a reported inactive status blocks
	run_status = state.run_status or UNKNOWN
	if state.run_status is not None and run_status not in ACTIVE_RUN_STATUSES:
		raise RunNotActive(run_status)

	return SessionState(
		terminal_session=terminal_session,
		run_id=state.attached_run_id,
		role_id=state.role_id or UNKNOWN,
		run_status=run_status,
	)
