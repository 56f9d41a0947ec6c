"""Internal commands for agent lifecycle hook integration.

Called by agent hooks, hidden from --help. Every request here goes through
client.notify(): failures are logged and dropped so a hook never blocks or
fails the agent that fired it.
"""

import argparse
import json
import logging
import os
import select
import sys
import time
from typing import IO, TYPE_CHECKING, Any

if TYPE_CHECKING:
	from hotwired_cli.config import InvocationContext
	from hotwired_cli.ipc import HotwiredClient

logger = logging.getLogger(__name__)

COMMANDS = {'hook-event', 'session-start', 'session-end'}

STDIN_TIMEOUT = 0.5
READ_CHUNK = 4096


def read_stdin(stream: IO[str] | None = None, timeout: float = STDIN_TIMEOUT) -> str:
	"""Read stdin until EOF or until timeout runs out, whichever comes first.

	The timeout bounds the whole read, not just the wait for the first byte.
	Returns whatever arrived before the deadline.
	"""
	stream = stream or sys.stdin
	deadline = time.monotonic() + timeout
	chunks: list[bytes] = []
	try:
		if stream.isatty():
			return ''
		fd = stream.fileno()
		while (remaining := deadline - time.monotonic()) > 0:
			ready, _, _ = select.select([fd], [], [], remaining)
			if not ready:
				logger.debug('Hook payload not finished before the deadline')
				break
			chunk = os.read(fd, READ_CHUNK)
			if not chunk:
				break
			chunks.append(chunk)
	except (OSError, ValueError) as e:
		logger.debug(f'Could not read hook payload: {e}')
	return b''.join(chunks).decode(errors='replace')


def read_stdin_json(stream: IO[str] | None = None, timeout: float = STDIN_TIMEOUT) -> Any:
	raw = read_stdin(stream, timeout)
	if not raw.strip():
		return {}
	try:
		return json.loads(raw)
	except json.JSONDecodeError:
		logger.debug('Hook payload is not JSON, sending {}')
		return {}


def hook_event(client: 'HotwiredClient', ctx: 'InvocationContext', event_name: str, payload: Any = None) -> None:
	"""Forward a generic hook event (Stop, PreCompact, Notification, ...)."""
	if payload is None:
		payload = read_stdin_json()

	client.notify(
		'hook_event',
		{
			'eventName': event_name,
			'zellijSession': ctx.terminal_session,
			'projectDir': ctx.project_dir,
			'payload': payload,
		},
	)


def session_start(client: 'HotwiredClient', ctx: 'InvocationContext') -> None:
	"""Register the session, then emit the session_start hook event."""
	if not ctx.terminal_session:
		logger.debug('session-start outside a terminal session, skipping')
		return

	project_dir = ctx.project_dir or str(ctx.cwd)
	client.notify('register_session', {'sessionName': ctx.terminal_session, 'projectDir': project_dir})
	client.notify(
		'hook_event',
		{
			'eventName': 'session_start',
			'zellijSession': ctx.terminal_session,
			'projectDir': project_dir,
			'payload': {},
		},
	)


def session_end(client: 'HotwiredClient', ctx: 'InvocationContext') -> None:
	"""Deregister the session, then emit the session_end hook event."""
	if not ctx.terminal_session:
		logger.debug('session-end outside a terminal session, skipping')
		return

	client.notify('deregister_session', {'sessionName': ctx.terminal_session})
	client.notify(
		'hook_event',
		{
			'eventName': 'session_end',
			'zellijSession': ctx.terminal_session,
			'payload': {},
		},
	)


def handle(args: argparse.Namespace, ctx: 'InvocationContext', client: 'HotwiredClient') -> None:
	action = args.internal_command
	if action == 'hook-event':
		hook_event(client, ctx, args.event_name)
	elif action == 'session-start':
		session_start(client, ctx)
	elif action == 'session-end':
		session_end(client, ctx)
	else:
		raise ValueError(f'Unknown internal action: {action}')
