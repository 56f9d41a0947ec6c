"""Session management command handlers (no session required)."""

import argparse
import logging
from typing import TYPE_CHECKING

from hotwired_cli.output import print_json, yes_no
from hotwired_cli.resolve import pick_session_name, resolve_session_name
from hotwired_cli.views import ActiveSessionList, parse_payload

if TYPE_CHECKING:
	from hotwired_cli.config import InvocationContext
	from hotwired_cli.ipc import HotwiredClient

logger = logging.getLogger(__name__)

COMMANDS = {'list', 'ls', 'show', 'remove', 'rm'}


def _active_sessions(client: 'HotwiredClient') -> ActiveSessionList:
	return parse_payload(client.call('list_active_sessions', {}), ActiveSessionList)


def list_sessions(client: 'HotwiredClient', as_json: bool = False) -> None:
	sessions = _active_sessions(client)

	if as_json:
		print_json(sessions)
		return

	if not sessions.sessions:
		print('No active sessions.')
		return

	print(f'{"SESSION":<28} {"PROJECT":<44} WORKTREE')
	for s in sessions.sessions:
		print(f'{s.session_name or "-":<28} {s.project_dir or "-":<44} {yes_no(s.is_worktree)}')


def show_session(client: 'HotwiredClient', name: str, as_json: bool = False) -> None:
	sessions = _active_sessions(client)
	full_name = pick_session_name(name, sessions.names())
	session = next(s for s in sessions.sessions if s.session_name == full_name)

	if as_json:
		print_json(session)
		return

	print(f'Session:    {session.session_name}')
	print(f'Project:    {session.project_dir or "-"}')
	print(f'Worktree:   {yes_no(session.is_worktree)}')
	if session.git_common_dir:
		print(f'Git dir:    {session.git_common_dir}')


def remove_session(client: 'HotwiredClient', name: str) -> None:
	full_name = resolve_session_name(client, name)
	client.call('deregister_session', {'sessionName': full_name})
	print(f'Removed session {full_name}')


def handle(args: argparse.Namespace, ctx: 'InvocationContext', client: 'HotwiredClient') -> None:
	action = args.session_command
	if action in ('list', 'ls'):
		list_sessions(client, as_json=args.json)
	elif action == 'show':
		show_session(client, args.name, as_json=args.json)
	elif action in ('remove', 'rm'):
		remove_session(client, args.name)
	else:
		raise ValueError(f'Unknown session action: {action}')
