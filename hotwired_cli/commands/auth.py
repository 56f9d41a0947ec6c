"""Connection and authentication status."""

import argparse
import os
from typing import TYPE_CHECKING

from hotwired_cli import __version__
from hotwired_cli.exceptions import IpcError, NotConnected
from hotwired_cli.output import print_json
from hotwired_cli.views import HealthInfo, parse_payload

if TYPE_CHECKING:
	from hotwired_cli.config import InvocationContext
	from hotwired_cli.ipc import HotwiredClient

COMMANDS = {'status'}


def backend_state(client: 'HotwiredClient') -> tuple[str, str | None]:
	"""Return (state, version) without raising for a down backend."""
	try:
		response = client.health_check()
	except NotConnected:
		return 'not running', None
	except IpcError:
		return 'connection failed', None

	if not response.success:
		return 'not responding', None
	try:
		return 'running', parse_payload(response.data, HealthInfo).version
	except IpcError:
		return 'running', None


def status(client: 'HotwiredClient', ctx: 'InvocationContext', as_json: bool = False) -> None:
	state, version = backend_state(client)
	socket_found = os.path.exists(client.socket_path)
	token_state = ctx.auth_token_state()

	if as_json:
		print_json(
			{
				'backend': state,
				'version': version,
				'socket': client.socket_path,
				'socketFound': socket_found,
				'authToken': token_state,
			}
		)
		return

	if state == 'running' and version:
		print(f'Backend:    running (v{version})')
	else:
		print(f'Backend:    {state}')

	if socket_found:
		print(f'Socket:     {client.socket_path}')
	else:
		print(f'Socket:     {client.socket_path} (not found)')

	print(f'Auth token: {token_state}')


def print_version(client: 'HotwiredClient') -> None:
	_, core_version = backend_state(client)
	if core_version:
		print(f'hotwired-cli {__version__} (core {core_version})')
	else:
		print(f'hotwired-cli {__version__} (not connected - is Hotwired.sh desktop app running?)')


def handle(args: argparse.Namespace, ctx: 'InvocationContext', client: 'HotwiredClient') -> None:
	if args.auth_command == 'status':
		status(client, ctx, as_json=args.json)
	else:
		raise ValueError(f'Unknown auth action: {args.auth_command}')
