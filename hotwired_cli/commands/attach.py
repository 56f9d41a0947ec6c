"""Commands that create the run attachment: hotwire (new run) and pair (join).

These skip session validation, since validation checks for exactly the
attachment they create. They still require a terminal session.
"""

import argparse
import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from hotwired_cli.output import print_json
from hotwired_cli.resolve import resolve_run_id
from hotwired_cli.validate import require_terminal_session
from hotwired_cli.views import HotwireResult, PairResult, parse_payload

if TYPE_CHECKING:
	from hotwired_cli.config import InvocationContext
	from hotwired_cli.ipc import HotwiredClient

logger = logging.getLogger(__name__)

COMMANDS = {'hotwire', 'pair'}


def hotwire(
	client: 'HotwiredClient',
	ctx: 'InvocationContext',
	playbook: str | None = None,
	intent: str | None = None,
	project: Path | None = None,
	as_json: bool = False,
) -> None:
	terminal_session = require_terminal_session(ctx)
	project_path = str(project or ctx.cwd)

	data = client.call(
		'hotwire',
		{
			'zellijSession': terminal_session,
			'projectPath': project_path,
			'suggestedPlaybook': playbook,
			'intent': intent,
		},
	)
	result = parse_payload(data, HotwireResult)

	if as_json:
		print_json(result)
		return

	if result.status == 'started':
		logger.info(f'Run {result.run_id} started for {terminal_session}')
		print(f'Run started: {result.run_id or "-"}')
		print(f'Your role: {result.role or "-"}')
		print()
		print(result.protocol or '')
	elif result.status == 'needs_confirmation':
		pending_id = result.pending_run_id or '-'
		print(f'Run pending confirmation: {pending_id}')
		print()
		print('Please confirm the run in the Hotwired app.')
		print(f'Once confirmed, run: hotwired pair {pending_id}')
	else:
		print(f'Unexpected status: {result.status}')
		if data is not None:
			print(json.dumps(data, indent=2))


def pair(
	client: 'HotwiredClient',
	ctx: 'InvocationContext',
	run_id: str,
	role: str | None = None,
	as_json: bool = False,
) -> None:
	terminal_session = require_terminal_session(ctx)
	full_id = resolve_run_id(client, run_id)

	data = client.call(
		'pair',
		{
			'zellij_session': terminal_session,
			'run_id': full_id,
			'role_id': role,
		},
	)
	result = parse_payload(data, PairResult)

	if as_json:
		print_json(result)
		return

	print(f'Joined run: {full_id}')
	print(f'Your role: {result.role or "-"}')
	print()
	print(result.protocol or '')


def handle(args: argparse.Namespace, ctx: 'InvocationContext', client: 'HotwiredClient') -> None:
	if args.command == 'hotwire':
		hotwire(client, ctx, playbook=args.playbook, intent=args.intent, project=args.project, as_json=args.json)
	elif args.command == 'pair':
		pair(client, ctx, args.run_id, role=args.role, as_json=args.json)
	else:
		raise ValueError(f'Unknown attach command: {args.command}')
