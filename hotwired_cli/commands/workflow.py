"""Workflow actions taken by an attached participant.

send, complete, impediment and resolve all validate session state first and
act as the validated role within the attached run.
"""

import argparse
import logging
from typing import TYPE_CHECKING

from hotwired_cli.output import print_json, truncate
from hotwired_cli.validate import validate_session
from hotwired_cli.views import TaskCompleteResult, parse_payload

if TYPE_CHECKING:
	from hotwired_cli.config import InvocationContext
	from hotwired_cli.ipc import HotwiredClient

logger = logging.getLogger(__name__)

COMMANDS = {'send', 'complete', 'impediment', 'resolve'}

IMPEDIMENT_TYPES = ('technical', 'access', 'clarification', 'decision')
SUMMARY_LENGTH = 50


def send(client: 'HotwiredClient', ctx: 'InvocationContext', to: str, message: str) -> None:
	"""Hand off a message to another participant or the human operator."""
	state = validate_session(client, ctx)

	client.call(
		'handoff',
		{
			'runId': state.run_id,
			'to': to,
			'summary': truncate(message, SUMMARY_LENGTH),
			'details': message,
			'source': state.role_id,
		},
		fallback_error='failed to send',
	)
	print(f'Sent to {to}')


def complete(client: 'HotwiredClient', ctx: 'InvocationContext', outcome: str | None = None, as_json: bool = False) -> None:
	state = validate_session(client, ctx)

	data = client.call(
		'task_complete',
		{
			'runId': state.run_id,
			'source': state.role_id,
			'outcome': outcome or 'Completed',
		},
		fallback_error='failed to complete',
	)
	result = parse_payload(data, TaskCompleteResult)

	if as_json:
		print_json(result)
		return

	print('Task marked complete.')
	if result.next_action:
		print(f'Next: {result.next_action}')


def report_impediment(
	client: 'HotwiredClient',
	ctx: 'InvocationContext',
	description: str,
	impediment_type: str = 'technical',
	suggestion: str | None = None,
) -> None:
	state = validate_session(client, ctx)

	client.call(
		'report_impediment',
		{
			'run_id': state.run_id,
			'source': state.role_id,
			'type': impediment_type,
			'description': description,
			'suggestion': suggestion,
		},
		fallback_error='failed to report',
	)
	logger.info(f'{state.role_id} reported a {impediment_type} impediment on {state.run_id}')

	print('Impediment reported.')
	print()
	print(f'Type: {impediment_type}')
	print(f'Description: {description}')
	if suggestion:
		print(f'Suggestion: {suggestion}')
	print()
	print('The human operator has been notified.')


def resolve_impediment(client: 'HotwiredClient', ctx: 'InvocationContext', resolution: str) -> None:
	state = validate_session(client, ctx)

	client.call(
		'resolve_impediment',
		{
			'run_id': state.run_id,
			'source': state.role_id,
			'resolution': resolution,
		},
		fallback_error='failed to resolve',
	)
	print('Impediment resolved.')
	print(f'Resolution: {resolution}')


def handle(args: argparse.Namespace, ctx: 'InvocationContext', client: 'HotwiredClient') -> None:
	if args.command == 'send':
		send(client, ctx, args.to, args.message)
	elif args.command == 'complete':
		complete(client, ctx, outcome=args.outcome, as_json=args.json)
	elif args.command == 'impediment':
		report_impediment(client, ctx, args.description, impediment_type=args.type, suggestion=args.suggestion)
	elif args.command == 'resolve':
		resolve_impediment(client, ctx, args.resolution)
	else:
		raise ValueError(f'Unknown workflow command: {args.command}')
