"""Run inspection command handlers (no session required)."""

import argparse
import logging
from typing import TYPE_CHECKING

from hotwired_cli.output import format_timestamp, print_json, short_id, yes_no
from hotwired_cli.resolve import resolve_run_id
from hotwired_cli.views import RunList, RunStatus, parse_payload

if TYPE_CHECKING:
	from hotwired_cli.config import InvocationContext
	from hotwired_cli.ipc import HotwiredClient

logger = logging.getLogger(__name__)

COMMANDS = {'list', 'ls', 'show', 'remove', 'rm'}


def list_runs(client: 'HotwiredClient', as_json: bool = False) -> None:
	runs = parse_payload(client.call('list_runs', {}), RunList)

	if as_json:
		print_json(runs)
		return

	if not runs.root:
		print('No runs.')
		return

	print(f'{"ID":<10} {"STATUS":<12} {"PHASE":<14} {"PLAYBOOK":<24} CREATED')
	for run in runs.root:
		print(
			f'{short_id(run.id or "-"):<10} {run.status or "-":<12} {run.phase or "-":<14} '
			f'{run.template_name or "-":<24} {format_timestamp(run.created_at or "-")}'
		)


def show_run(client: 'HotwiredClient', run_id: str, as_json: bool = False) -> None:
	full_id = resolve_run_id(client, run_id)
	run = parse_payload(client.call('get_run_status', {'runId': full_id}, fallback_error='run not found'), RunStatus)

	if as_json:
		print_json(run)
		return

	print(f'Run:        {run.run_id or "-"}')
	print(f'Status:     {run.status or "-"}')
	print(f'Phase:      {run.phase or "-"}')
	print(f'Playbook:   {run.template_name or "-"}')
	print(f'Protocol:   {yes_no(run.has_protocol)}')

	if run.connected_agents:
		print()
		print('Agents:')
		for agent in run.connected_agents:
			print(f'  {agent.role_id or "-":<16} {agent.session_name or "-":<28} ({agent.agent_type or "-"})')


def remove_run(client: 'HotwiredClient', run_id: str) -> None:
	full_id = resolve_run_id(client, run_id)
	client.call('delete_run', {'runId': full_id})
	logger.info(f'Removed run {full_id}')
	print(f'Removed run {short_id(full_id)}')


def handle(args: argparse.Namespace, ctx: 'InvocationContext', client: 'HotwiredClient') -> None:
	action = args.run_command
	if action in ('list', 'ls'):
		list_runs(client, as_json=args.json)
	elif action == 'show':
		show_run(client, args.id, as_json=args.json)
	elif action in ('remove', 'rm'):
		remove_run(client, args.id)
	else:
		raise ValueError(f'Unknown run action: {action}')
