"""Run status and protocol instructions for the attached run."""

import argparse
from typing import TYPE_CHECKING

from hotwired_cli.output import print_json
from hotwired_cli.validate import validate_session
from hotwired_cli.views import ProtocolInfo, RunStatus, parse_payload

if TYPE_CHECKING:
	from hotwired_cli.config import InvocationContext
	from hotwired_cli.ipc import HotwiredClient

COMMANDS = {'status', 'protocol'}

NO_PROTOCOL = '(No protocol instructions available)'
CAN_RESOLVE_LINE = (
	'- Can resolve impediments: You can use `hotwired resolve` to resolve blockers raised by other agents'
)


def status(client: 'HotwiredClient', ctx: 'InvocationContext', as_json: bool = False) -> None:
	state = validate_session(client, ctx)
	run = parse_payload(
		client.call('get_run_status', {'runId': state.run_id}, fallback_error='failed to get status'),
		RunStatus,
	)

	if as_json:
		print_json(run)
		return

	# Identity block: make it unambiguous who the calling agent is
	print(f'YOU ARE:  {state.role_id}')
	print(f'Session:  {state.terminal_session} (auto-detected from Zellij)')
	print()
	print(f'Run:      {state.run_id}')
	print(f'Status:   {run.status or "-"}')
	print(f'Phase:    {run.phase or "-"}')
	print(f'Playbook: {run.template_name or "-"}')
	print()

	if run.connected_agents is not None:
		print('Connected Agents:')
		for agent in run.connected_agents:
			role = agent.role_id or '-'
			if role == state.role_id:
				print(f'  > {role} (you)')
			else:
				print(f'  - {role}')

	if run.impediments:
		print()
		print('BLOCKED BY:')
		for imp in run.impediments:
			print(f'  - [{imp.source or "-"}]: {imp.description or "-"}')
		print()
		print('To resolve: hotwired resolve "<reason>"')


def render_protocol(info: ProtocolInfo) -> list[str]:
	"""Markdown rendering of the protocol for the agent's context."""
	lines = [
		'# Hotwired Workflow Protocol',
		'',
		f'**Run ID:** {info.run_id or "-"}',
		f'**Playbook:** {info.template_name or "-"}',
		'',
		'## Protocol Instructions',
		'',
		info.playbook_protocol or NO_PROTOCOL,
	]

	if info.role_protocol:
		lines += ['', '## Your Role Instructions', '', info.role_protocol]

	if info.capabilities and info.capabilities.can_resolve_impediments:
		lines += ['', '## Your Capabilities', '', CAN_RESOLVE_LINE]

	if info.initialization_condition is not None:
		lines += ['', '## Initialization Condition', '', info.initialization_condition]

	return lines


def protocol(client: 'HotwiredClient', ctx: 'InvocationContext', as_json: bool = False) -> None:
	"""Re-fetch protocol instructions, e.g. after the agent's context was compacted."""
	state = validate_session(client, ctx)
	info = parse_payload(
		client.call('get_protocol', {'runId': state.run_id, 'role': state.role_id}, fallback_error='failed to get protocol'),
		ProtocolInfo,
	)

	if as_json:
		print_json(info)
		return

	for line in render_protocol(info):
		print(line)


def handle(args: argparse.Namespace, ctx: 'InvocationContext', client: 'HotwiredClient') -> None:
	if args.command == 'status':
		status(client, ctx, as_json=args.json)
	elif args.command == 'protocol':
		protocol(client, ctx, as_json=args.json)
	else:
		raise ValueError(f'Unknown status command: {args.command}')
