"""Check for incoming messages, once or continuously."""

import argparse
import sys
from typing import TYPE_CHECKING

from hotwired_cli.exceptions import HotwiredError
from hotwired_cli.inbox import format_event, poll, watch
from hotwired_cli.output import print_json, print_lines
from hotwired_cli.validate import validate_session
from hotwired_cli.views import ConversationEvent

if TYPE_CHECKING:
	from hotwired_cli.config import InvocationContext
	from hotwired_cli.ipc import HotwiredClient

COMMANDS = {'inbox'}


def _print_events(events: list[ConversationEvent]) -> None:
	for event in events:
		print_lines(format_event(event))
	sys.stdout.flush()


def _report_poll_error(error: HotwiredError) -> None:
	print(f'error fetching: {error.message}', file=sys.stderr)


def check_inbox(client: 'HotwiredClient', ctx: 'InvocationContext', since: int | None = None, as_json: bool = False) -> None:
	state = validate_session(client, ctx)
	batch = poll(client, state.run_id, since)

	if as_json:
		print_json(batch)
		return

	if not batch.events:
		print('No new messages.')
		return
	_print_events(batch.events)


def watch_inbox(client: 'HotwiredClient', ctx: 'InvocationContext', since: int | None = None) -> None:
	state = validate_session(client, ctx)

	print('Watching for messages... (Ctrl+C to stop)')
	print()
	sys.stdout.flush()

	try:
		watch(client, state.run_id, since, on_events=_print_events, on_error=_report_poll_error)
	except KeyboardInterrupt:
		pass


def handle(args: argparse.Namespace, ctx: 'InvocationContext', client: 'HotwiredClient') -> None:
	if args.watch:
		watch_inbox(client, ctx, since=args.since)
	else:
		check_inbox(client, ctx, since=args.since, as_json=args.json)
