#!/usr/bin/env python3
"""Entry point for the hotwired CLI.

Parses arguments, builds the invocation context once, and dispatches to a
command handler. Handlers raise HotwiredError on failure; this module is the
only place that turns an error into stderr text and an exit code.
"""

import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from hotwired_cli.commands import artifact, attach, auth, inbox, internal, run, session, status, workflow
from hotwired_cli.commands.artifact import COMMENT_STATUSES
from hotwired_cli.commands.workflow import IMPEDIMENT_TYPES
from hotwired_cli.config import InvocationContext
from hotwired_cli.exceptions import HotwiredError
from hotwired_cli.ipc import HotwiredClient
from hotwired_cli.logging_config import setup_logging
from hotwired_cli.output import print_lines

logger = logging.getLogger(__name__)

HANDLERS = {
	'run': run.handle,
	'session': session.handle,
	'auth': auth.handle,
	'hotwire': attach.handle,
	'pair': attach.handle,
	'send': workflow.handle,
	'complete': workflow.handle,
	'impediment': workflow.handle,
	'resolve': workflow.handle,
	'inbox': inbox.handle,
	'status': status.handle,
	'protocol': status.handle,
	'artifact': artifact.handle,
	'internal': internal.handle,
}

# Subcommand groups and the dest holding their action
GROUPS = {
	'run': 'run_command',
	'session': 'session_command',
	'auth': 'auth_command',
	'artifact': 'artifact_command',
	'internal': 'internal_command',
}


def build_parser() -> argparse.ArgumentParser:
	"""Build argument parser with all commands."""
	parser = argparse.ArgumentParser(
		prog='hotwired',
		description='CLI for Hotwired multi-agent workflow orchestration',
		formatter_class=argparse.RawDescriptionHelpFormatter,
		epilog="""
Examples:
  hotwired hotwire --intent "add OAuth login"   # Start a new run
  hotwired pair a1b2c3d4                        # Join an existing run
  hotwired status
  hotwired send builder "Plan is ready"
  hotwired inbox --watch
  hotwired complete --outcome "Tests pass"
  hotwired run list
""",
	)

	# Global flags
	parser.add_argument('--version', '-V', action='store_true', help='Print version information (cli and backend)')
	parser.add_argument(
		'--socket-path',
		'-s',
		help='Path to the Unix socket of the Hotwired backend (default: ~/.hotwired/hotwired.sock)',
	)
	parser.add_argument('--json', action='store_true', help='Output as JSON')
	parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging on stderr')

	subparsers = parser.add_subparsers(dest='command', metavar='COMMAND', help='Command to execute')

	# -------------------------------------------------------------------------
	# Inspection Commands (no session required)
	# -------------------------------------------------------------------------

	run_p = subparsers.add_parser('run', help='Manage workflow runs')
	run_p.set_defaults(group_parser=run_p)
	run_sub = run_p.add_subparsers(dest='run_command')
	run_sub.add_parser('list', aliases=['ls'], help='List all runs')
	p = run_sub.add_parser('show', help='Show details of a run')
	p.add_argument('id', help='Run ID (full UUID or short prefix)')
	p = run_sub.add_parser('remove', aliases=['rm'], help='Remove a run and its associated data')
	p.add_argument('id', help='Run ID (full UUID or short prefix)')

	session_p = subparsers.add_parser('session', help='Manage agent sessions')
	session_p.set_defaults(group_parser=session_p)
	session_sub = session_p.add_subparsers(dest='session_command')
	session_sub.add_parser('list', aliases=['ls'], help='List active agent sessions')
	p = session_sub.add_parser('show', help='Show details of a session')
	p.add_argument('name', help='Session name (or unique prefix)')
	p = session_sub.add_parser('remove', aliases=['rm'], help='Remove (deregister) an active session')
	p.add_argument('name', help='Session name (or unique prefix)')

	auth_p = subparsers.add_parser('auth', help='Authentication and connection status')
	auth_p.set_defaults(group_parser=auth_p)
	auth_sub = auth_p.add_subparsers(dest='auth_command')
	auth_sub.add_parser('status', help='Show connection and authentication status')

	# -------------------------------------------------------------------------
	# Attachment Commands
	# -------------------------------------------------------------------------

	p = subparsers.add_parser('hotwire', help='Start a new workflow run')
	p.add_argument('--playbook', help='Suggested playbook')
	p.add_argument('--intent', help='What you want to do')
	p.add_argument('--project', type=Path, help='Project directory (default: current directory)')

	p = subparsers.add_parser('pair', help='Join an existing workflow run')
	p.add_argument('run_id', help='Run ID (full UUID or short prefix)')
	p.add_argument('--role', help='Role to take in the run')

	# -------------------------------------------------------------------------
	# Workflow Commands (validated session required)
	# -------------------------------------------------------------------------

	p = subparsers.add_parser('send', help='Send a message to another participant')
	p.add_argument('to', help='Recipient role (or "human")')
	p.add_argument('message', help='Message text')

	p = subparsers.add_parser('inbox', help='Check for incoming messages')
	p.add_argument('--watch', '-w', action='store_true', help='Keep polling for new messages')
	p.add_argument('--since', type=int, help='Only messages after this sequence number')

	p = subparsers.add_parser('complete', help='Mark your task as complete')
	p.add_argument('--outcome', help='Outcome summary (default: Completed)')

	p = subparsers.add_parser('impediment', help='Report a blocker')
	p.add_argument('description', help='What is blocking you')
	p.add_argument('--type', default='technical', choices=IMPEDIMENT_TYPES, help='Impediment type')
	p.add_argument('--suggestion', help='Suggested resolution')

	p = subparsers.add_parser('resolve', help='Resolve the current impediment')
	p.add_argument('resolution', help='How the impediment was resolved')

	subparsers.add_parser('status', help='Show status of the attached run')
	subparsers.add_parser('protocol', help='Fetch protocol instructions for your role')

	# -------------------------------------------------------------------------
	# Artifacts
	# -------------------------------------------------------------------------

	artifact_p = subparsers.add_parser('artifact', help='Manage tracked artifacts')
	artifact_p.set_defaults(group_parser=artifact_p)
	artifact_sub = artifact_p.add_subparsers(dest='artifact_command')

	artifact_sub.add_parser('list', help='List tracked artifacts in the current run')

	p = artifact_sub.add_parser('sync', help='Register a file or record a new version')
	p.add_argument('path', help='File path')

	p = artifact_sub.add_parser('move', help='Move an artifact (preserves comments)')
	p.add_argument('old_path', help='Current path')
	p.add_argument('new_path', help='New path')
	p.add_argument('--refs-only', action='store_true', help='File was already moved; only update references')

	p = artifact_sub.add_parser('comment', help='Add a comment anchored to specific text')
	p.add_argument('path', help='Artifact path')
	p.add_argument('target_text', help='Text the comment is anchored to')
	p.add_argument('message', help='Comment text')

	p = artifact_sub.add_parser('comments', help='List comments on an artifact')
	p.add_argument('path', help='Artifact path')
	p.add_argument('--status', default='open', choices=COMMENT_STATUSES, help='Filter by comment status')

	p = artifact_sub.add_parser('resolve', help='Resolve a comment')
	p.add_argument('comment_id', help='Comment ID')

	p = artifact_sub.add_parser('versions', help='List versions of an artifact')
	p.add_argument('path', help='Artifact path')

	p = artifact_sub.add_parser('show', help='Show content of a specific version')
	p.add_argument('path', help='Artifact path')
	p.add_argument('version', type=int, help='Version number')

	# -------------------------------------------------------------------------
	# Hook integration (no help text, so it stays out of the listing)
	# -------------------------------------------------------------------------

	internal_p = subparsers.add_parser('internal')
	internal_p.set_defaults(group_parser=internal_p)
	internal_sub = internal_p.add_subparsers(dest='internal_command')
	p = internal_sub.add_parser('hook-event')
	p.add_argument('event_name')
	internal_sub.add_parser('session-start')
	internal_sub.add_parser('session-end')

	return parser


def normalize_aliases(args: argparse.Namespace) -> None:
	"""Map 'ls'/'rm' back to their canonical action names."""
	for dest in ('run_command', 'session_command'):
		action = getattr(args, dest, None)
		if action == 'ls':
			setattr(args, dest, 'list')
		elif action == 'rm':
			setattr(args, dest, 'remove')


def dispatch(args: argparse.Namespace, ctx: InvocationContext, client: HotwiredClient) -> None:
	HANDLERS[args.command](args, ctx, client)


def main(argv: list[str] | None = None) -> int:
	"""Main entry point."""
	parser = build_parser()
	args = parser.parse_args(argv)

	load_dotenv()
	setup_logging('debug' if args.verbose else None)

	ctx = InvocationContext.from_env(socket_path=args.socket_path)
	client = HotwiredClient.from_context(ctx)
	logger.debug(f'Socket: {ctx.socket_path}, terminal session: {ctx.terminal_session}')

	if args.version:
		auth.print_version(client)
		return 0

	if not args.command:
		parser.print_help()
		return 0

	group_dest = GROUPS.get(args.command)
	if group_dest and not getattr(args, group_dest, None):
		args.group_parser.print_help()
		return 0

	normalize_aliases(args)

	try:
		dispatch(args, ctx, client)
	except HotwiredError as e:
		logger.debug(f'{args.command} failed: {type(e).__name__}')
		print_lines(e.render(), file=sys.stderr)
		return 1

	return 0


if __name__ == '__main__':
	sys.exit(main())
