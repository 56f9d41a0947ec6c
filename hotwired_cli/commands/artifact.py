"""Artifact command handlers.

Artifacts are files tracked by the backend, with versions and comments
anchored to text. The backend owns versioning and anchor relocation; these
handlers check local files where needed and print the results.
"""

import argparse
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from hotwired_cli.exceptions import BackendError, CommandError
from hotwired_cli.output import format_timestamp, print_json
from hotwired_cli.validate import validate_session
from hotwired_cli.views import (
	ArtifactList,
	ArtifactMoveResult,
	ArtifactSyncResult,
	ArtifactVersionContent,
	CommentAdded,
	CommentList,
	VersionList,
	parse_payload,
)

if TYPE_CHECKING:
	from hotwired_cli.config import InvocationContext
	from hotwired_cli.ipc import HotwiredClient

logger = logging.getLogger(__name__)

COMMANDS = {'list', 'sync', 'move', 'comment', 'comments', 'resolve', 'versions', 'show'}

COMMENT_STATUSES = ('open', 'resolved', 'orphaned', 'all')
TITLE_WIDTH = 20
TARGET_PREVIEW = 30


def _title_display(title: str) -> str:
	if len(title) > TITLE_WIDTH:
		return title[: TITLE_WIDTH - 3] + '...'
	return title


def _status_display(status: str) -> str:
	return 'MISSING' if status == 'missing' else status


def _target_preview(target: str) -> str:
	if len(target) > TARGET_PREVIEW:
		return target[:TARGET_PREVIEW] + '...'
	return target


def list_artifacts(client: 'HotwiredClient', ctx: 'InvocationContext', as_json: bool = False) -> None:
	state = validate_session(client, ctx)
	artifacts = parse_payload(client.call('artifact_list', {'runId': state.run_id}, fallback_error='unknown'), ArtifactList)

	if as_json:
		print_json(artifacts)
		return

	if not artifacts.artifacts:
		print('No tracked artifacts.')
		return

	print(f'{"PATH":<30} {"STATUS":<8} {"COMMENTS":<8} {"VERSIONS":<8} {"TITLE":<20}')
	for a in artifacts.artifacts:
		print(
			f'{a.path or "-":<30} {_status_display(a.status or "?"):<8} {a.comment_count:<8} '
			f'{a.version_count:<8} {_title_display(a.title or "-"):<20}'
		)


def sync(client: 'HotwiredClient', ctx: 'InvocationContext', path: Path, as_json: bool = False) -> None:
	"""Register a new artifact or record a new version of a tracked one."""
	state = validate_session(client, ctx)

	if not path.exists():
		raise CommandError(f'file not found: {path}')

	data = client.call('artifact_sync', {'runId': state.run_id, 'path': str(path)}, fallback_error='unknown')
	result = parse_payload(data, ArtifactSyncResult)

	if as_json:
		print_json(result)
		return

	title = result.title or 'Untitled'
	if result.status == 'registered':
		print(f'Artifact registered: {path}')
		print(f'  Title: {title}')
		print(f'  Version: {result.version}')
	elif result.status == 'synced':
		print(f'Artifact synced: {path}')
		print(f'  Title: {title}')
		print(f'  Version: {result.version}')
		if result.comments_relocated > 0 or result.comments_orphaned > 0:
			print(f'  {result.comments_relocated} comments relocated, {result.comments_orphaned} orphaned')
	else:
		print(f'Status: {result.status}')


def move(
	client: 'HotwiredClient',
	ctx: 'InvocationContext',
	old_path: Path,
	new_path: Path,
	refs_only: bool = False,
	as_json: bool = False,
) -> None:
	"""Move an artifact, keeping its comments.

	With refs_only the file was already moved by hand, so the new path must
	exist; otherwise the old path must exist and the backend moves the file.
	"""
	state = validate_session(client, ctx)

	if refs_only:
		if not new_path.exists():
			raise CommandError(
				f'new file not found: {new_path}',
				['When using --refs-only, the file must already exist at the new location.'],
			)
	elif not old_path.exists():
		raise CommandError(f'source file not found: {old_path}', ['Use --refs-only if the file was already moved.'])

	response = client.request(
		'artifact_move',
		{
			'runId': state.run_id,
			'oldPath': str(old_path),
			'newPath': str(new_path),
			'refsOnly': refs_only,
		},
	)
	if not response.success:
		err = response.error or 'unknown'
		if 'not found' in err or 'not tracked' in err:
			raise BackendError(err, ['The artifact must be synced first. Run:', f'  hotwired artifact sync {old_path}'])
		raise BackendError(err)

	result = parse_payload(response.data, ArtifactMoveResult)

	if as_json:
		print_json(result)
		return

	if result.file_moved:
		print(f'File moved: {old_path} → {new_path}')
	print(f'Artifact refs updated: {old_path} → {new_path}')
	print(f'  {result.comments_preserved} comments preserved')


def add_comment(client: 'HotwiredClient', ctx: 'InvocationContext', path: Path, target_text: str, message: str) -> None:
	"""Add a comment anchored to target_text inside the artifact."""
	state = validate_session(client, ctx)

	data = client.call(
		'artifact_add_comment',
		{
			'runId': state.run_id,
			'path': str(path),
			'targetText': target_text,
			'comment': message,
			'author': state.role_id,
		},
		fallback_error='unknown',
	)
	added = parse_payload(data, CommentAdded)
	print(f'Comment added: {added.comment_id or "?"}')


def list_comments(
	client: 'HotwiredClient', ctx: 'InvocationContext', path: Path, status_filter: str = 'open', as_json: bool = False
) -> None:
	state = validate_session(client, ctx)

	data = client.call(
		'artifact_list_comments',
		{
			'runId': state.run_id,
			'path': str(path),
			'statusFilter': status_filter,
		},
		fallback_error='unknown',
	)
	comments = parse_payload(data, CommentList)

	if as_json:
		print_json(comments)
		return

	if not comments.comments:
		print('No comments.')
		return

	for c in comments.comments:
		print(f'[{c.comment_id or "?"}] "{_target_preview(c.target_text or "")}" - {c.comment or ""} ({c.status or "?"})')


def resolve_comment(client: 'HotwiredClient', ctx: 'InvocationContext', comment_id: str) -> None:
	state = validate_session(client, ctx)

	client.call(
		'artifact_resolve_comment',
		{
			'runId': state.run_id,
			'commentId': comment_id,
			'resolvedBy': state.role_id,
		},
		fallback_error='unknown',
	)
	print(f'Comment resolved: {comment_id}')


def list_versions(client: 'HotwiredClient', ctx: 'InvocationContext', path: Path, as_json: bool = False) -> None:
	state = validate_session(client, ctx)

	data = client.call('artifact_list_versions', {'runId': state.run_id, 'path': str(path)}, fallback_error='unknown')
	versions = parse_payload(data, VersionList)

	if as_json:
		print_json(versions)
		return

	if not versions.versions:
		print('No versions found. Run `artifact sync` first.')
		return

	print(f'{"VERSION":<8} {"TIMESTAMP":<20} CHANGES')
	for v in versions.versions:
		changes = '(initial)' if v.version == 1 else f'+{v.lines_added} -{v.lines_removed} lines'
		print(f'{v.version:<8} {format_timestamp(v.timestamp or "-"):<20} {changes}')


def show_version(client: 'HotwiredClient', ctx: 'InvocationContext', path: Path, version: int, as_json: bool = False) -> None:
	state = validate_session(client, ctx)

	data = client.call(
		'artifact_get_version',
		{
			'runId': state.run_id,
			'path': str(path),
			'version': version,
		},
		fallback_error='unknown',
	)
	content = parse_payload(data, ArtifactVersionContent)

	if as_json:
		print_json(content)
		return

	print(f'# {content.title or "Untitled"} (version {version})')
	print(f'# Synced: {format_timestamp(content.timestamp or "-")}')
	print(f'# {"-" * 60}')
	print()
	print(content.content or '')


def handle(args: argparse.Namespace, ctx: 'InvocationContext', client: 'HotwiredClient') -> None:
	action = args.artifact_command
	if action == 'list':
		list_artifacts(client, ctx, as_json=args.json)
	elif action == 'sync':
		sync(client, ctx, Path(args.path), as_json=args.json)
	elif action == 'move':
		move(client, ctx, Path(args.old_path), Path(args.new_path), refs_only=args.refs_only, as_json=args.json)
	elif action == 'comment':
		add_comment(client, ctx, Path(args.path), args.target_text, args.message)
	elif action == 'comments':
		list_comments(client, ctx, Path(args.path), status_filter=args.status, as_json=args.json)
	elif action == 'resolve':
		resolve_comment(client, ctx, args.comment_id)
	elif action == 'versions':
		list_versions(client, ctx, Path(args.path), as_json=args.json)
	elif action == 'show':
		show_version(client, ctx, Path(args.path), args.version, as_json=args.json)
	else:
		raise ValueError(f'Unknown artifact action: {action}')
