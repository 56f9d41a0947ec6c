"""Tests for argument parsing and end-to-end command dispatch."""

import json
from unittest.mock import patch

import pytest

from hotwired_cli import __version__
from hotwired_cli.main import build_parser, main

RUN_ID = 'a1b2c3d4e5f60718293a4b5c6d7e8f90'
OTHER_RUN = 'a1b2ffff00000000000000000000000a'


# =============================================================================
# Parser
# =============================================================================


def test_global_flags_before_subcommand():
	parser = build_parser()

	args = parser.parse_args(['--json', '-s', '/tmp/x.sock', 'run', 'show', 'a1b2'])

	assert args.json is True
	assert args.socket_path == '/tmp/x.sock'
	assert args.command == 'run'
	assert args.run_command == 'show'
	assert args.id == 'a1b2'


def test_global_flag_defaults():
	args = build_parser().parse_args(['status'])
	assert args.json is False
	assert args.verbose is False
	assert args.socket_path is None


def test_impediment_defaults():
	args = build_parser().parse_args(['impediment', 'tests hang'])
	assert args.description == 'tests hang'
	assert args.type == 'technical'
	assert args.suggestion is None


def test_impediment_type_is_restricted():
	with pytest.raises(SystemExit):
		build_parser().parse_args(['impediment', 'x', '--type', 'bogus'])


def test_artifact_show_version_is_int():
	args = build_parser().parse_args(['artifact', 'show', 'PLAN.md', '3'])
	assert args.artifact_command == 'show'
	assert args.version == 3


def test_artifact_comments_status_default():
	args = build_parser().parse_args(['artifact', 'comments', 'PLAN.md'])
	assert args.status == 'open'


def test_inbox_flags():
	args = build_parser().parse_args(['inbox', '--watch', '--since', '12'])
	assert args.watch is True
	assert args.since == 12


def test_internal_hidden_from_help():
	help_text = build_parser().format_help()
	assert 'hotwire' in help_text
	assert 'internal' not in help_text


# =============================================================================
# Inspection commands
# =============================================================================


def test_no_command_prints_help(cli_env, capsys):
	assert main([]) == 0
	assert 'usage: hotwired' in capsys.readouterr().out


def test_group_without_action_prints_group_help(cli_env, capsys):
	assert main(['run']) == 0
	assert 'usage: hotwired run' in capsys.readouterr().out


def test_run_list(cli_env, capsys):
	cli_env.set(
		'list_runs',
		[{'id': RUN_ID, 'status': 'active', 'phase': 'build', 'templateName': 'feature', 'createdAt': '2024-01-15T10:30:00Z'}],
	)

	assert main(['run', 'ls']) == 0

	out = capsys.readouterr().out
	assert 'a1b2c3d4 ' in out
	assert RUN_ID not in out
	assert '2024-01-15 10:30:00' in out


def test_run_list_empty(cli_env, capsys):
	cli_env.set('list_runs', [])
	assert main(['run', 'list']) == 0
	assert capsys.readouterr().out == 'No runs.\n'


def test_run_list_json(cli_env, capsys):
	cli_env.set('list_runs', [{'id': RUN_ID, 'status': 'active'}])

	assert main(['--json', 'run', 'list']) == 0

	assert json.loads(capsys.readouterr().out) == [{'id': RUN_ID, 'status': 'active'}]


def test_run_show_resolves_prefix(cli_env, capsys):
	cli_env.set('list_runs', [{'id': RUN_ID}, {'id': 'c0ffee00000000000000000000000001'}])
	cli_env.set('get_run_status', {'runId': RUN_ID, 'status': 'active', 'hasProtocol': True})

	assert main(['run', 'show', 'a1']) == 0

	assert cli_env.calls('get_run_status') == [{'runId': RUN_ID}]
	out = capsys.readouterr().out
	assert f'Run:        {RUN_ID}' in out
	assert 'Protocol:   yes' in out


def test_run_remove_ambiguous(cli_env, capsys):
	cli_env.set('list_runs', [{'id': RUN_ID}, {'id': OTHER_RUN}])

	assert main(['run', 'rm', 'a1b2']) == 1

	err = capsys.readouterr().err
	assert "error: ambiguous run id 'a1b2', be more specific" in err
	assert cli_env.calls('delete_run') == []


def test_run_remove_unknown(cli_env, capsys):
	cli_env.set('list_runs', [{'id': RUN_ID}])
	assert main(['run', 'remove', 'ff']) == 1
	assert "error: no run matching 'ff'" in capsys.readouterr().err


def test_session_show_exact_name(cli_env, capsys):
	cli_env.set(
		'list_active_sessions',
		{'sessions': [{'sessionName': 'hw', 'projectDir': '/src/app'}, {'sessionName': 'hw-2', 'isWorktree': True}]},
	)

	assert main(['session', 'show', 'hw']) == 0

	out = capsys.readouterr().out
	assert 'Session:    hw\n' in out
	assert 'Project:    /src/app' in out


def test_session_remove(cli_env, capsys):
	cli_env.set('list_active_sessions', {'sessions': [{'sessionName': 'hw-planner'}]})
	cli_env.set('deregister_session', {})

	assert main(['session', 'rm', 'hw-p']) == 0

	assert cli_env.calls('deregister_session') == [{'sessionName': 'hw-planner'}]
	assert 'Removed session hw-planner' in capsys.readouterr().out


def test_auth_status(cli_env, home_dir, capsys):
	cli_env.set('ping', {'version': '0.9.1'})
	(home_dir / 'auth_token').write_text('tok\n')

	assert main(['auth', 'status']) == 0

	out = capsys.readouterr().out
	assert 'Backend:    running (v0.9.1)' in out
	assert 'Auth token: configured' in out


def test_auth_status_with_undecodable_token_file(cli_env, home_dir, capsys):
	cli_env.set('ping', {'version': '0.9.1'})
	(home_dir / 'auth_token').write_bytes(b'\xff\xfe\x00bad')

	assert main(['auth', 'status']) == 0

	assert 'Backend:    running (v0.9.1)' in capsys.readouterr().out


def test_auth_status_backend_down(cli_env, tmp_path, monkeypatch, capsys):
	monkeypatch.setenv('HOTWIRED_SOCKET', str(tmp_path / 'gone.sock'))

	assert main(['auth', 'status']) == 0

	out = capsys.readouterr().out
	assert 'Backend:    not running' in out
	assert '(not found)' in out
	assert 'Auth token: not configured' in out


def test_version_with_backend(cli_env, capsys):
	cli_env.set('ping', {'version': '0.9.1'})
	assert main(['--version']) == 0
	assert capsys.readouterr().out == f'hotwired-cli {__version__} (core 0.9.1)\n'


def test_version_without_backend(cli_env, tmp_path, capsys):
	assert main(['-s', str(tmp_path / 'gone.sock'), '-V']) == 0
	assert 'not connected' in capsys.readouterr().out


# =============================================================================
# Attachment
# =============================================================================


def test_hotwire_started(cli_env, tmp_path, capsys):
	cli_env.set('hotwire', {'status': 'started', 'runId': RUN_ID, 'role': 'planner', 'protocol': '# Protocol'})

	assert main(['hotwire', '--intent', 'add login']) == 0

	params = cli_env.calls('hotwire')[0]
	assert params['zellijSession'] == 'hw-builder'
	assert params['intent'] == 'add login'
	assert params['projectPath'] == str(tmp_path)
	out = capsys.readouterr().out
	assert f'Run started: {RUN_ID}' in out
	assert '# Protocol' in out


def test_hotwire_needs_confirmation(cli_env, capsys):
	cli_env.set('hotwire', {'status': 'needs_confirmation', 'pendingRunId': 'p-123'})

	assert main(['hotwire']) == 0

	assert 'hotwired pair p-123' in capsys.readouterr().out


def test_hotwire_requires_terminal_session(cli_env, monkeypatch, capsys):
	monkeypatch.delenv('ZELLIJ_SESSION_NAME')

	assert main(['hotwire', '--intent', 'x']) == 1

	assert 'ERROR: Not running in a Zellij session.' in capsys.readouterr().err
	assert cli_env.requests == []


def test_pair_resolves_prefix_without_validation(cli_env, capsys):
	cli_env.set('list_runs', [{'id': RUN_ID}])
	cli_env.set('pair', {'role': 'reviewer', 'protocol': 'Review things.'})

	assert main(['pair', 'a1b2', '--role', 'reviewer']) == 0

	assert 'get_session_state' not in cli_env.methods()
	assert cli_env.calls('pair') == [{'zellij_session': 'hw-builder', 'run_id': RUN_ID, 'role_id': 'reviewer'}]
	assert 'Your role: reviewer' in capsys.readouterr().out


# =============================================================================
# Workflow commands
# =============================================================================


def test_workflow_command_not_attached(cli_env, capsys):
	cli_env.set('get_session_state', {'attached_run_id': None})

	assert main(['send', 'planner', 'hello']) == 1

	err = capsys.readouterr().err
	assert err.startswith('ERROR: This terminal is not attached to any workflow run.')
	assert cli_env.calls('handoff') == []


def test_workflow_command_backend_down(cli_env, tmp_path, monkeypatch, capsys):
	monkeypatch.setenv('HOTWIRED_SOCKET', str(tmp_path / 'gone.sock'))

	assert main(['status']) == 1

	err = capsys.readouterr().err
	assert 'error: Hotwired backend is not running' in err
	assert 'Is the Hotwired desktop app running?' in err


def test_send(cli_env, attached, capsys):
	cli_env.set('handoff', {})
	long_message = 'x' * 80

	assert main(['send', 'planner', long_message]) == 0

	params = cli_env.calls('handoff')[0]
	assert params['runId'] == RUN_ID
	assert params['to'] == 'planner'
	assert params['source'] == 'builder'
	assert params['details'] == long_message
	assert params['summary'] == 'x' * 47 + '...'
	assert capsys.readouterr().out == 'Sent to planner\n'


def test_send_backend_error(cli_env, attached, capsys):
	cli_env.set('handoff', success=False)
	assert main(['send', 'planner', 'hi']) == 1
	assert 'error: failed to send' in capsys.readouterr().err


def test_complete(cli_env, attached, capsys):
	cli_env.set('task_complete', {'next_action': 'wait for review'})

	assert main(['complete']) == 0

	assert cli_env.calls('task_complete')[0]['outcome'] == 'Completed'
	out = capsys.readouterr().out
	assert 'Task marked complete.' in out
	assert 'Next: wait for review' in out


def test_impediment_and_resolve(cli_env, attached, capsys):
	cli_env.set('report_impediment', {})
	cli_env.set('resolve_impediment', {})

	assert main(['impediment', 'no db access', '--type', 'access', '--suggestion', 'grant role']) == 0
	assert main(['resolve', 'granted']) == 0

	assert cli_env.calls('report_impediment')[0] == {
		'run_id': RUN_ID,
		'source': 'builder',
		'type': 'access',
		'description': 'no db access',
		'suggestion': 'grant role',
	}
	assert cli_env.calls('resolve_impediment')[0]['resolution'] == 'granted'
	assert 'Impediment resolved.' in capsys.readouterr().out


def test_status(cli_env, attached, capsys):
	cli_env.set(
		'get_run_status',
		{
			'status': 'active',
			'phase': 'build',
			'templateName': 'feature',
			'connectedAgents': [{'roleId': 'planner'}, {'roleId': 'builder'}],
			'impediments': [{'source': 'planner', 'description': 'needs decision'}],
		},
	)

	assert main(['status']) == 0

	out = capsys.readouterr().out
	assert 'YOU ARE:  builder' in out
	assert '  > builder (you)' in out
	assert '  - planner' in out
	assert 'BLOCKED BY:' in out
	assert '[planner]: needs decision' in out


def test_protocol(cli_env, attached, capsys):
	cli_env.set(
		'get_protocol',
		{'runId': RUN_ID, 'playbookProtocol': 'Do the work.', 'capabilities': {'canResolveImpediments': True}},
	)

	assert main(['protocol']) == 0

	assert cli_env.calls('get_protocol') == [{'runId': RUN_ID, 'role': 'builder'}]
	out = capsys.readouterr().out
	assert 'Do the work.' in out
	assert '## Your Capabilities' in out
	assert '## Your Role Instructions' not in out


def test_inbox_once(cli_env, attached, capsys):
	cli_env.set('get_conversation_events', {'events': []})
	assert main(['inbox']) == 0
	assert capsys.readouterr().out == 'No new messages.\n'


def test_inbox_prints_events(cli_env, attached, capsys):
	cli_env.set(
		'get_conversation_events',
		{'events': [{'sequence': 1, 'source': 'planner', 'eventType': 'handoff', 'content': 'go'}]},
	)

	assert main(['inbox', '--since', '0']) == 0

	assert 'planner→handoff' in capsys.readouterr().out


def test_inbox_watch_interrupt_exits_zero(cli_env, attached, capsys):
	with patch('hotwired_cli.commands.inbox.watch', side_effect=KeyboardInterrupt) as mock_watch:
		assert main(['inbox', '--watch', '--since', '4']) == 0

	assert mock_watch.call_args.args[1:] == (RUN_ID, 4)
	assert 'Watching for messages' in capsys.readouterr().out


# =============================================================================
# Artifacts
# =============================================================================


def test_artifact_sync_missing_file(cli_env, attached, capsys):
	assert main(['artifact', 'sync', 'nope.md']) == 1
	assert 'error: file not found: nope.md' in capsys.readouterr().err
	assert cli_env.calls('artifact_sync') == []


def test_artifact_sync(cli_env, attached, tmp_path, capsys):
	(tmp_path / 'PLAN.md').write_text('# Plan\n')
	cli_env.set('artifact_sync', {'status': 'synced', 'title': 'Plan', 'version': 2, 'commentsRelocated': 1})

	assert main(['artifact', 'sync', 'PLAN.md']) == 0

	out = capsys.readouterr().out
	assert 'Artifact synced: PLAN.md' in out
	assert '1 comments relocated, 0 orphaned' in out


def test_artifact_move_untracked_suggests_sync(cli_env, attached, tmp_path, capsys):
	(tmp_path / 'old.md').write_text('x')
	cli_env.set('artifact_move', success=False, error='artifact not tracked')

	assert main(['artifact', 'move', 'old.md', 'new.md']) == 1

	err = capsys.readouterr().err
	assert 'error: artifact not tracked' in err
	assert 'hotwired artifact sync old.md' in err


def test_artifact_move_refs_only_needs_new_file(cli_env, attached, capsys):
	assert main(['artifact', 'move', 'old.md', 'new.md', '--refs-only']) == 1
	assert 'new file not found: new.md' in capsys.readouterr().err


def test_artifact_comments(cli_env, attached, capsys):
	cli_env.set(
		'artifact_list_comments',
		{'comments': [{'commentId': 'c1', 'targetText': 'some anchored text', 'comment': 'why?', 'status': 'open'}]},
	)

	assert main(['artifact', 'comments', 'PLAN.md', '--status', 'all']) == 0

	assert cli_env.calls('artifact_list_comments')[0]['statusFilter'] == 'all'
	assert '[c1] "some anchored text" - why? (open)' in capsys.readouterr().out


# =============================================================================
# Hook integration
# =============================================================================


def test_hook_event_with_backend_down_exits_zero(cli_env, tmp_path, monkeypatch, capsys):
	monkeypatch.setenv('HOTWIRED_SOCKET', str(tmp_path / 'gone.sock'))
	monkeypatch.setattr('hotwired_cli.commands.internal.read_stdin_json', lambda: {})

	assert main(['internal', 'hook-event', 'Stop']) == 0

	captured = capsys.readouterr()
	assert captured.out == ''
	assert captured.err == ''


def test_hook_event_without_terminal_session_is_still_sent(cli_env, monkeypatch):
	monkeypatch.delenv('ZELLIJ_SESSION_NAME')
	monkeypatch.setattr('hotwired_cli.commands.internal.read_stdin_json', lambda: {'k': 1})
	cli_env.set('hook_event', {})

	assert main(['internal', 'hook-event', 'Stop']) == 0

	params = cli_env.calls('hook_event')[0]
	assert params['eventName'] == 'Stop'
	assert params['zellijSession'] is None
	assert params['payload'] == {'k': 1}


def test_session_end_without_terminal_session_sends_nothing(cli_env, monkeypatch):
	monkeypatch.delenv('ZELLIJ_SESSION_NAME')

	assert main(['internal', 'session-end']) == 0

	assert cli_env.requests == []


def test_session_start_registers(cli_env, tmp_path, capsys):
	cli_env.set('register_session', {})
	cli_env.set('hook_event', {})

	assert main(['internal', 'session-start']) == 0

	assert cli_env.calls('register_session') == [{'sessionName': 'hw-builder', 'projectDir': str(tmp_path)}]
	assert cli_env.calls('hook_event')[0]['eventName'] == 'session_start'


def test_session_end_rejected_by_backend_exits_zero(cli_env):
	cli_env.set('deregister_session', success=False, error='unknown session')

	assert main(['internal', 'session-end']) == 0

	assert cli_env.methods() == ['deregister_session', 'hook_event']
