"""Shared fixtures: an in-process fake backend listening on a real Unix socket."""

import json
import shutil
import socketserver
import tempfile
import threading
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from hotwired_cli.config import InvocationContext
from hotwired_cli.ipc import HotwiredClient

RUN_ID = 'a1b2c3d4e5f60718293a4b5c6d7e8f90'
TERMINAL_SESSION = 'hw-builder'

Reply = dict[str, Any] | str | Callable[[dict[str, Any]], dict[str, Any] | str]


class FakeBackend:
	"""Answers one JSON line per connection from a method -> reply table.

	A reply is a response dict, a raw string written as-is, or a callable
	taking the decoded request. Unknown methods get success: false.
	"""

	def __init__(self, socket_path: Path):
		self.socket_path = socket_path
		self.replies: dict[str, Reply] = {}
		self.requests: list[dict[str, Any]] = []
		self._server: socketserver.UnixStreamServer | None = None
		self._thread: threading.Thread | None = None

	def set(self, method: str, data: Any = None, *, success: bool = True, error: str | None = None) -> None:
		reply: dict[str, Any] = {'success': success}
		if data is not None:
			reply['data'] = data
		if error is not None:
			reply['error'] = error
		self.replies[method] = reply

	def set_raw(self, method: str, raw: str) -> None:
		self.replies[method] = raw

	def calls(self, method: str) -> list[dict[str, Any]]:
		"""Params of every request received for method, in order."""
		return [r.get('params', {}) for r in self.requests if r.get('method') == method]

	def methods(self) -> list[str]:
		return [r.get('method') for r in self.requests]

	def _answer(self, request: dict[str, Any]) -> str:
		reply = self.replies.get(request.get('method'))
		if reply is None:
			reply = {'success': False, 'error': f'unknown method: {request.get("method")}'}
		if callable(reply):
			reply = reply(request)
		if isinstance(reply, str):
			return reply
		return json.dumps(reply) + '\n'

	def start(self) -> None:
		backend = self

		class Handler(socketserver.StreamRequestHandler):
			def handle(self):
				line = self.rfile.readline()
				if not line:
					return
				request = json.loads(line)
				backend.requests.append(request)
				self.wfile.write(backend._answer(request).encode())

		class Server(socketserver.ThreadingMixIn, socketserver.UnixStreamServer):
			daemon_threads = True

		self._server = Server(str(self.socket_path), Handler)
		self._thread = threading.Thread(target=self._server.serve_forever, daemon=True)
		self._thread.start()

	def stop(self) -> None:
		if self._server:
			self._server.shutdown()
			self._server.server_close()


@pytest.fixture
def backend():
	# AF_UNIX paths are length-limited, so keep this short instead of using tmp_path
	sock_dir = Path(tempfile.mkdtemp(prefix='hw'))
	fake = FakeBackend(sock_dir / 's.sock')
	fake.start()
	yield fake
	fake.stop()
	shutil.rmtree(sock_dir, ignore_errors=True)


@pytest.fixture
def home_dir(tmp_path):
	home = tmp_path / 'home'
	home.mkdir()
	return home


@pytest.fixture
def make_ctx(backend, home_dir):
	"""Factory for contexts that point at the fake backend."""

	def _make(terminal_session: str | None = TERMINAL_SESSION, socket_path: str | None = None) -> InvocationContext:
		environ = {
			'HOTWIRED_HOME': str(home_dir),
			'HOTWIRED_SOCKET': socket_path or str(backend.socket_path),
		}
		if terminal_session is not None:
			environ['ZELLIJ_SESSION_NAME'] = terminal_session
		return InvocationContext.from_env(environ=environ)

	return _make


@pytest.fixture
def ctx(make_ctx):
	return make_ctx()


@pytest.fixture
def client(ctx):
	return HotwiredClient.from_context(ctx)


@pytest.fixture
def attached(backend):
	"""Backend reports the terminal as attached to an active run as 'builder'."""
	backend.set('get_session_state', {'attached_run_id': RUN_ID, 'run_status': 'active', 'role_id': 'builder'})
	return backend


@pytest.fixture
def cli_env(backend, home_dir, tmp_path, monkeypatch):
	"""Process environment for running main() against the fake backend."""
	monkeypatch.setenv('HOTWIRED_HOME', str(home_dir))
	monkeypatch.setenv('HOTWIRED_SOCKET', str(backend.socket_path))
	monkeypatch.setenv('ZELLIJ_SESSION_NAME', TERMINAL_SESSION)
	monkeypatch.delenv('CLAUDE_PROJECT_DIR', raising=False)
	monkeypatch.delenv('HOTWIRED_LOG_LEVEL', raising=False)
	monkeypatch.chdir(tmp_path)
	return backend
