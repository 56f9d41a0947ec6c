"""Unix socket client for the Hotwired backend.

One request per connection: connect, write one JSON line, read one JSON line,
close. No retries and no pooling; the backend is a local peer.
"""

import logging
import os
import socket
from pathlib import Path
from typing import TYPE_CHECKING, Any

from hotwired_cli.exceptions import BackendError, ConnectionFailed, HotwiredError, InvalidResponse, NotConnected, RequestFailed
from hotwired_cli.protocol import Request, Response, new_request_id

if TYPE_CHECKING:
	from hotwired_cli.config import InvocationContext

logger = logging.getLogger(__name__)

RECV_CHUNK = 4096


class HotwiredClient:
	"""Client for the backend's newline-delimited JSON socket."""

	def __init__(self, socket_path: str | Path, token: str | None = None, timeout: float | None = None) -> None:
		self.socket_path = str(socket_path)
		self.token = token
		self.timeout = timeout

	@classmethod
	def from_context(cls, ctx: 'InvocationContext') -> 'HotwiredClient':
		return cls(ctx.socket_path, token=ctx.read_auth_token())

	def _connect(self) -> socket.socket:
		sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
		sock.settimeout(self.timeout)
		try:
			sock.connect(self.socket_path)
		except OSError as e:
			sock.close()
			raise ConnectionFailed(str(e)) from e
		return sock

	def request(self, method: str, params: dict[str, Any] | None = None) -> Response:
		"""Send one request and wait for its response."""
		# Missing socket means the backend is down; don't let connect() time out on it
		if not os.path.exists(self.socket_path):
			raise NotConnected(self.socket_path)

		request = Request(
			method=method,
			params={} if params is None else params,
			id=new_request_id(),
			token=self.token,
		)
		logger.debug(f'→ {method} (id={request.id})')

		sock = self._connect()
		try:
			try:
				sock.sendall((request.to_json() + '\n').encode())
			except OSError as e:
				raise RequestFailed(str(e)) from e

			data = b''
			try:
				while not data.endswith(b'\n'):
					chunk = sock.recv(RECV_CHUNK)
					if not chunk:
						break
					data += chunk
			except OSError as e:
				raise RequestFailed(str(e)) from e
		finally:
			sock.close()

		if not data.strip():
			raise InvalidResponse('empty response from backend')

		line = data.split(b'\n', 1)[0]
		response = Response.from_json(line)
		logger.debug(f'← {method} success={response.success}')
		return response

	def call(self, method: str, params: dict[str, Any] | None = None, *, fallback_error: str = 'unknown error') -> Any:
		"""Send a request and return its data, raising BackendError on success: false."""
		response = self.request(method, params)
		if not response.success:
			raise BackendError(response.error or fallback_error)
		return response.data

	def notify(self, method: str, params: dict[str, Any] | None = None) -> bool:
		"""Best-effort request: failures are logged and discarded, never raised."""
		try:
			response = self.request(method, params)
		except HotwiredError as e:
			logger.debug(f'Discarded {method} failure: {e.message}')
			return False
		if not response.success:
			logger.debug(f'Discarded {method} rejection: {response.error}')
			return False
		return True

	def health_check(self) -> Response:
		return self.request('ping', {})
