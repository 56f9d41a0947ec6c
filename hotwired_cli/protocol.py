"""Wire protocol for CLI↔backend communication.

Uses JSON over a Unix socket with newline-delimited messages. Each connection
carries exactly one request line and one response line.
"""

import json
import time
from dataclasses import dataclass, field
from typing import Any

from hotwired_cli.exceptions import InvalidResponse


def new_request_id() -> str:
	"""Short correlation id for backend logs."""
	return f'r{int(time.time() * 1000000) % 1000000}'


@dataclass
class Request:
	"""Command request from CLI to backend."""

	method: str
	params: dict[str, Any] = field(default_factory=dict)
	id: str | None = None
	token: str | None = None

	def __post_init__(self) -> None:
		if not self.method:
			raise ValueError('Request method must not be empty')
		if not isinstance(self.params, dict):
			raise TypeError(f'Request params must be an object, got {type(self.params).__name__}')

	def to_dict(self) -> dict[str, Any]:
		d: dict[str, Any] = {}
		if self.id is not None:
			d['id'] = self.id
		d['method'] = self.method
		d['params'] = self.params
		if self.token is not None:
			d['token'] = self.token
		return d

	def to_json(self) -> str:
		return json.dumps(self.to_dict())

	@classmethod
	def from_json(cls, data: str) -> 'Request':
		d = json.loads(data)
		return cls(
			method=d['method'],
			params=d.get('params', {}),
			id=d.get('id'),
			token=d.get('token'),
		)


@dataclass
class Response:
	"""Response from backend to CLI."""

	success: bool
	data: Any = None
	error: str | None = None

	def to_json(self) -> str:
		d: dict[str, Any] = {'success': self.success}
		if self.data is not None:
			d['data'] = self.data
		if self.error is not None:
			d['error'] = self.error
		return json.dumps(d)

	@classmethod
	def from_json(cls, data: str | bytes) -> 'Response':
		try:
			d = json.loads(data)
		except (json.JSONDecodeError, UnicodeDecodeError) as e:
			raise InvalidResponse(str(e)) from e

		if not isinstance(d, dict):
			raise InvalidResponse(f'expected a JSON object, got {type(d).__name__}')
		if not isinstance(d.get('success'), bool):
			raise InvalidResponse("missing boolean 'success' field")

		error = d.get('error')
		if error is not None and not isinstance(error, str):
			error = str(error)

		return cls(
			success=d['success'],
			data=d.get('data'),
			error=error,
		)
