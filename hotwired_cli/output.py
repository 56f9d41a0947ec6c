"""Small text helpers shared by the command handlers."""

import json
import sys
from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel

SHORT_ID_LENGTH = 8


def format_timestamp(ts: str) -> str:
	"""'2024-01-15T10:30:00Z' -> '2024-01-15 10:30:00'"""
	return ts.replace('T', ' ').rstrip('Z')


def truncate(text: str, max_len: int) -> str:
	if len(text) <= max_len:
		return text
	if max_len <= 3:
		return text[:max_len]
	return text[: max_len - 3] + '...'


def short_id(run_id: str) -> str:
	return run_id[:SHORT_ID_LENGTH]


def yes_no(flag: bool) -> str:
	return 'yes' if flag else 'no'


def print_lines(lines: Iterable[str], file=None) -> None:
	for line in lines:
		print(line, file=file or sys.stdout)


def print_json(payload: BaseModel | Any) -> None:
	"""--json output: the typed payload with backend field names."""
	if isinstance(payload, BaseModel):
		print(payload.model_dump_json(by_alias=True, exclude_none=True))
	else:
		print(json.dumps(payload))
