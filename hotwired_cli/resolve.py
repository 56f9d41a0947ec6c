"""Short identifier resolution, like git short hashes.

A prefix resolves only when exactly one known id starts with it. Ties are
never broken by picking the first match.
"""

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from hotwired_cli.exceptions import AmbiguousId, NoMatch
from hotwired_cli.views import ActiveSessionList, RunList, parse_payload

if TYPE_CHECKING:
	from hotwired_cli.ipc import HotwiredClient

logger = logging.getLogger(__name__)

# Full run ids (UUIDs with or without dashes) are at least this long
FULL_ID_LENGTH = 32


def match_prefix(candidate: str, ids: Iterable[str], kind: str = 'run') -> str:
	"""Return the single id starting with candidate (case-sensitive)."""
	matches = list(dict.fromkeys(i for i in ids if i.startswith(candidate)))
	if not matches:
		raise NoMatch(kind, candidate)
	if len(matches) > 1:
		raise AmbiguousId(kind, candidate, matches)
	return matches[0]


def resolve_run_id(client: 'HotwiredClient', candidate: str) -> str:
	if len(candidate) >= FULL_ID_LENGTH:
		return candidate

	data = client.call('list_runs', {}, fallback_error='failed to resolve run id')
	runs = parse_payload(data, RunList)
	full_id = match_prefix(candidate, runs.ids(), 'run')
	logger.debug(f'Resolved run {candidate} -> {full_id}')
	return full_id


def pick_session_name(candidate: str, names: Iterable[str]) -> str:
	"""Session names have no fixed length, so an exact name always wins."""
	names = list(names)
	if candidate in names:
		return candidate
	return match_prefix(candidate, names, 'session')


def resolve_session_name(client: 'HotwiredClient', candidate: str) -> str:
	data = client.call('list_active_sessions', {}, fallback_error='failed to resolve session name')
	return pick_session_name(candidate, parse_payload(data, ActiveSessionList).names())
