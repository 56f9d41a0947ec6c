"""Conversation event polling for the inbox command.

poll() fetches one batch of events after a sequence cursor. watch() repeats
poll() forever, printing events in the order the backend sent them. A failed
poll is reported and the loop carries on; only an interrupt ends it.
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from hotwired_cli.exceptions import HotwiredError
from hotwired_cli.output import format_timestamp
from hotwired_cli.views import ConversationEvent, ConversationEvents, parse_payload

if TYPE_CHECKING:
	from hotwired_cli.ipc import HotwiredClient

logger = logging.getLogger(__name__)

POLL_INTERVAL = 2.0
EVENT_LIMIT = 20


@dataclass
class EventCursor:
	"""Lower bound for the next fetch. Only ever moves forward."""

	position: int = 0

	def advance(self, max_sequence: int) -> int:
		if max_sequence > self.position:
			self.position = max_sequence
		return self.position


def poll(client: 'HotwiredClient', run_id: str, since: int | None) -> ConversationEvents:
	data = client.call(
		'get_conversation_events',
		{
			'run_id': run_id,
			'since_sequence': since,
			'limit': EVENT_LIMIT,
		},
	)
	return parse_payload(data, ConversationEvents)


def watch(
	client: 'HotwiredClient',
	run_id: str,
	since: int | None = None,
	*,
	on_events: Callable[[list[ConversationEvent]], None],
	on_error: Callable[[HotwiredError], None],
	interval: float = POLL_INTERVAL,
	sleep: Callable[[float], None] = time.sleep,
	max_polls: int | None = None,
) -> EventCursor:
	"""Poll until interrupted (or until max_polls, for tests)."""
	cursor = EventCursor(since or 0)
	polls = 0

	while max_polls is None or polls < max_polls:
		polls += 1
		try:
			batch = poll(client, run_id, cursor.position)
		except HotwiredError as e:
			logger.warning(f'Poll {polls} failed: {e.message}')
			on_error(e)
		else:
			if batch.events:
				on_events(batch.events)
			cursor.advance(batch.max_sequence)

		if max_polls is not None and polls >= max_polls:
			break
		sleep(interval)

	return cursor


def format_event(event: ConversationEvent) -> list[str]:
	source = event.source or '?'
	event_type = event.event_type or 'message'
	content = event.content if event.content is not None else event.summary
	content = content or ''

	lines = [f'[{format_timestamp(event.timestamp or "")}] {source}→{event_type}']
	lines.extend(f'  {line}' for line in content.splitlines())
	lines.append('')
	return lines
