"""Typed backend payloads.

Each backend method returns its own JSON shape. These models describe them
once, with defaults for every field, so command code never digs through raw
dicts. Unknown keys are ignored; a wrong type raises InvalidResponse.
"""

from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, RootModel, model_validator
from pydantic import ValidationError as PydanticValidationError

from hotwired_cli.exceptions import InvalidResponse

T = TypeVar('T', bound=BaseModel)


class Payload(BaseModel):
	model_config = ConfigDict(populate_by_name=True, extra='ignore')

	@model_validator(mode='before')
	@classmethod
	def _drop_nulls(cls, data: Any) -> Any:
		# null means "not sent": let the field default apply
		if isinstance(data, dict):
			return {k: v for k, v in data.items() if v is not None}
		return data


def parse_payload(data: Any, model: type[T]) -> T:
	"""Validate response data against its model at the boundary."""
	if data is None:
		data = [] if issubclass(model, RootModel) else {}
	try:
		return model.model_validate(data)
	except PydanticValidationError as e:
		raise InvalidResponse(f'unexpected {model.__name__} payload: {e.error_count()} invalid field(s)') from e


# =============================================================================
# Backend / runs
# =============================================================================


class HealthInfo(Payload):
	version: str | None = None


class RunSummary(Payload):
	id: str | None = None
	status: str | None = None
	phase: str | None = None
	template_name: str | None = Field(default=None, alias='templateName')
	created_at: str | None = Field(default=None, alias='createdAt')


class RunList(RootModel[list[RunSummary]]):
	root: list[RunSummary] = Field(default_factory=list)

	def ids(self) -> list[str]:
		return [run.id for run in self.root if run.id]


class ConnectedAgent(Payload):
	role_id: str | None = Field(default=None, alias='roleId')
	session_name: str | None = Field(default=None, alias='sessionName')
	agent_type: str | None = Field(default=None, alias='agentType')


class Impediment(Payload):
	source: str | None = None
	description: str | None = None
	type: str | None = None


class RunStatus(Payload):
	run_id: str | None = Field(default=None, alias='runId')
	status: str | None = None
	phase: str | None = None
	template_name: str | None = Field(default=None, alias='templateName')
	has_protocol: bool = Field(default=False, alias='hasProtocol')
	connected_agents: list[ConnectedAgent] | None = Field(default=None, alias='connectedAgents')
	impediments: list[Impediment] = Field(default_factory=list)


# =============================================================================
# Sessions
# =============================================================================


class ActiveSession(Payload):
	session_name: str | None = Field(default=None, alias='sessionName')
	project_dir: str | None = Field(default=None, alias='projectDir')
	is_worktree: bool = Field(default=False, alias='isWorktree')
	git_common_dir: str | None = Field(default=None, alias='gitCommonDir')


class ActiveSessionList(Payload):
	sessions: list[ActiveSession] = Field(default_factory=list)

	def names(self) -> list[str]:
		return [s.session_name for s in self.sessions if s.session_name]


class SessionStateData(Payload):
	"""Answer to get_session_state; this method uses snake_case keys."""

	attached_run_id: str | None = None
	run_status: str | None = None
	role_id: str | None = None


# =============================================================================
# Workflow
# =============================================================================


class HotwireResult(Payload):
	model_config = ConfigDict(populate_by_name=True, extra='allow')

	status: str = 'unknown'
	run_id: str | None = Field(default=None, alias='runId')
	role: str | None = None
	protocol: str | None = None
	pending_run_id: str | None = Field(default=None, alias='pendingRunId')


class PairResult(Payload):
	role: str | None = None
	protocol: str | None = None


class TaskCompleteResult(Payload):
	next_action: str | None = None


class Capabilities(Payload):
	can_resolve_impediments: bool = Field(default=False, alias='canResolveImpediments')


class ProtocolInfo(Payload):
	run_id: str | None = Field(default=None, alias='runId')
	template_name: str | None = Field(default=None, alias='templateName')
	playbook_protocol: str | None = Field(default=None, alias='playbookProtocol')
	role_protocol: str | None = Field(default=None, alias='roleProtocol')
	initialization_condition: str | None = Field(default=None, alias='initializationCondition')
	capabilities: Capabilities | None = None


class ConversationEvent(Payload):
	sequence: int | None = None
	source: str | None = None
	event_type: str | None = Field(default=None, alias='eventType')
	content: str | None = None
	summary: str | None = None
	timestamp: str | None = None


class ConversationEvents(Payload):
	events: list[ConversationEvent] = Field(default_factory=list)

	@property
	def max_sequence(self) -> int:
		"""Highest sequence number in the batch, 0 when none carry one."""
		return max((e.sequence for e in self.events if e.sequence is not None), default=0)


# =============================================================================
# Artifacts
# =============================================================================


class Artifact(Payload):
	path: str | None = None
	status: str | None = None
	comment_count: int = Field(default=0, alias='commentCount')
	version_count: int = Field(default=0, alias='versionCount')
	title: str | None = None


class ArtifactList(Payload):
	artifacts: list[Artifact] = Field(default_factory=list)


class ArtifactSyncResult(Payload):
	status: str = 'unknown'
	title: str | None = None
	version: int = 1
	comments_relocated: int = Field(default=0, alias='commentsRelocated')
	comments_orphaned: int = Field(default=0, alias='commentsOrphaned')


class ArtifactMoveResult(Payload):
	comments_preserved: int = Field(default=0, alias='commentsPreserved')
	file_moved: bool = Field(default=False, alias='fileMoved')


class CommentAdded(Payload):
	comment_id: str | None = Field(default=None, alias='commentId')


class ArtifactComment(Payload):
	comment_id: str | None = Field(default=None, alias='commentId')
	target_text: str | None = Field(default=None, alias='targetText')
	comment: str | None = None
	status: str | None = None


class CommentList(Payload):
	comments: list[ArtifactComment] = Field(default_factory=list)


class ArtifactVersion(Payload):
	version: int = 0
	timestamp: str | None = None
	lines_added: int = Field(default=0, alias='linesAdded')
	lines_removed: int = Field(default=0, alias='linesRemoved')


class VersionList(Payload):
	versions: list[ArtifactVersion] = Field(default_factory=list)


class ArtifactVersionContent(Payload):
	title: str | None = None
	timestamp: str | None = None
	content: str | None = None
