"""Command handlers for the hotwired CLI."""

from hotwired_cli.commands import artifact, attach, auth, inbox, internal, run, session, status, workflow

__all__ = ['artifact', 'attach', 'auth', 'inbox', 'internal', 'run', 'session', 'status', 'workflow']
