import logging
import os
import sys

LOG_LEVEL_ENV = 'HOTWIRED_LOG_LEVEL'
LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'


def setup_logging(level: str | None = None) -> logging.Logger:
	"""Configure the hotwired_cli logger hierarchy.

	Logs go to stderr so stdout only ever carries command output. Level comes
	from the argument, then $HOTWIRED_LOG_LEVEL, then defaults to warning.
	"""
	level_name = (level or os.environ.get(LOG_LEVEL_ENV) or 'warning').upper()
	log_level = getattr(logging, level_name, None)
	if not isinstance(log_level, int):
		log_level = logging.WARNING

	logger = logging.getLogger('hotwired_cli')
	logger.setLevel(log_level)

	if not any(getattr(h, '_hotwired', False) for h in logger.handlers):
		handler = logging.StreamHandler(sys.stderr)
		handler.setFormatter(logging.Formatter(LOG_FORMAT))
		handler._hotwired = True  # type: ignore[attr-defined]
		logger.addHandler(handler)
	logger.propagate = False

	return logger
