"""
Logging configuration module.

Provides centralized logging setup for the application with
configurable log levels, consistent formatting and redaction of
Telegram bot tokens.
"""

from __future__ import annotations

import logging
import re

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Bot tokens as they appear in Bot API URLs,
# e.g. https://api.telegram.org/bot123456:AAE-secret/getMe
_BOT_URL_RE = re.compile(r"(/bot\d+:)[A-Za-z0-9_-]+")

# Bot tokens as they appear in serialized gateway config,
# e.g. "botToken": "123456:AAE-secret"
_BOT_FIELD_RE = re.compile(r'("botToken"\s*:\s*")[^"]+(")')


def sanitize_text(text: str) -> str:
	"""Mask Telegram bot tokens in text.

	Replaces the secret half of tokens in Bot API URLs and the value of
	``botToken`` JSON fields with ``***``.

	Parameters:
		text: Raw text that may contain bot tokens.

	Returns:
		Text with token secrets replaced by ``***``.
	"""
	text = _BOT_URL_RE.sub(r"\1***", text)
	return _BOT_FIELD_RE.sub(r"\1***\2", text)


class TokenSanitizingFilter(logging.Filter):
	"""Logging filter that redacts bot tokens from log records.

	Applied to the root logger so every handler benefits from
	token masking without call-site awareness.
	"""

	def filter(self, record: logging.LogRecord) -> bool:
		"""Sanitize the log record message and args."""
		if isinstance(record.msg, str):
			record.msg = sanitize_text(record.msg)
		if record.args:
			if isinstance(record.args, dict):
				record.args = {
				    k: sanitize_text(v) if isinstance(v, str) else v
				    for k, v in record.args.items()
				}
			elif isinstance(record.args, tuple):
				record.args = tuple(
				    sanitize_text(a) if isinstance(a, str) else a
				    for a in record.args)
		return True


def configure_logging(level: str = "info") -> None:
	"""
	Configure basic logging with level, format, and token sanitization.

	Parameters:
		level: Log level string (e.g., "info", "debug", "warning").
	"""
	lvl = logging.getLevelNamesMapping().get(level.upper(), logging.INFO)
	logging.basicConfig(level=lvl, format=LOG_FORMAT)
	root = logging.getLogger()
	# Avoid adding duplicate filters on repeated calls
	if not any(isinstance(f, TokenSanitizingFilter) for f in root.filters):
		root.addFilter(TokenSanitizingFilter())
	# Logger filters skip records propagated from child loggers
	for handler in root.handlers:
		if not any(
		    isinstance(f, TokenSanitizingFilter) for f in handler.filters):
			handler.addFilter(TokenSanitizingFilter())
	logging.getLogger("httpx").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
	"""
	Get a logger for the specified module.

	Parameters:
		name: The logger name, typically __name__.

	Returns:
		Configured logger instance.
	"""
	return logging.getLogger(name)


__all__ = [
    "configure_logging",
    "get_logger",
    "sanitize_text",
    "TokenSanitizingFilter",
]
