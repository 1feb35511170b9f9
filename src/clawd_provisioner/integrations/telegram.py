"""
Telegram Bot API identity check.

Calls ``getMe`` to tell a rejected bot token apart from an unreachable
API. Only an explicit ``ok: false`` from Telegram counts as rejection.
"""

from __future__ import annotations

from dataclasses import dataclass

import httpx

from clawd_provisioner.errors import TelegramVerificationError
from clawd_provisioner.utils.logging import get_logger, sanitize_text

logger = get_logger(__name__)

TELEGRAM_API_BASE = "https://api.telegram.org"
USER_AGENT = "clawd-provisioner/0.1"


@dataclass(frozen=True)
class BotIdentity:
	"""Outcome of a ``getMe`` call that Telegram answered."""

	valid: bool
	username: str = ""


def verify_bot_token(
    token: str,
    *,
    api_base: str = TELEGRAM_API_BASE,
    timeout: float = 10.0,
    client: httpx.Client | None = None,
) -> BotIdentity:
	"""
	Ask Telegram who the bot token belongs to.

	Parameters:
		token: Bot token to check.
		api_base: Bot API base URL.
		timeout: Request timeout in seconds.
		client: Optional pre-built client (tests, connection reuse).

	Returns:
		BotIdentity with ``valid`` False when Telegram rejects the token.

	Raises:
		TelegramVerificationError: If Telegram could not be reached or
			answered with something other than a Bot API envelope.
	"""
	url = f"{api_base.rstrip('/')}/bot{token}/getMe"
	owns_client = client is None
	if client is None:
		client = httpx.Client(
		    timeout=httpx.Timeout(timeout, connect=min(timeout, 5.0)),
		    headers={"User-Agent": USER_AGENT},
		)
	try:
		resp = client.get(url)
	except httpx.HTTPError as exc:
		raise TelegramVerificationError(sanitize_text(str(exc))
		                                or type(exc).__name__) from exc
	except httpx.InvalidURL as exc:
		# Raised before any request is sent, e.g. control characters
		raise TelegramVerificationError("bot token is not URL-safe") from exc
	finally:
		if owns_client:
			client.close()

	# Rejected tokens come back as HTTP 401 with an ok=false envelope.
	try:
		body = resp.json()
	except ValueError as exc:
		raise TelegramVerificationError(
		    f"unexpected response (HTTP {resp.status_code})") from exc
	if not isinstance(body, dict) or "ok" not in body:
		raise TelegramVerificationError(
		    f"unexpected response (HTTP {resp.status_code})")
	if not body["ok"]:
		logger.info("telegram rejected bot token: %s",
		            body.get("description", "no description"))
		return BotIdentity(valid=False)
	result = body.get("result") or {}
	if not isinstance(result, dict):
		raise TelegramVerificationError(
		    f"unexpected getMe result (HTTP {resp.status_code})")
	return BotIdentity(valid=True, username=str(result.get("username") or ""))


class TelegramVerifier:
	"""Bot token verifier bound to an API base and timeout."""

	def __init__(self, api_base: str = TELEGRAM_API_BASE,
	             timeout: float = 10.0,
	             client: httpx.Client | None = None) -> None:
		self.api_base = api_base
		self.timeout = timeout
		self._client = client

	def verify(self, token: str) -> BotIdentity:
		return verify_bot_token(token, api_base=self.api_base,
		                        timeout=self.timeout, client=self._client)


__all__ = [
    "BotIdentity",
    "TelegramVerifier",
    "verify_bot_token",
    "TELEGRAM_API_BASE",
]
