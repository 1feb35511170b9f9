"""External service integrations.

This subpackage wraps the collaborators the provisioner talks to.

Key modules:
    - gateway_cli: clawdbot command-line interface
    - telegram: Telegram Bot API token check
    - reload: Gateway hot-reload notification
"""

from clawd_provisioner.integrations.gateway_cli import GatewayCLI
from clawd_provisioner.integrations.telegram import (
    BotIdentity,
    TelegramVerifier,
    verify_bot_token,
)
from clawd_provisioner.integrations.reload import (
    GatewayReloader,
    ReloadResult,
    find_gateway_pid,
)

__all__ = [
    # gateway_cli
    "GatewayCLI",
    # telegram
    "BotIdentity",
    "TelegramVerifier",
    "verify_bot_token",
    # reload
    "GatewayReloader",
    "ReloadResult",
    "find_gateway_pid",
]
