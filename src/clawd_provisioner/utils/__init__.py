"""Shared utility functions.

This subpackage provides common utility functions used across
the application with no dependencies on other subpackages.

Key modules:
    - identifiers: Agent id and display name derivation
    - paths: Path safety and asset resolution
    - logging: Logging configuration and token redaction
    - protocols: Protocol definitions for dependency injection
"""

from .identifiers import derive_agent_id, derive_display_name
from .paths import (
    agent_workspace,
    display_path,
    ensure_within,
    resolve_asset_path,
)
from .logging import configure_logging, get_logger, sanitize_text
from .protocols import (
    GatewayCLIProtocol,
    TokenVerifierProtocol,
    ReloaderProtocol,
)

__all__ = [
    # identifiers
    "derive_agent_id",
    "derive_display_name",
    # paths
    "agent_workspace",
    "display_path",
    "ensure_within",
    "resolve_asset_path",
    # logging
    "configure_logging",
    "get_logger",
    "sanitize_text",
    # protocols
    "GatewayCLIProtocol",
    "TokenVerifierProtocol",
    "ReloaderProtocol",
]
