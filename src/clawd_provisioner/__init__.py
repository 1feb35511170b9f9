"""
Clawd Provisioner - Create new agents for a clawdbot gateway.

This package scaffolds an agent workspace, registers the agent with the
gateway CLI, optionally binds a Telegram bot, grants cross-agent
permissions in the shared gateway config, updates the dashboard registry
and signals the gateway to hot-reload.

Main entry points:
    - clawd_provisioner.main: CLI entrypoint
    - clawd_provisioner.core.workflow: Provisioner and provision_agent()
    - clawd_provisioner.models.config: Settings and resolve_settings()
"""
