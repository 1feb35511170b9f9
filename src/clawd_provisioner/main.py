from __future__ import annotations

import sys

import typer
from typer.main import get_command

from clawd_provisioner.core.workflow import Provisioner
from clawd_provisioner.models.config import load_env, resolve_settings
from clawd_provisioner.models.request import AgentRequest
from clawd_provisioner.models.result import ProvisionResult
from clawd_provisioner.ui.reporting import print_result, result_json
from clawd_provisioner.utils.logging import configure_logging

cli = typer.Typer(add_completion=False, no_args_is_help=True)


@cli.callback()
def root() -> None:
	"""
	Root callback for the clawd-provisioner CLI.

	Sets up the Typer application with no-args-is-help behavior.
	"""
	return None


def create_impl(
    name: str,
    model: str,
    emoji: str = "🤖",
    soul: str | None = None,
    telegram_token: str | None = None,
    base_dir: str | None = None,
    registry: str | None = None,
    as_json: bool = False,
) -> ProvisionResult:
	"""
	Provision a new agent and print the step log.

	Resolves settings once (environment, `.env`, CLI overrides, dashboard
	registry fallbacks), runs the workflow and renders the result.

	Parameters:
		name: Agent name; the id is derived from it.
		model: Model identifier registered with the gateway.
		emoji: Display emoji.
		soul: Personality text for SOUL.md.
		telegram_token: Optional Telegram bot token to bind.
		base_dir: Override for the agents base directory.
		registry: Override for the dashboard registry path.
		as_json: Print the result payload as JSON instead of the log.

	Returns:
		The provisioning result.
	"""
	load_env()
	settings = resolve_settings(overrides={
	    "agents_base_dir": base_dir,
	    "dashboard_registry": registry,
	})
	configure_logging(settings.log_level)
	request = AgentRequest(
	    name=name,
	    emoji=emoji,
	    soul=soul,
	    model=model,
	    telegram_token=telegram_token,
	)
	result = Provisioner(settings).provision(request)
	if as_json:
		typer.echo(result_json(result))
	else:
		print_result(result)
	return result


@cli.command()
def create(
    name: str = typer.Argument(..., help="Agent name"),
    model: str = typer.Option(..., "--model", "-m",
                              help="Model identifier for the gateway"),
    emoji: str = typer.Option("🤖", "--emoji", help="Display emoji"),
    soul: str = typer.Option(None, "--soul",
                             help="Personality text for SOUL.md"),
    telegram_token: str = typer.Option(
        None,
        "--telegram-token",
        envvar="CLAWD_TELEGRAM_TOKEN",
        help="Telegram bot token to bind to the agent",
    ),
    base_dir: str = typer.Option(None, "--base-dir",
                                 help="Override agents base directory"),
    registry: str = typer.Option(None, "--registry",
                                 help="Override dashboard registry path"),
    as_json: bool = typer.Option(False, "--json/--no-json",
                                 help="Print the result as JSON"),
) -> None:
	"""
	Create an agent workspace and register it with the gateway.

	Exits with status 1 when provisioning fails.
	"""
	result = create_impl(name, model, emoji, soul, telegram_token, base_dir,
	                     registry, as_json)
	if not result.ok:
		raise typer.Exit(code=1)


def entrypoint(argv=None, *, standalone_mode: bool = True):
	"""
	Typer entrypoint that defaults to `create` when appropriate.

	Allows calling 'clawd-provisioner Nova --model m' without explicitly
	specifying the 'create' subcommand.

	Parameters:
		argv: Command-line arguments. Defaults to sys.argv[1:].
		standalone_mode: If True, Click handles exit codes.

	Returns:
		Result of the Click application main invocation.
	"""
	args = sys.argv[1:] if argv is None else list(argv)

	_click_app = get_command(cli)
	commands = getattr(_click_app, "commands", {}).keys()
	if args and not args[0].startswith("-") and args[0] not in commands:
		args = ["create"] + args
	return _click_app.main(
	    args=args,
	    prog_name="clawd-provisioner",
	    standalone_mode=standalone_mode,
	)


if __name__ == "__main__":
	entrypoint()
