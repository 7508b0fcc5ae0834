# src/hostagent/apps/cli/app.py
from __future__ import annotations

from typing import Optional

from dotenv import load_dotenv, find_dotenv
import typer

# .env is loaded once, before Settings reads the environment
load_dotenv(find_dotenv(usecwd=True))

from hostagent.services.settings import Settings
from hostagent.apps.bootstrap import init_ctx, reload_ctx
from hostagent.services.agent_context import get_ctx
from hostagent.apps.cli.commands import exec as exec_cmd, service as service_cmd
from hostagent.apps.cli.commands.send_command import CONTEXT_SETTINGS, send_offline_command

app = typer.Typer(help="hostagent: offline command submission and update helpers")


@app.callback()
def main(
    base_dir: Optional[str] = typer.Option(None, "--base-dir", help="Agent base directory (default ~/.hostagent or HOSTAGENT_BASE_DIR)"),
    profile: Optional[str] = typer.Option(None, "--profile", help="Settings profile"),
    reload: bool = typer.Option(False, "--reload", help="Rebuild the context with the new settings"),
):
    """
    Runs before every subcommand: builds (or rebuilds) the process-wide context.
    """
    if reload:
        reload_ctx(base_dir=base_dir, profile=profile)
    else:
        init_ctx(Settings.from_sources().with_overrides(base_dir=base_dir, profile=profile))


@app.command("where")
def where():
    """Print the base directory and the mailbox root."""
    ctx = get_ctx()
    typer.echo(f"base_dir: {ctx.paths.base_dir()}")
    typer.echo(f"commands: {ctx.paths.commands_dir()}")


app.command("send-offline-command", context_settings=CONTEXT_SETTINGS)(send_offline_command)
app.add_typer(exec_cmd.app, name="exec")
app.add_typer(service_cmd.app, name="service")

if __name__ == "__main__":
    app()
