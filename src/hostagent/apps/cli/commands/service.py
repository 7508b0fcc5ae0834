from __future__ import annotations

import typer
from rich import print

from hostagent.apps.cli.common import run_safe
from hostagent.services.agent_context import get_ctx
from hostagent.services.platform.profile import uses_systemd

app = typer.Typer(help="Managed service and platform profile")


@app.command("status")
@run_safe
def status():
    """Is the agent service running?"""
    ctx = get_ctx()
    try:
        prof = ctx.profile
    except ValueError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(1)
    if ctx.service_probe.is_running(prof):
        print("[green]running[/green]")
    else:
        print("[yellow]not running[/yellow]")
        raise typer.Exit(3)


@app.command("profile")
def profile():
    """Show the platform profile of this host."""
    try:
        prof = get_ctx().profile
    except ValueError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(1)
    for key in ("region", "platform", "platform_version", "installer_name", "arch", "compress_format"):
        print(f"[bold cyan]{key:16}[/bold cyan] {getattr(prof, key)}")
    print(f"[bold cyan]{'systemd':16}[/bold cyan] {uses_systemd(prof)}")
