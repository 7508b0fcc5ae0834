"""
hostagent exec run "sh install.sh -version 2.0" --cwd /var/lib/hostagent/update --out-root /var/lib/hostagent/update
hostagent exec run "sh updater -restart" --async
"""

from __future__ import annotations
from typing import Optional

import typer

from hostagent.apps.cli.common import run_safe
from hostagent.services.agent_context import get_ctx
from hostagent.services.update.util import update_stderr_path, update_stdout_path

app = typer.Typer(help="Supervised execution of update commands")


@app.command("run")
@run_safe
def run(
    command_line: str = typer.Argument(..., help="Command line (quoted); split on whitespace"),
    cwd: Optional[str] = typer.Option(None, "--cwd", help="Working directory"),
    out_root: Optional[str] = typer.Option(None, "--out-root", help="Root for output/stdout and output/stderr (default: update dir)"),
    stdout_name: str = typer.Option("", "--stdout", help="stdout file name under output/"),
    stderr_name: str = typer.Option("", "--stderr", help="stderr file name under output/"),
    is_async: bool = typer.Option(False, "--async", help="Start detached and return immediately"),
):
    """Run a command detached, or supervised with a timeout and captured output."""
    ctx = get_ctx()
    root = out_root or str(ctx.paths.update_dir())
    ctx.executor.run(
        command_line,
        working_dir=cwd,
        out_root=root,
        stdout_name=stdout_name,
        stderr_name=stderr_name,
        is_async=is_async,
    )
    if is_async:
        typer.echo("started")
    else:
        typer.echo(f"ok\nstdout: {update_stdout_path(root, stdout_name)}\nstderr: {update_stderr_path(root, stderr_name)}")
