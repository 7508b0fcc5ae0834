from __future__ import annotations
import functools
import os
import traceback

import typer

from hostagent.domain import HostAgentError


def run_safe(func):
    """Turns HostAgentError into a one-line message on stderr and exit code 1."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except HostAgentError as e:
            if os.getenv("HOSTAGENT_CLI_DEBUG") == "1":
                traceback.print_exc()
            typer.echo(str(e), err=True)
            raise typer.Exit(1)

    return wrapper
