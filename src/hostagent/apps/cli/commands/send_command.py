"""
hostagent send-offline-command --content '{"schemaVersion": "2.0", "mainSteps": [...]}'
hostagent send-offline-command --content https://example.com/docs/command.json
hostagent send-offline-command --content file:///var/tmp/command.json
"""

from __future__ import annotations
from typing import List, Optional

import typer

from hostagent.apps.cli.common import run_safe
from hostagent.services.agent_context import get_ctx
from hostagent.services.submission import SubmissionWorkflow

CONTEXT_SETTINGS = {"allow_extra_args": True, "ignore_unknown_options": True}


def split_args(args: List[str]) -> tuple[list[str], dict[str, list[str]]]:
    """
    Splits leftover CLI words into subcommands and ``--name value...`` parameters.
    Words before the first flag are subcommands; later words belong to the preceding flag.
    """
    subcommands: list[str] = []
    parameters: dict[str, list[str]] = {}
    current: Optional[str] = None
    for token in args:
        if token.startswith("--") and len(token) > 2:
            name, sep, value = token[2:].partition("=")
            parameters.setdefault(name, [])
            if sep:
                parameters[name].append(value)
            current = name
        elif current is None:
            subcommands.append(token)
        else:
            parameters[current].append(token)
    return subcommands, parameters


@run_safe
def send_offline_command(ctx: typer.Context):
    """
    Submit a command document to the local agent and wait for it to be accepted.

    --content takes JSON or a URL to the command document. A valid command document is a
    configuration document with all parameters filled in.

    Prints "successfully submitted with command id: <id>" on success, or a failure message when the
    document was rejected or not picked up in time.
    """
    # --content is parsed here too, so repeated or missing values reach the combined message
    subcommands, parameters = split_args(list(ctx.args))

    app_ctx = get_ctx()
    workflow = SubmissionWorkflow(
        mailbox=app_ctx.mailbox,
        poll_attempts=app_ctx.settings.submit_poll_attempts,
        poll_interval_sec=app_ctx.settings.submit_poll_interval_sec,
    )
    typer.echo(workflow.execute(subcommands, parameters))
