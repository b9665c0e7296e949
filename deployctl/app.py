import sys
from typing import Optional

import typer

from deployctl import output
from deployctl.cli import config
from deployctl.cli import init as init_cmd
from deployctl.cli import remove as remove_cmd
from deployctl.errors import DeployctlError, DeployctlValidationError
from deployctl.models import AppContext, OutputMode, Verbosity
from deployctl.util import configure_logging

# Commands which display help with exit code 2
_OWN_HELP = {"help_option_names": []}

########################################
# CLI
########################################

app = typer.Typer(
    name="deployctl",
    help="Manage deployments and projects of the cloud platform",
)

app.add_typer(config.app)

app.command(
    name="remove",
    help="Remove deployments or projects by id, name or URL",
    epilog=remove_cmd.EPILOG,
    context_settings=_OWN_HELP,
)(remove_cmd.remove)

app.command(
    name="rm",
    help="Alias of 'remove'",
    epilog=remove_cmd.EPILOG,
    context_settings=_OWN_HELP,
    hidden=True,
)(remove_cmd.remove)

app.command(
    name="init",
    help="Initialize an example project",
    epilog=init_cmd.EPILOG,
    context_settings=_OWN_HELP,
)(init_cmd.init)


@app.callback()
def common_options(
    ctx: typer.Context,
    verbosity: Verbosity = typer.Option(
        Verbosity.none,
        "-v",
        "--verbosity",
        help="Enable logging output. Usually used for debugging",
    ),
    output_mode: OutputMode = typer.Option(
        OutputMode.human,
        "-o",
        "--output-mode",
        help="Choose an output mode. Human-readable by default",
    ),
    auto_approve: bool = typer.Option(
        False,
        "-y",
        "--yes",
        help="Automatic 'yes', if set. No prompts with 'y/n' will be shown",
    ),
    prompt: bool = typer.Option(
        True,
        help="If set, prompts required values. Otherwise, exits with error",
    ),
    token: Optional[str] = typer.Option(
        None,
        "-t",
        "--token",
        help="Access token, overrides configured one",
    ),
    scope: Optional[str] = typer.Option(
        None,
        "-S",
        "--scope",
        help="Team (id or slug) to act on, overrides configured one",
    ),
    api_url: Optional[str] = typer.Option(
        None,
        "-A",
        "--api",
        help="Platform API URL, overrides configured one",
    ),
):
    configure_logging(verbosity)

    ctx.obj = AppContext(
        verbosity=verbosity,
        output_mode=output_mode,
        auto_approve=auto_approve,
        prompt=prompt,
        token=token,
        scope=scope,
        api_url=api_url,
    )


def main():
    try:
        app()
    except DeployctlValidationError as e:
        output.validation_errors(e)
        sys.exit(1)
    except DeployctlError as e:
        output.error(str(e))
        sys.exit(1)
