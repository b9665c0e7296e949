import time
from typing import List, Optional

import click
import typer

from deployctl import output
from deployctl.api.scope import get_scope
from deployctl.callback import help_option
from deployctl.client import ApiClient
from deployctl.constants import C_VOLUME_CAP, PKG_NAME
from deployctl.models import AppContext, OutputMode
from deployctl.removal import (
    RemovalPlan,
    build_plan,
    deployments_and_projects,
    execute_removal,
    find_invalid_name,
)
from deployctl.util import elapsed, format_duration, plural

_CONFIRM_TOKENS = ("y", "yes")

EPILOG = f"""
Examples:\n
- Remove a deployment identified by `deploymentId`: $ {PKG_NAME} rm deploymentId\n
- Remove all deployments with name `my-app`: $ {PKG_NAME} rm my-app\n
- Remove two deployments with IDs `eyWt6zuSdeus` and `uWHoA9RQ1d1o`:
$ {PKG_NAME} rm eyWt6zuSdeus uWHoA9RQ1d1o
"""


########################################
# Confirmation
########################################


def _https(host: Optional[str]):
    return typer.style(f"https://{host}", underline=True) if host else ""


def render_summary(plan: RemovalPlan, now_ms: Optional[float] = None):

    """Lists everything the plan is going to remove"""

    if now_ms is None:
        now_ms = time.time() * 1000

    deployments = plan.deployments
    projects = plan.projects

    if deployments:
        count = len(deployments)
        what = plural("deployment", count, count > 1)
        output.log(f"The following {what} will be permanently removed:")

        rows = []
        for depl in deployments:
            age = format_duration(now_ms - depl.created_at)
            rows.append(
                [f"  {depl.id}", _https(depl.url), typer.style(f"{age} ago", dim=True)]
            )

        output.print_table(rows, align=("l", "r", "l"), hsep=" " * 6)
        typer.echo()

    for depl in deployments:
        for alias in depl.aliases:
            target = typer.style(depl.url or depl.id, bold=True)
            output.warn(
                f"{_https(alias.alias)} is an alias for {target} and will be removed"
            )

    if projects:
        count = len(projects)
        what = plural("project", count, count > 1)
        whose = "their" if count > 1 else "its"
        typer.echo(
            f"The following {what} will be permanently removed, "
            f"including all {whose} deployments and aliases:"
        )

        for project in projects:
            typer.echo(f"- {typer.style(project.name, bold=True)}")


def read_confirmation() -> str:

    question = typer.style("> Are you sure?", fg=typer.colors.RED, bold=True)
    hint = typer.style("[y/N]", dim=True)

    try:
        answer = typer.prompt(
            f"{question} {hint}",
            default="",
            show_default=False,
            prompt_suffix=" ",
        )
    except click.exceptions.Abort:
        # EOF on stdin
        typer.echo()
        return ""

    return answer.strip().lower()


def is_confirmed(answer: str):
    return answer.strip().lower() in _CONFIRM_TOKENS


########################################
# Result
########################################


def print_removed(plan: RemovalPlan, output_mode: OutputMode):

    if output_mode == OutputMode.json:
        data = [
            {"type": "deployment", "id": d.id, "name": d.url or d.name}
            for d in plan.deployments
        ]
        data.extend(
            {"type": "project", "id": p.id, "name": p.name} for p in plan.projects
        )
        columns = [("type", "Type"), ("id", "ID"), ("name", "Name")]
        output.list_data(data, columns, output_mode)
        return

    for depl in plan.deployments:
        typer.echo(f"- {typer.style(depl.url or depl.id, bold=True)}")

    for project in plan.projects:
        typer.echo(f"- {typer.style(project.name, bold=True)}")


########################################
# Remove
########################################


def remove(
    ctx: typer.Context,
    ids: Optional[List[str]] = typer.Argument(
        None,
        metavar="[DEPLOYMENT_ID|DEPLOYMENT_NAME|URL|PROJECT]...",
        help="Deployments or projects to remove",
        show_default=False,
    ),
    hard: bool = typer.Option(
        False,
        "--hard",
        help="Remove deployments without keeping their history",
    ),
    yes: bool = typer.Option(
        False,
        "-y",
        "--yes",
        help="Skip confirmation",
    ),
    safe: bool = typer.Option(
        False,
        "-s",
        "--safe",
        help="Skip deployments with an active alias",
    ),
    _help: bool = help_option(),
):
    app_ctx: AppContext = ctx.obj
    output_mode = app_ctx.output_mode
    ids = list(ids or [])

    if ids and ids[0] == "help":
        typer.echo(ctx.get_help())
        raise typer.Exit(code=2)

    if not ids:
        output.error(f"{PKG_NAME} rm expects at least one argument")
        typer.echo(ctx.get_help())
        raise typer.Exit(code=1)

    invalid_name = find_invalid_name(ids)
    if invalid_name is not None:
        output.error(
            f'The provided argument "{invalid_name}" '
            "is not a valid deployment or project"
        )
        raise typer.Exit(code=1)

    with ApiClient.from_context(app_ctx) as client:

        scope = get_scope(client)
        context_name = typer.style(scope.context_name, bold=True)
        quoted = " ".join(f'"{id_}"' for id_ in ids)

        output.message(
            f"Fetching deployment(s) {quoted} in {context_name}", output_mode
        )

        find_start = time.monotonic()
        plan = build_plan(client, scope, ids, safe=safe)
        find_time = (time.monotonic() - find_start) * 1000

        if plan.is_empty:
            matching = ", ".join(typer.style(f'"{id_}"', bold=True) for id_ in ids)
            output.log(
                f"Could not find {'unaliased' if safe else 'any'} deployments "
                f"or projects matching {matching}."
            )
            raise typer.Exit(code=1)

        output.log(
            f"Found {deployments_and_projects(plan.deployments, plan.projects)} "
            f"for removal in {context_name} {elapsed(find_time)}"
        )

        if plan.exceeds_cap:
            output.warn(C_VOLUME_CAP)

        if not (yes or app_ctx.auto_approve):

            if not app_ctx.prompt:
                output.error("Confirmation required. Use '--yes' to skip it")
                raise typer.Exit(code=1)

            render_summary(plan)
            if not is_confirmed(read_confirmation()):
                output.log("Canceled")
                raise typer.Exit(code=1)

        start = time.monotonic()
        execute_removal(client, scope, plan, hard=hard)
        remove_time = (time.monotonic() - start) * 1000

    output.success(
        f"Removed {deployments_and_projects(plan.deployments, plan.projects)} "
        f"{elapsed(remove_time)}"
    )

    print_removed(plan, output_mode)
