import json
from typing import Any, Dict, List, Sequence, Tuple

import click
import typer

from .errors import DeployctlValidationError
from .models import OutputMode


def success(msg: str):
    typer.secho(f"Success! {msg}", fg=typer.colors.GREEN)


def error(msg: str):
    typer.secho(f"Error: {msg}", fg=typer.colors.RED, err=True)


def warn(msg: str):
    typer.secho(f"WARN! {msg}", fg=typer.colors.YELLOW, err=True)


def log(msg: str):
    typer.echo(f"> {msg}")


def message(msg: str, output_mode: OutputMode = OutputMode.human):
    if output_mode == OutputMode.human:
        typer.echo(msg)


def result(value: Any):
    typer.echo(value)


########################################
# Tables
########################################


def _visible_len(text: str):
    return len(click.unstyle(text))


def _pad(text: str, width: int, align: str):
    fill = " " * (width - _visible_len(text))
    return fill + text if align == "r" else text + fill


def format_table(
    rows: Sequence[Sequence[str]],
    align: Sequence[str] = (),
    hsep: str = "  ",
):
    """
    Renders rows as columns of equal width.
    Alignment is given per column: 'l' or 'r'
    """

    if not rows:
        return ""

    n_cols = max(len(row) for row in rows)
    widths = [0] * n_cols

    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], _visible_len(cell))

    lines = []
    for row in rows:
        cells = []
        for i, cell in enumerate(row):
            col_align = align[i] if i < len(align) else "l"
            cells.append(_pad(cell, widths[i], col_align))
        lines.append(hsep.join(cells).rstrip())

    return "\n".join(lines)


def print_table(rows: Sequence[Sequence[str]], align: Sequence[str] = (), hsep="  "):
    typer.echo(format_table(rows, align, hsep))


def dict_data(
    data: Dict[str, Any],
    columns: List[Tuple[str, str]],
    output_mode: OutputMode,
):
    if output_mode == OutputMode.json:
        typer.echo(json.dumps({key: data[key] for key, _ in columns}))
        return

    rows = [[typer.style(title, bold=True), str(data[key])] for key, title in columns]
    print_table(rows, hsep="    ")


def list_data(
    data: List[Dict[str, Any]],
    columns: List[Tuple[str, str]],
    output_mode: OutputMode,
):
    if output_mode == OutputMode.json:
        items = [{key: item[key] for key, _ in columns} for item in data]
        typer.echo(json.dumps(items))
        return

    if not data:
        typer.echo("No items")
        return

    header = [typer.style(title, bold=True) for _, title in columns]
    rows = [[str(item[key]) for key, _ in columns] for item in data]
    print_table([header, *rows], hsep="    ")


########################################
# Errors
########################################


def validation_errors(e: DeployctlValidationError):
    error(str(e))
    for err in e.errors:
        loc = ".".join(str(x) for x in err.get("loc", []))
        typer.secho(f" - {loc}: {err.get('msg')}", fg=typer.colors.RED, err=True)
