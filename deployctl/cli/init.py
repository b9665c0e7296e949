import difflib
import logging
import os
import shutil
import tarfile
import tempfile
from typing import IO, List, Optional

import click
import typer

from deployctl import output
from deployctl.api.examples import download_example, list_examples
from deployctl.callback import help_option
from deployctl.client import ApiClient
from deployctl.constants import PKG_NAME
from deployctl.errors import DeployctlError, DestinationExistsError, ExampleNotFound
from deployctl.models import AppContext, Example, OutputMode

logger = logging.getLogger(__name__)

EPILOG = f"""
Examples:\n
- Choose from all available examples: $ {PKG_NAME} init\n
- Initialize example project into a new directory: $ {PKG_NAME} init <example>\n
- Initialize example project into specified directory:
$ {PKG_NAME} init <example> <dir>\n
- Initialize example project without checking: $ {PKG_NAME} init <example> --force
"""


########################################
# Example selection
########################################


def choose_example(examples: List[Example], app_ctx: AppContext) -> Optional[str]:

    if not app_ctx.prompt:
        output.error("No example specified. Run with an example name or enable prompts")
        raise typer.Exit(code=1)

    names = [example.name for example in examples]
    numbers = [str(i) for i in range(1, len(names) + 1)]

    output.log("Select example:")
    for number, name in zip(numbers, names):
        typer.echo(f"  {number}) {name}")

    choice: str = typer.prompt(
        "> Example name or number (empty to cancel)",
        default="",
        show_default=False,
        type=click.Choice(["", *names, *numbers]),
        show_choices=False,
    )

    if not choice:
        return None

    if choice in numbers:
        return names[int(choice) - 1]

    return choice


def guess_example(name: str, examples: List[Example]) -> Optional[str]:

    for example in examples:
        if name in example.suggestions:
            return example.name

    names = [example.name for example in examples]
    matches = difflib.get_close_matches(name, names, n=1)
    return matches[0] if matches else None


def resolve_example(name: str, examples: List[Example], app_ctx: AppContext) -> str:

    if any(example.name == name for example in examples):
        return name

    found = guess_example(name, examples)
    if found is None:
        raise ExampleNotFound(name)

    if app_ctx.auto_approve:
        return found

    if not app_ctx.prompt:
        raise ExampleNotFound(name)

    question = f"> Did you mean {typer.style(found, bold=True)}?"
    if typer.confirm(question, default=False):
        return found

    raise ExampleNotFound(name)


########################################
# Extraction
########################################


def check_destination(cwd: str, folder: str, force: bool) -> str:

    """Returns absolute path of destination. Nothing is created yet"""

    dest = os.path.abspath(os.path.join(cwd, folder))

    if os.path.exists(dest):
        if not os.path.isdir(dest):
            raise DestinationExistsError(folder)

        if os.listdir(dest) and not force:
            raise DestinationExistsError(folder)

    return dest


def _strip_top_dir(name: str):
    parts = [p for p in name.split("/") if p not in ("", ".")]
    return "/".join(parts[1:])


def extract_tarball(file: IO[bytes], dest: str):

    """
    Extracts gzipped tarball into dest directory.
    The top-level directory of archive is dropped
    """

    try:
        with tarfile.open(fileobj=file, mode="r:gz") as tar:

            os.makedirs(dest, exist_ok=True)
            root = os.path.realpath(dest)

            for member in tar:

                relpath = _strip_top_dir(member.name)
                if not relpath:
                    continue

                target = os.path.realpath(os.path.join(root, relpath))
                if os.path.commonpath([root, target]) != root:
                    logger.debug("Skip member outside of destination: %s", member.name)
                    continue

                if member.isdir():
                    os.makedirs(target, exist_ok=True)

                elif member.isfile():
                    os.makedirs(os.path.dirname(target), exist_ok=True)
                    with tar.extractfile(member) as src, open(target, "wb") as dst:
                        shutil.copyfileobj(src, dst)
                    os.chmod(target, member.mode & 0o777 | 0o600)

                else:
                    logger.debug("Skip unsupported member: %s", member.name)

    except tarfile.TarError as e:
        raise DeployctlError("Downloaded example is not a valid archive") from e

    except OSError as e:
        raise DeployctlError(f"Failed to extract example into '{dest}'") from e


def extract_example(
    client: ApiClient,
    name: str,
    dest: str,
    output_mode: OutputMode,
):
    with tempfile.TemporaryFile() as f:
        download_example(client, name, f, output_mode)
        f.seek(0)
        extract_tarball(f, dest)


########################################
# Init
########################################


def init(
    ctx: typer.Context,
    args: Optional[List[str]] = typer.Argument(
        None,
        metavar="[EXAMPLE] [DIR]",
        help="Example name and destination directory",
        show_default=False,
    ),
    force: bool = typer.Option(
        False,
        "-f",
        "--force",
        help="Overwrite destination directory if exists",
    ),
    _help: bool = help_option(),
):
    app_ctx: AppContext = ctx.obj
    output_mode = app_ctx.output_mode
    args = list(args or [])

    if len(args) > 2:
        output.error("Too much arguments.")
        raise typer.Exit(code=1)

    name = args[0] if args else None
    folder = args[1] if len(args) > 1 else None

    with ApiClient.from_context(app_ctx) as client:

        examples = [example for example in list_examples(client) if example.visible]

        if name is None:
            name = choose_example(examples, app_ctx)
            if name is None:
                output.log("No changes made.")
                return
        else:
            name = resolve_example(name, examples, app_ctx)

        folder = folder or name
        dest = check_destination(os.getcwd(), folder, force)
        extract_example(client, name, dest, output_mode)

    output.success(
        f'Initialized "{typer.style(name, bold=True)}" example '
        f"in {typer.style(folder, bold=True)}."
    )

    output.message(f"- To get started, run `cd {folder}`", output_mode)
