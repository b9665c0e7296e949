import typer


def show_help(ctx: typer.Context, value: bool):

    """
    Eager '--help' option handler for commands
    which report help display with exit code 2
    """

    if not value or ctx.resilient_parsing:
        return

    typer.echo(ctx.get_help())
    raise typer.Exit(code=2)


def help_option():
    return typer.Option(
        False,
        "-h",
        "--help",
        is_eager=True,
        expose_value=False,
        callback=show_help,
        help="Output usage information",
    )
