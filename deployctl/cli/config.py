from enum import Enum
from typing import Any, Dict, Optional

import typer
from pydantic import ValidationError

from deployctl import output, validators
from deployctl.constants import DEFAULT_API_URL
from deployctl.errors import ClientSideValidationError
from deployctl.models import AppContext, AuthConfig
from deployctl.util import config_path, load_auth_config, save_auth_config

app = typer.Typer(name="config", help="Manage stored credentials of the platform API")


class ConfigField(str, Enum):
    url = "url"
    token = "token"
    scope = "scope"


FIELD_TITLES = {
    ConfigField.url: "URL",
    ConfigField.token: "Token",
    ConfigField.scope: "Scope",
}


def _store(data: Dict[str, Any]):

    try:
        config = AuthConfig.model_validate(data)
    except ValidationError as e:
        raise ClientSideValidationError(e.errors()) from e

    save_auth_config(config)


@app.command(
    name="init",
    help="Store API URL, access token and default scope",
)
def init_config(
    api_url: str = typer.Option(
        DEFAULT_API_URL,
        "--api",
        prompt="API URL",
        callback=validators.url,
        help="Platform API URL",
    ),
    token: str = typer.Option(
        ...,
        prompt="Access token",
        hide_input=True,
        help="Access token of the account",
    ),
    scope: str = typer.Option(
        "",
        prompt="Default team (empty for personal account)",
        help="Team id or slug to act on by default",
    ),
):
    _store({"url": api_url, "token": token, "scope": scope.strip() or None})
    output.success(f"Configuration saved to {config_path()}")


@app.command(
    name="show",
    help="Show stored configuration or one of its fields",
)
def show_config(
    ctx: typer.Context,
    field: Optional[ConfigField] = typer.Argument(
        None,
        help="Show only this field",
        show_default=False,
    ),
    hide: bool = typer.Option(True, help="Mask the access token"),
):
    app_ctx: AppContext = ctx.obj
    data = load_auth_config().display_dict(hide)

    if field is not None:
        output.result(data[field.value])
        return

    columns = [(key.value, title) for key, title in FIELD_TITLES.items()]
    output.dict_data(data, columns, app_ctx.output_mode)


@app.command(
    name="set",
    help="Change stored field. Empty value unsets the default scope",
)
def set_config_field(
    field: ConfigField = typer.Argument(..., help="Field to change"),
    value: str = typer.Argument("", help="New value", show_default=False),
):
    data = load_auth_config().model_dump()
    data[field.value] = value.strip() or None
    _store(data)

    if data[field.value] is None:
        output.success(f"Unset {field.value}")
    else:
        output.success(f"Updated {field.value}")
