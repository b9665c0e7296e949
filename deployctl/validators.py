from typing import Optional

from pydantic import AnyHttpUrl, TypeAdapter, ValidationError
from typer import BadParameter


def url(value: Optional[str]):

    if value is None:
        return value

    value = value.strip()

    try:
        TypeAdapter(AnyHttpUrl).validate_python(value)
    except ValidationError as e:
        raise BadParameter("Provided string is not a valid url") from e

    return value.rstrip("/")
