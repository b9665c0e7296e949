import json
import logging
import os
import re
from typing import Optional

import typer
from pydantic import ValidationError

from .constants import DEFAULT_API_URL, PKG_NAME
from .errors import ConfigLoadError, ConfigNotFoundError
from .models import AuthConfig, Verbosity

APP_DIR = os.environ.get("DEPLOYCTL_HOME") or typer.get_app_dir(PKG_NAME)

logger = logging.getLogger(PKG_NAME)


########################################
# Configuration
########################################


def config_path():
    return os.path.join(APP_DIR, "config.json")


def load_auth_config():

    try:
        with open(config_path(), "r", encoding="utf-8") as f:
            json_data = json.load(f)

    except FileNotFoundError as e:
        raise ConfigNotFoundError() from e

    except ValueError as e:
        logger.debug("Failed to decode config file: %s", e)
        raise ConfigLoadError() from e

    try:
        return AuthConfig.model_validate(json_data)
    except ValidationError as e:
        logger.debug("Config file is invalid: %s", e)
        raise ConfigLoadError() from e


def load_auth_config_from_env(token: Optional[str] = None):

    """Token given explicitly takes place of DEPLOYCTL_TOKEN"""

    try:
        return AuthConfig(
            url=os.environ.get("DEPLOYCTL_API_URL", DEFAULT_API_URL),
            token=token or os.environ["DEPLOYCTL_TOKEN"],
            scope=os.environ.get("DEPLOYCTL_SCOPE"),
        )

    except (KeyError, ValidationError) as e:
        raise ConfigNotFoundError() from e


def save_auth_config(config: AuthConfig):
    os.makedirs(APP_DIR, exist_ok=True)
    with open(config_path(), "w", encoding="utf-8") as f:
        f.write(config.model_dump_json(indent=2))


########################################
# Logging
########################################


def configure_logging(verbosity: Verbosity):

    logger.handlers.clear()
    logger.propagate = False

    if verbosity == Verbosity.none:
        logger.addHandler(logging.NullHandler())
        return

    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    )

    logger.addHandler(handler)
    logger.setLevel(verbosity.value.upper())


########################################
# Identifiers
########################################

_NAME_BLACKLIST = set("!@#$%^&*()=+[]{};'\"<>?`~,|\\")


def is_valid_name(name: Optional[str]):

    if not name:
        return False

    if any(ch.isspace() for ch in name):
        return False

    return not any(ch in _NAME_BLACKLIST for ch in name)


def normalize_url(url: str):
    url = re.sub(r"^https?://", "", url.strip(), flags=re.IGNORECASE)
    return url.rstrip("/").lower()


########################################
# Formatting
########################################

_SECOND = 1000
_MINUTE = _SECOND * 60
_HOUR = _MINUTE * 60
_DAY = _HOUR * 24


def format_duration(millis: float):

    """Short human readable duration, e.g. '450ms', '12s', '3h', '5d'"""

    value = abs(millis)
    for unit, suffix in ((_DAY, "d"), (_HOUR, "h"), (_MINUTE, "m"), (_SECOND, "s")):
        if value >= unit:
            rounded = int(value / unit + 0.5)
            return f"{'-' if millis < 0 else ''}{rounded}{suffix}"

    return f"{int(millis)}ms"


def elapsed(millis: float):
    return typer.style(f"[{format_duration(millis)}]", dim=True)


def plural(word: str, count: int, include_count: bool = False):

    if count != 1:
        word = f"{word}s"

    if include_count:
        return f"{count} {word}"

    return word
