"""Connection configuration and logging setup for the phpIPAM client."""

import json
import logging
import os
import pathlib
from collections.abc import Mapping
from typing import Any, TextIO

import pydantic
import structlog

from .errors import ConfigError

DEFAULT_ENDPOINT = "http://localhost/api"

# Environment variable consulted for each Config field.
ENV_VARS = {
    "app_id": "PHPIPAM_APP_ID",
    "endpoint": "PHPIPAM_ENDPOINT_ADDR",
    "password": "PHPIPAM_PASSWORD",
    "username": "PHPIPAM_USER_NAME",
}


class Config(pydantic.BaseModel):
    """Configuration for connecting to the phpIPAM API.

    Empty strings mean "not set": when configs are merged, only non-empty
    fields override earlier values.
    """

    model_config = pydantic.ConfigDict(frozen=True, extra="forbid")

    app_id: str = pydantic.Field("", description="Application ID created in phpIPAM")
    endpoint: str = pydantic.Field("", description="API base URL")
    username: str = pydantic.Field("", description="phpIPAM account user name")
    password: str = pydantic.Field(
        "",
        description="phpIPAM account password",
        repr=False,
    )


def default_config(environ: Mapping[str, str] | None = None) -> Config:
    """Build the default configuration from the environment.

    * ``app_id`` from ``PHPIPAM_APP_ID``, otherwise empty
    * ``endpoint`` from ``PHPIPAM_ENDPOINT_ADDR``, otherwise ``DEFAULT_ENDPOINT``
    * ``password`` from ``PHPIPAM_PASSWORD``, otherwise empty
    * ``username`` from ``PHPIPAM_USER_NAME``, otherwise empty

    Args:
        environ: Mapping to read instead of ``os.environ``.
    """
    env = os.environ if environ is None else environ
    values = {field: env.get(var, "") for field, var in ENV_VARS.items()}
    if not values["endpoint"]:
        values["endpoint"] = DEFAULT_ENDPOINT
    return Config(**values)


def merge_configs(base: Config, *overrides: Config | Mapping[str, Any]) -> Config:
    """Merge configs field by field; non-empty values of later configs win.

    Raises:
        ConfigError: If a mapping override has unknown or invalid fields.
    """
    merged = base.model_dump()
    for override in overrides:
        if not isinstance(override, Config):
            try:
                override = Config(**override)
            except pydantic.ValidationError as err:
                msg = f"Invalid configuration: {err}"
                raise ConfigError(msg) from err
        for field, value in override.model_dump().items():
            if value:
                merged[field] = value
    return Config(**merged)


def load_config(config_path: str | pathlib.Path) -> Config:
    """Load a (possibly partial) configuration from a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigError: If the content is not a valid configuration object.
    """
    path = pathlib.Path(config_path)
    if not path.exists():
        msg = f"Configuration file not found: {config_path}"
        raise FileNotFoundError(msg)

    with path.open("r") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as err:
            msg = f"Configuration file is not valid JSON: {config_path}"
            raise ConfigError(msg) from err

    if not isinstance(data, dict):
        msg = f"Configuration file must contain a JSON object: {config_path}"
        raise ConfigError(msg)

    try:
        return Config(**data)
    except pydantic.ValidationError as err:
        msg = f"Invalid configuration in {config_path}: {err}"
        raise ConfigError(msg) from err


def configure_logging(
    log_level_name: str = "INFO",
    *,
    json_output: bool = False,
    stream: TextIO | None = None,
) -> None:
    """Route the client's structlog events to a stream.

    The library itself never calls this; it only emits events through
    ``structlog.get_logger``. Applications that already configure structlog
    should skip it. Scripts and CLI tools that just want to see the
    client's request, login and refresh events can call it once at start-up.

    Args:
        log_level_name: Minimum level name, e.g. ``"DEBUG"`` to see every
            request with its duration. Unknown names fall back to INFO.
        json_output: Render one JSON object per line instead of logfmt.
        stream: Destination file object (default: stdout).
    """
    log_level = getattr(logging, log_level_name.upper(), logging.INFO)
    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.processors.LogfmtRenderer(
            key_order=("timestamp", "level", "msg"),
        )
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.EventRenamer("msg"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=False,
    )
