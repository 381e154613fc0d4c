"""phpIPAM API client.

Session management and typed request dispatch for the phpIPAM REST API,
with thin controllers for sections, subnets, addresses and VLANs.

Exports:
    Session: Credentials, token and shared HTTP client.
    Client: Generic client that logs in and refreshes tokens as needed.
    Config: Connection configuration.
    configure_logging: Optional structlog setup for scripts using the client.
    errors: Exception types raised by the client.
    types: Pydantic models for phpIPAM records.
"""

from . import errors, types
from .client import Client, SessionState
from .config import (
    Config,
    configure_logging,
    default_config,
    load_config,
    merge_configs,
)
from .errors import (
    APIError,
    AuthError,
    ConfigError,
    PhpipamError,
    ProtocolError,
    TypeMismatchError,
)
from .session import Session, Token

__version__ = "0.1.0"

__all__ = [
    "APIError",
    "AuthError",
    "Client",
    "Config",
    "ConfigError",
    "PhpipamError",
    "ProtocolError",
    "Session",
    "SessionState",
    "Token",
    "TypeMismatchError",
    "configure_logging",
    "default_config",
    "errors",
    "load_config",
    "merge_configs",
    "types",
]
