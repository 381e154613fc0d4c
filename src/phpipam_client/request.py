"""Single HTTP exchange against the phpIPAM API.

This layer builds the URL, headers and JSON body for one call, performs it
on the session's shared HTTP client and decodes the envelope. It does not
look at session state; logging in and refreshing are handled by
:mod:`phpipam_client.client`.
"""

import time
from collections.abc import Mapping
from typing import Any

import httpx
import pydantic
import structlog

from . import envelope
from .session import Session

logger = structlog.get_logger(__name__)


def build_url(session: Session, path: str) -> str:
    """Join endpoint, application ID and an application-relative path."""
    config = session.config
    return f"{config.endpoint.rstrip('/')}/{config.app_id}{path}"


def encode_body(data: Any) -> Any:
    """Serialize request input to the JSON body.

    Pydantic records are dumped by wire name with only the fields the
    caller set, so zero values are not sent by accident.
    """
    if data is None:
        return {}
    if isinstance(data, pydantic.BaseModel):
        return data.model_dump(mode="json", by_alias=True, exclude_unset=True)
    if isinstance(data, Mapping):
        return dict(data)
    return data


def send(
    session: Session,
    method: str,
    path: str,
    data: Any = None,
    response_type: Any = None,
    default: Any = None,
    use_credentials: bool = False,
) -> Any:
    """Send one request and decode the response envelope.

    Without a token (or with ``use_credentials``) the request carries HTTP
    basic auth with the configured credentials, otherwise the ``token``
    header.

    Args:
        session: Session providing config, token and HTTP client.
        method: HTTP verb.
        path: Path relative to the application, e.g. ``"/vlans/3/"``.
        data: Request input (record, mapping or None for ``{}``).
        response_type: Expected payload type, see
            :func:`phpipam_client.envelope.decode_response`.
        default: Returned when the response has no payload.
        use_credentials: Authenticate with username and password even if
            the session holds a token (used by login).

    Returns:
        The decoded payload, or ``default``.

    Raises:
        httpx.HTTPError: If the HTTP exchange fails.
        APIError: If the service reports an error.
        ProtocolError: If the response cannot be decoded.
    """
    method = method.upper()
    config = session.config
    token = session.token

    headers = {
        "Accept": "application/json",
        "Content-Type": "application/json",
    }
    auth = None
    if use_credentials or token.is_empty:
        auth = httpx.BasicAuth(config.username, config.password)
    else:
        headers["token"] = token.value

    start_time = time.time()
    try:
        logger.debug("Making API request", method=method, path=path)
        response = session.http_client.request(
            method,
            build_url(session, path),
            json=encode_body(data),
            headers=headers,
            auth=auth,
        )
    except httpx.HTTPError:
        duration = time.time() - start_time
        logger.exception(
            "API request failed",
            method=method,
            path=path,
            duration_seconds=round(duration, 3),
        )
        raise

    duration = time.time() - start_time
    logger.debug(
        "API request completed",
        method=method,
        path=path,
        status_code=response.status_code,
        duration_seconds=round(duration, 3),
    )

    return envelope.decode_response(
        response.content,
        response.status_code,
        response_type=response_type,
        default=default,
    )
