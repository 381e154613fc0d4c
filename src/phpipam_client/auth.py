"""Login and token refresh against the phpIPAM user controller.

Both exchanges replace the session token as one unit on success and
propagate failures unchanged. Neither retries;
:class:`phpipam_client.client.Client` decides when they run.
"""

import structlog

from . import request
from .errors import ProtocolError
from .session import Session, Token

logger = structlog.get_logger(__name__)

USER_PATH = "/user/"


def login(session: Session) -> Token:
    """Log in with the session credentials (``POST /user/``).

    Returns:
        The new token, already installed on the session.

    Raises:
        APIError: If the service rejects the credentials.
        ProtocolError: If the response carries no token.
        httpx.HTTPError: If the HTTP exchange fails.
    """
    token = request.send(
        session,
        "POST",
        USER_PATH,
        response_type=Token,
        use_credentials=True,
    )
    if token is None or token.is_empty:
        msg = "Login response did not contain a token"
        raise ProtocolError(msg)

    session._swap_token(token)
    logger.info(
        "Logged into phpIPAM",
        username=session.config.username,
        expires=token.expires,
    )
    return token


def refresh(session: Session) -> Token:
    """Extend the current token (``PATCH /user/``, token header only).

    Some phpIPAM versions answer with the new expiry only; the current
    token value is kept in that case.

    Returns:
        The new token, already installed on the session.

    Raises:
        APIError: If the service rejects the token.
        ProtocolError: If the response carries neither token nor expiry.
        httpx.HTTPError: If the HTTP exchange fails.
    """
    current = session.token
    token = request.send(session, "PATCH", USER_PATH, response_type=Token)
    if token is None or (token.is_empty and not token.expires):
        msg = "Refresh response did not contain a token"
        raise ProtocolError(msg)
    if token.is_empty:
        token = Token(value=current.value, expires=token.expires)

    session._swap_token(token)
    logger.info("Refreshed phpIPAM session token", expires=token.expires)
    return token
