"""Generic phpIPAM client with session management.

Every resource operation goes through :meth:`Client.send_request`, which
makes sure the shared session is logged in and its token is current before
the request is sent.
"""

import enum
from typing import Any

import httpx
import structlog

from . import auth, request
from .errors import AuthError, PhpipamError
from .session import Session

logger = structlog.get_logger(__name__)


class SessionState(enum.Enum):
    """Readiness of a session for sending requests."""

    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED_VALID = "authenticated-valid"
    AUTHENTICATED_EXPIRED = "authenticated-expired"


class Client:
    """Base client extended by the resource controllers.

    Holds a reference to a :class:`Session`, which may be shared with other
    clients. Concurrent callers that find the same expired token may both
    refresh it; the second refresh is redundant but harmless.
    """

    def __init__(self, session: Session):
        self.session = session

    @property
    def state(self) -> SessionState:
        token = self.session.token
        if token.is_empty:
            return SessionState.UNAUTHENTICATED
        if self.session.is_expired(token=token):
            return SessionState.AUTHENTICATED_EXPIRED
        return SessionState.AUTHENTICATED_VALID

    def _ensure_session(self) -> None:
        """Log in or refresh the token as the session state requires.

        Raises:
            AuthError: If login or refresh fails.
        """
        state = self.state
        if state is SessionState.UNAUTHENTICATED:
            try:
                auth.login(self.session)
            except (PhpipamError, httpx.HTTPError) as err:
                msg = f"Error logging into API: {err}"
                raise AuthError(msg) from err
        elif state is SessionState.AUTHENTICATED_EXPIRED:
            logger.debug("Session token expired", expires=self.session.token.expires)
            try:
                auth.refresh(self.session)
            except (PhpipamError, httpx.HTTPError) as err:
                msg = f"Error refreshing session token: {err}"
                raise AuthError(msg) from err

    def send_request(
        self,
        method: str,
        path: str,
        data: Any = None,
        response_type: Any = None,
        default: Any = None,
    ) -> Any:
        """Send a request on an authenticated session.

        Args:
            method: HTTP verb.
            path: Fully formed path relative to the application, e.g.
                ``"/subnets/cidr/10.10.1.0/24/"``.
            data: Request input; ``None`` sends ``{}``.
            response_type: Expected payload type (a record model,
                ``list[Model]``, ``str``...). ``None`` returns raw JSON.
            default: Returned when the service sends no payload.

        Returns:
            The decoded payload, or ``default``.

        Raises:
            AuthError: If logging in or refreshing the token fails.
            APIError: If the service reports an error for the request.
            ProtocolError: If the response cannot be decoded.
            TypeMismatchError: If a scalar field fails its wire codec.
            httpx.HTTPError: If the HTTP exchange fails.
        """
        self._ensure_session()
        return request.send(
            self.session,
            method,
            path,
            data=data,
            response_type=response_type,
            default=default,
        )
