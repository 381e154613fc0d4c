"""Session state shared by every client built on one set of credentials.

A :class:`Session` owns the merged configuration, the current auth token and
the shared ``httpx.Client``. Token and transport are swapped under a lock;
configuration is read-only once the session exists.
"""

import threading
from datetime import datetime

import httpx
import pydantic
import structlog

from .config import Config, default_config, merge_configs
from .scalars import NullableStr

logger = structlog.get_logger(__name__)

DEFAULT_TIMEOUT = 30.0

# Datetime format of token expiry values returned by phpIPAM (naive local time).
TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


class Token(pydantic.BaseModel):
    """A phpIPAM session token as returned by the user controller."""

    model_config = pydantic.ConfigDict(frozen=True, populate_by_name=True)

    value: NullableStr = pydantic.Field("", alias="token", repr=False)
    expires: NullableStr = ""

    @property
    def is_empty(self) -> bool:
        return not self.value


class Session:
    """Credentials, auth token and transport shared by phpIPAM clients.

    Clients hold a reference to a session rather than owning it, so one
    login serves every controller built on the same session. Can be used
    as a context manager to close a session-owned HTTP client.
    """

    def __init__(
        self,
        *configs: Config | dict,
        token: Token | None = None,
        http_client: httpx.Client | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """Initialize the session.

        Args:
            configs: Partial configurations merged over the environment
                defaults in order; non-empty fields of later configs win.
            token: Pre-existing token, mostly useful in tests.
            http_client: Shared transport. When omitted a client is
                created on first use and owned by the session.
            timeout: Timeout in seconds for the session-owned client.

        Raises:
            ValueError: If timeout is not positive.
            ConfigError: If a config mapping is invalid.
        """
        if timeout <= 0:
            msg = "timeout must be positive"
            raise ValueError(msg)

        self._config = merge_configs(default_config(), *configs)
        self._timeout = timeout
        self._lock = threading.Lock()
        self._token = token or Token()
        self._http_client = http_client
        self._owns_client = False

    def __enter__(self):
        """Enter context manager."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Exit context manager and cleanup resources."""
        self.close()

    @property
    def config(self) -> Config:
        return self._config

    @property
    def token(self) -> Token:
        """The current token; empty until the first login."""
        with self._lock:
            return self._token

    def _swap_token(self, token: Token) -> None:
        # Value and expiry travel together in one immutable Token.
        with self._lock:
            self._token = token

    @property
    def http_client(self) -> httpx.Client:
        """Get the shared HTTP client, creating a session-owned one if needed."""
        with self._lock:
            if self._http_client is None or (
                self._owns_client and self._http_client.is_closed
            ):
                self._http_client = httpx.Client(timeout=self._timeout)
                self._owns_client = True
            return self._http_client

    def set_http_client(self, http_client: httpx.Client) -> None:
        """Replace the shared HTTP client (custom timeouts, proxies, certs).

        The caller keeps ownership of the new client. A previously
        session-owned client is closed.
        """
        with self._lock:
            previous, owned = self._http_client, self._owns_client
            self._http_client = http_client
            self._owns_client = False
        if owned and previous is not None and not previous.is_closed:
            previous.close()

    def close(self) -> None:
        """Close the HTTP client if the session created it."""
        with self._lock:
            if self._owns_client and self._http_client is not None:
                self._http_client.close()

    def is_expired(
        self,
        now: datetime | None = None,
        token: Token | None = None,
    ) -> bool:
        """Report whether the current token has expired.

        A token without an expiry never expires; an empty token is not
        expired, it is unauthenticated. An expiry that cannot be parsed
        is treated as already past.

        Args:
            now: Reference time, naive local time (default: now).
            token: Token snapshot to check instead of the current token.
        """
        if token is None:
            token = self.token
        if token.is_empty or not token.expires:
            return False

        try:
            expires_at = datetime.strptime(token.expires, TIME_FORMAT)
        except ValueError:
            logger.warning(
                "Unparseable token expiry, treating token as expired",
                expires=token.expires,
            )
            return True

        return expires_at <= (now or datetime.now())
