"""Exception types raised by the phpIPAM client.

Every error the client raises on its own derives from :class:`PhpipamError`.
Transport failures are not wrapped and surface as ``httpx.HTTPError``.
"""


class PhpipamError(Exception):
    """Base error for phpIPAM client failures."""


class ConfigError(PhpipamError):
    """Configuration could not be loaded or validated."""


class AuthError(PhpipamError):
    """Logging in or refreshing the session token failed."""


class ProtocolError(PhpipamError):
    """Response body is not a valid envelope or has an unexpected shape."""


class APIError(PhpipamError):
    """The service answered with ``success: false``.

    Attributes:
        code: Numeric code reported in the envelope.
        message: Service message, verbatim.
    """

    def __init__(self, code: int, message: str) -> None:
        super().__init__(f"Error from API ({code}): {message}")
        self.code = code
        self.message = message


class TypeMismatchError(PhpipamError):
    """A wire scalar could not be read under its expected encoding.

    Attributes:
        raw: The offending wire value.
        expected: Short name of the expected encoding (e.g. "bool").
    """

    def __init__(self, raw: object, expected: str) -> None:
        super().__init__(f"Cannot decode {raw!r} as {expected}")
        self.raw = raw
        self.expected = expected
