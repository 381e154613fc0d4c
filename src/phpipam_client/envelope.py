"""Decoder for the phpIPAM response envelope.

Every phpIPAM response is wrapped the same way::

    {"code": 200, "success": true, "data": ...}
    {"code": 200, "success": true}
    {"code": 404, "success": false, "message": "No subnets found"}

The decoder turns the first shape into a typed value, the second into the
caller's default and the third into :class:`~phpipam_client.errors.APIError`.
"""

from typing import Any

import pydantic
import structlog

from .errors import APIError, ProtocolError
from .scalars import WIRE_CONTEXT, NullableStr

logger = structlog.get_logger(__name__)

# Raw bodies quoted in error messages are cut to this many characters.
_BODY_EXCERPT = 200


class Envelope(pydantic.BaseModel):
    """Top-level shape shared by all phpIPAM responses."""

    code: int = 0
    success: bool
    data: Any = None
    message: NullableStr = ""

    @property
    def has_data(self) -> bool:
        """Whether the envelope carries a payload (``null`` counts as none)."""
        return "data" in self.model_fields_set and self.data is not None


def parse_envelope(body: bytes | str, status_code: int) -> Envelope:
    """Parse the envelope wrapper without touching the payload.

    Raises:
        ProtocolError: If the body is not JSON or lacks the envelope fields.
    """
    try:
        return Envelope.model_validate_json(body)
    except pydantic.ValidationError as err:
        text = body.decode(errors="replace") if isinstance(body, bytes) else body
        msg = (
            f"Malformed response (HTTP {status_code}): {err.error_count()} "
            f"error(s) - Response body: {text[:_BODY_EXCERPT]}"
        )
        raise ProtocolError(msg) from err


def decode_response(
    body: bytes | str,
    status_code: int,
    response_type: Any = None,
    default: Any = None,
) -> Any:
    """Decode a raw response into ``response_type``.

    Args:
        body: Raw response body.
        status_code: HTTP status, used for diagnostics only; the envelope
            is authoritative for success.
        response_type: Anything pydantic's ``TypeAdapter`` accepts, e.g. a
            record model or ``list[Model]``. ``None`` returns the payload
            as parsed JSON.
        default: Returned unchanged when the envelope has no payload.

    Returns:
        The decoded payload, or ``default``.

    Raises:
        APIError: If the envelope reports ``success: false``.
        ProtocolError: If the body or the payload shape is invalid.
        TypeMismatchError: If a scalar field fails its wire codec.
    """
    envelope = parse_envelope(body, status_code)

    if not envelope.success:
        if not envelope.message:
            msg = (
                f"Error response without message "
                f"(HTTP {status_code}, code {envelope.code})"
            )
            raise ProtocolError(msg)
        logger.warning(
            "API error response",
            code=envelope.code,
            status_code=status_code,
            error_message=envelope.message,
        )
        raise APIError(envelope.code, envelope.message)

    if not envelope.has_data:
        return default

    if response_type is None:
        return envelope.data

    try:
        return pydantic.TypeAdapter(response_type).validate_python(
            envelope.data,
            context=WIRE_CONTEXT,
        )
    except pydantic.ValidationError as err:
        msg = f"Unexpected payload shape for {response_type!r}: {err}"
        raise ProtocolError(msg) from err
