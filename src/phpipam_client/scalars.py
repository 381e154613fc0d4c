"""Conversion between phpIPAM wire scalars and native values.

phpIPAM is backed by PHP and MySQL, so integers, IDs and flags come back as
JSON strings (``"24"``, ``"1"``) or ``null``. The annotated types at the
bottom of this module plug these converters into pydantic models so each
record field declares its wire encoding explicitly.

Flags are strict on the wire: only ``"1"`` and ``"0"`` decode. Records built
in Python (``Subnet(is_full=True)``) still take native booleans; the envelope
decoder marks wire validation with :data:`WIRE_CONTEXT`.
"""

from typing import Annotated

from pydantic import BeforeValidator, PlainSerializer, ValidationInfo

from .errors import TypeMismatchError

_BOOL_TOKENS = {"1": True, "0": False}

# Validation context for payloads read off the wire.
WIRE_CONTEXT = {"wire": True}


def decode_bool(raw: object) -> bool:
    """Decode a ``"1"``/``"0"`` flag.

    Raises:
        TypeMismatchError: For any other value, including ``null`` and
            unquoted booleans or numbers.
    """
    if isinstance(raw, str) and raw in _BOOL_TOKENS:
        return _BOOL_TOKENS[raw]
    raise TypeMismatchError(raw, "bool")


def encode_bool(value: bool) -> str:
    """Encode a flag as the quoted ``"1"``/``"0"`` the service expects."""
    return "1" if value else "0"


def decode_nullable_bool(raw: object) -> bool:
    """Like :func:`decode_bool`, but ``null`` decodes to False."""
    return False if raw is None else decode_bool(raw)


def decode_int(raw: object) -> int:
    """Decode a stringified integer; ``null`` and ``""`` decode to 0."""
    if raw is None or raw == "":
        return 0
    if isinstance(raw, bool):
        raise TypeMismatchError(raw, "int")
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str):
        text = raw.strip()
        digits = text[1:] if text.startswith("-") else text
        if digits.isascii() and digits.isdigit():
            return int(text)
    raise TypeMismatchError(raw, "int")


def encode_int(value: int) -> str:
    return str(value)


def decode_str(raw: object) -> object:
    # Non-string values are left for pydantic to reject.
    return "" if raw is None else raw


def _from_wire(info: ValidationInfo) -> bool:
    return bool(info.context and info.context.get("wire"))


def _validate_bool(raw: object, info: ValidationInfo) -> bool:
    if isinstance(raw, bool) and not _from_wire(info):
        return raw
    return decode_bool(raw)


def _validate_nullable_bool(raw: object, info: ValidationInfo) -> bool:
    if isinstance(raw, bool) and not _from_wire(info):
        return raw
    return decode_nullable_bool(raw)


BoolString = Annotated[
    bool,
    BeforeValidator(_validate_bool),
    PlainSerializer(encode_bool, return_type=str),
]

NullableBoolString = Annotated[
    bool,
    BeforeValidator(_validate_nullable_bool),
    PlainSerializer(encode_bool, return_type=str),
]

IntString = Annotated[
    int,
    BeforeValidator(decode_int),
    PlainSerializer(encode_int, return_type=str),
]

NullableStr = Annotated[str, BeforeValidator(decode_str)]
