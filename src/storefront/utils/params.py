"""Codec for the opaque ``data`` query parameter of emailed links.

Encryption itself belongs to an external service; ``ParamsCodec`` is its
port.  ``PlainParamsCodec`` only makes the payload URL-safe and is used in
development and tests.
"""

import base64
import binascii
import json
from abc import ABC, abstractmethod

from protean.exceptions import ValidationError


class ParamsCodec(ABC):
    @abstractmethod
    def encode(self, payload: dict) -> str: ...

    @abstractmethod
    def decode(self, token: str) -> dict:
        """Return the payload or raise ``ValidationError`` for a token it cannot read."""
        ...


class PlainParamsCodec(ParamsCodec):
    def encode(self, payload: dict) -> str:
        raw = json.dumps(payload, separators=(",", ":")).encode("utf-8")
        return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")

    def decode(self, token: str) -> dict:
        padded = token + "=" * (-len(token) % 4)
        try:
            payload = json.loads(base64.urlsafe_b64decode(padded.encode("ascii")))
        except (binascii.Error, UnicodeError, ValueError):
            raise ValidationError({"data": ["Malformed link parameters"]}) from None
        if not isinstance(payload, dict):
            raise ValidationError({"data": ["Malformed link parameters"]})
        return payload


_current_codec: ParamsCodec | None = None


def get_params_codec() -> ParamsCodec:
    global _current_codec
    if _current_codec is None:
        _current_codec = PlainParamsCodec()
    return _current_codec


def set_params_codec(codec: ParamsCodec) -> None:
    global _current_codec
    _current_codec = codec


def reset_params_codec() -> None:
    global _current_codec
    _current_codec = None
