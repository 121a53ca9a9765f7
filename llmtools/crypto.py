"""Hashing and encoding helpers."""

from __future__ import annotations

import base64
import hashlib
import hmac
from urllib.parse import quote


def _to_bytes(data: str | bytes) -> bytes:
    return data.encode("utf-8") if isinstance(data, str) else bytes(data)


def sha256(text: str) -> str:
    """Hex digest of the SHA-256 hash of ``text``."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def hmac_sha256(key: bytes, msg: str) -> bytes:
    return hmac.new(key, msg.encode("utf-8"), hashlib.sha256).digest()


def hex_encode(data: bytes) -> str:
    return bytes(data).hex()


def encode_uri(uri: str) -> str:
    """Percent-encode each ``/``-separated segment of ``uri``."""
    return "/".join(quote(segment, safe="") for segment in uri.split("/"))


def base64_encode(data: str | bytes) -> str:
    return base64.b64encode(_to_bytes(data)).decode("ascii")


def base64_decode(data: str | bytes) -> bytes:
    """Decode standard padded base64; raises ``ValueError`` on bad input."""
    return base64.b64decode(_to_bytes(data), validate=True)