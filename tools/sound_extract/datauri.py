"""Decode base64 data-URIs into raw bytes."""

from __future__ import annotations

import base64
import binascii
import re
from typing import Tuple

from tools.sound_extract.errors import DecodeError, MalformedDataUri

_WHITESPACE = re.compile(r"[ \t\r\n\f\v]+")


def split_data_uri(data_uri: str) -> Tuple[str, str]:
    """Split ``data_uri`` into its metadata and payload around the first comma."""

    metadata, sep, payload = data_uri.partition(",")
    if not sep:
        raise MalformedDataUri("invalid data URI: missing ',' separator")
    return metadata, payload


def media_type(metadata: str) -> str | None:
    """Return the MIME type of a ``data:<type>;base64`` header, if any."""

    header = metadata.strip()
    if header.startswith("data:"):
        header = header[len("data:") :]
    mime = header.split(";", 1)[0].strip()
    return mime or None


def decode_data_uri(data_uri: str) -> bytes:
    _, payload = split_data_uri(data_uri)
    payload = _WHITESPACE.sub("", payload)
    if not payload:
        raise MalformedDataUri("invalid data URI: missing base64 data")
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise DecodeError(f"invalid base64 payload: {exc}") from exc
