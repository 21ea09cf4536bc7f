"""Voice notes kept inline in submissions as ``data:`` URIs."""

import base64
import binascii
import hashlib
from typing import Optional, Tuple

from tracker.core.errors import ValidationError

DEFAULT_MIME = "audio/ogg"
_PREFIX = "data:"
_B64_MARK = ";base64,"


def sha256_bytes(data: bytes) -> str:
    h = hashlib.sha256()
    h.update(data)
    return h.hexdigest()


def to_data_uri(
    data: bytes, mime: Optional[str] = None, max_bytes: Optional[int] = None
) -> str:
    if not data:
        raise ValidationError("empty audio")
    if max_bytes is not None and len(data) > max_bytes:
        raise ValidationError(f"audio too large: {len(data)} > {max_bytes} bytes")
    encoded = base64.b64encode(data).decode("ascii")
    return f"{_PREFIX}{mime or DEFAULT_MIME}{_B64_MARK}{encoded}"


def from_data_uri(uri: str) -> Tuple[str, bytes]:
    """Return (mime, payload) of a base64 data URI."""
    if not uri or not uri.startswith(_PREFIX) or _B64_MARK not in uri:
        raise ValidationError("not a base64 data URI")
    head, payload = uri[len(_PREFIX) :].split(_B64_MARK, 1)
    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValidationError("corrupt audio payload") from e
    return head or DEFAULT_MIME, data


def filename_for(mime: str, digest: str) -> str:
    ext = {
        "audio/ogg": "ogg",
        "audio/mpeg": "mp3",
        "audio/mp4": "m4a",
        "audio/webm": "webm",
        "audio/wav": "wav",
    }.get(mime.split(";")[0], "bin")
    return f"voice_{digest[:8]}.{ext}"
