import pytest

from tracker.core import audio
from tracker.core.errors import ValidationError


def test_data_uri_roundtrip():
    uri = audio.to_data_uri(b"\x00OggS-bytes", mime="audio/ogg")
    assert uri.startswith("data:audio/ogg;base64,")
    assert audio.from_data_uri(uri) == ("audio/ogg", b"\x00OggS-bytes")


def test_browser_style_mime_with_codec():
    uri = "data:audio/webm;codecs=opus;base64,AAEC"
    mime, data = audio.from_data_uri(uri)
    assert mime == "audio/webm;codecs=opus" and data == b"\x00\x01\x02"
    assert audio.filename_for(mime, audio.sha256_bytes(data)).endswith(".webm")


def test_rejects_empty_oversized_and_garbage():
    with pytest.raises(ValidationError):
        audio.to_data_uri(b"")
    with pytest.raises(ValidationError):
        audio.to_data_uri(b"x" * 11, max_bytes=10)
    with pytest.raises(ValidationError):
        audio.from_data_uri("https://example.com/a.ogg")
    with pytest.raises(ValidationError):
        audio.from_data_uri("data:audio/ogg;base64,@@@")
