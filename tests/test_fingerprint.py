"""Unit tests for content fingerprinting."""

import io

import pytest

from upstage.fingerprint import fingerprint, fingerprint_file


class TestFingerprint:
    def test_known_digest(self) -> None:
        assert fingerprint(b'{"foo":"bar"}') == (
            "eji/gfOD9pQzrW6QDTWz4jhVk/dqe3q11DVbi6Qe4ks="
        )

    def test_empty_buffer(self) -> None:
        assert fingerprint(b"") == "47DEQpj8HBSa+/TImW+5JCeuQeRkm5NMpJWZG3hSuFU="

    def test_deterministic(self) -> None:
        data = b"my-service.zip content"
        assert fingerprint(data) == fingerprint(bytes(data))

    def test_distinct_buffers_do_not_collide(self) -> None:
        corpus = [
            b"",
            b"\x00",
            b"\x00\x00",
            b"a",
            b"A",
            b"ab",
            b"ba",
            b'{"foo":"bar"}',
            b'{"foo": "bar"}',
            b"my-service.zip content",
            bytes(range(256)),
            b"x" * 1024,
            b"x" * 1025,
        ]
        hashes = {fingerprint(data) for data in corpus}
        assert len(hashes) == len(corpus)

    def test_rejects_non_bytes(self) -> None:
        with pytest.raises(TypeError, match="expects bytes"):
            fingerprint("not bytes")  # type: ignore[arg-type]


class TestFingerprintFile:
    def test_matches_buffer_fingerprint(self) -> None:
        data = b"my-service.zip content"
        assert fingerprint_file(io.BytesIO(data)) == fingerprint(data)

    def test_large_stream_matches_buffer(self) -> None:
        data = bytes(range(256)) * 10000
        assert fingerprint_file(io.BytesIO(data)) == fingerprint(data)

    def test_rewinds_to_start_position(self) -> None:
        stream = io.BytesIO(b"headerpayload")
        stream.seek(6)
        result = fingerprint_file(stream)

        assert result == fingerprint(b"payload")
        assert stream.tell() == 6
