import hashlib
import io

import pytest

from hash_search.base_state import CHUNK_SIZE, build_base_state
from hash_search.digests import DigestAlgorithm
from hash_search.utils import InputReadError


class FailingStream:
    """Returns one chunk of data, then fails."""

    def __init__(self, first: bytes) -> None:
        self._first = first

    def read(self, size: int = -1) -> bytes:
        if self._first:
            data, self._first = self._first, b""
            return data
        raise OSError(5, "Input/output error")


class TestBuildBaseState:
    """Test suite for build_base_state()"""

    def test_empty_input(self):
        """Test hashing an empty stream"""
        state = build_base_state(io.BytesIO(b""), DigestAlgorithm.MD5)
        assert state.peek() == hashlib.md5(b"").digest()

    @pytest.mark.parametrize("size", [1, CHUNK_SIZE - 1, CHUNK_SIZE, CHUNK_SIZE + 1, 3 * CHUNK_SIZE + 17])
    def test_digest_across_chunk_boundaries(self, size):
        """Test that chunking does not change the digest"""
        data = bytes(i % 251 for i in range(size))
        state = build_base_state(io.BytesIO(data), DigestAlgorithm.SHA256)
        assert state.peek() == hashlib.sha256(data).digest()

    def test_echo_copies_input(self):
        """Test that every byte read is echoed, in order"""
        data = b"abcdefghij" * 5000
        echo = io.BytesIO()
        build_base_state(io.BytesIO(data), DigestAlgorithm.MD5, echo=echo, chunk_size=4096)
        assert echo.getvalue() == data

    def test_no_echo_by_default(self):
        """Test that nothing is written without an echo stream"""
        state = build_base_state(io.BytesIO(b"data"), DigestAlgorithm.MD5)
        assert state.peek() == hashlib.md5(b"data").digest()

    def test_on_chunk_indices(self):
        """Test that on_chunk is called once per chunk with increasing indices"""
        seen = []
        build_base_state(io.BytesIO(b"x" * 10), DigestAlgorithm.MD5, on_chunk=seen.append, chunk_size=3)
        assert seen == [0, 1, 2, 3]

    def test_echo_happens_before_next_read(self):
        """Test that each chunk is echoed before the following read"""
        events = []

        class Recorder(io.BytesIO):
            def read(self, size=-1):
                events.append("read")
                return super().read(size)

        class Echo(io.BytesIO):
            def write(self, data):
                events.append("write")
                return super().write(data)

        build_base_state(Recorder(b"x" * 4), DigestAlgorithm.MD5, echo=Echo(), chunk_size=2)
        assert events == ["read", "write", "read", "write", "read"]

    def test_read_error(self):
        """Test that a read failure raises InputReadError after echoing what was read"""
        echo = io.BytesIO()
        with pytest.raises(InputReadError, match="failed to read input"):
            build_base_state(FailingStream(b"partial"), DigestAlgorithm.MD5, echo=echo)
        assert echo.getvalue() == b"partial"
