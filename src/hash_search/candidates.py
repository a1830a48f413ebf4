from enum import Enum

from hash_search.utils import EncodeFn, c_hex

RAW_WIDTH = 4
RAW_LIMIT = 1 << (8 * RAW_WIDTH)


def encode_decimal(candidate: int) -> bytes:
    """Candidate 7 becomes b"7"."""
    return b"%d" % candidate


def encode_raw(candidate: int) -> bytes:
    """Candidate as a 4-byte little-endian integer (the older output format)."""
    return candidate.to_bytes(RAW_WIDTH, "little")


class CandidateEncoding(str, Enum):
    DECIMAL = "decimal"
    RAW = "raw"

    def __str__(self):
        return self.value

    @property
    def encoder(self) -> EncodeFn:
        match self:
            case CandidateEncoding.DECIMAL:
                return encode_decimal
            case CandidateEncoding.RAW:
                return encode_raw
            case _:
                raise ValueError(f"Invalid encoding: {self}")

    @property
    def max_search(self) -> int | None:
        """Largest search bound this encoding can represent without aliasing, or None if unbounded."""
        return RAW_LIMIT if self is CandidateEncoding.RAW else None

    def label(self, candidate: int) -> str:
        """How a candidate is shown in a match listing."""
        if self is CandidateEncoding.RAW:
            return f"bytes {c_hex(candidate)}"
        return f"ascii {candidate}"
