from dataclasses import dataclass, field

from hash_search.utils import BytesLike, ConfigurationError, is_hex


def matches(digest: BytesLike, target: BytesLike, bit_length: int) -> bool:
    """True if the first bit_length bits of digest equal those of target.

    Whole bytes are compared directly. A trailing partial byte (the last nibble
    of an odd-length hex prefix) only compares its high bits; the rest of that
    target byte is ignored.
    """
    full_bytes, rem_bits = divmod(bit_length, 8)
    if digest[:full_bytes] != target[:full_bytes]:
        return False
    if not rem_bits:
        return len(digest) >= full_bytes
    if len(digest) <= full_bytes:
        return False
    mask = (0xFF << (8 - rem_bits)) & 0xFF
    return (digest[full_bytes] ^ target[full_bytes]) & mask == 0


@dataclass(frozen=True, slots=True)
class TargetPrefix:
    """The leading bits a digest has to start with."""

    data: bytes
    bit_length: int

    _head: bytes = field(init=False, repr=False, compare=False)
    _mask: int = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        if self.bit_length < 0 or self.bit_length > 8 * len(self.data):
            raise ValueError(f"bit length {self.bit_length} does not fit in {len(self.data)} bytes")
        full_bytes, rem_bits = divmod(self.bit_length, 8)
        object.__setattr__(self, "_head", bytes(self.data[:full_bytes]))
        object.__setattr__(self, "_mask", (0xFF << (8 - rem_bits)) & 0xFF if rem_bits else 0)

    @classmethod
    def from_hex(cls, text: str) -> "TargetPrefix":
        """Parse a hex string of any length; each digit contributes four bits."""
        if not is_hex(text):
            raise ConfigurationError(f"target prefix must be hex digits: {text!r}")
        padded = text + "0" if len(text) % 2 else text
        return cls(bytes.fromhex(padded), 4 * len(text))

    @property
    def hex_digits(self) -> int:
        return (self.bit_length + 3) // 4

    def matches(self, digest: bytes) -> bool:
        # Hot path: same result as matches(digest, self.data, self.bit_length).
        if not digest.startswith(self._head):
            return False
        if not self._mask:
            return True
        index = len(self._head)
        return index < len(digest) and (digest[index] ^ self.data[index]) & self._mask == 0

    def __str__(self) -> str:
        return self.data.hex()[: self.hex_digits]
