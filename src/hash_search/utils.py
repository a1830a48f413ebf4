import string
from typing import Callable, Union

EncodeFn = Callable[[int], bytes]

BytesLike = Union[bytes, bytearray, memoryview]

HEX_DIGITS = frozenset(string.hexdigits)


class ConfigurationError(ValueError):
    pass


class InputReadError(OSError):
    pass


def is_hex(text: str) -> bool:
    """True if every character of text is a hex digit (the empty string counts)."""
    return all(c in HEX_DIGITS for c in text)


def c_hex(value: int) -> str:
    """Format like printf's %#x: 0 has no 0x prefix."""
    return f"{value:#x}" if value else "0"


def hex_digest(digest: BytesLike) -> str:
    return bytes(digest).hex()
