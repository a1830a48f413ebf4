from __future__ import annotations

from enum import Enum
from typing import Callable, Optional

from cryptography.hazmat.primitives import hashes

from hash_search.utils import BytesLike, ConfigurationError


class DigestAlgorithm(str, Enum):
    MD5 = "md5"
    SHA1 = "sha1"
    SHA224 = "sha224"
    SHA256 = "sha256"
    SHA384 = "sha384"
    SHA512 = "sha512"
    SHA512_224 = "sha512_224"
    SHA512_256 = "sha512_256"
    SHA3_224 = "sha3_224"
    SHA3_256 = "sha3_256"
    SHA3_384 = "sha3_384"
    SHA3_512 = "sha3_512"
    BLAKE2B = "blake2b"
    BLAKE2S = "blake2s"

    def __str__(self):
        return self.value

    @classmethod
    def names(cls) -> list[str]:
        return [algorithm.value for algorithm in cls]

    @classmethod
    def from_name(cls, name: str) -> DigestAlgorithm:
        """Resolve an algorithm by name, case-insensitively. Dashes are accepted for underscores."""
        try:
            return cls(name.strip().lower().replace("-", "_"))
        except ValueError:
            raise ConfigurationError(
                f"unknown digest algorithm: {name} (choose from {', '.join(cls.names())})"
            ) from None

    def hash_algorithm(self) -> hashes.HashAlgorithm:
        return _HASH_FACTORIES[self]()

    @property
    def digest_size(self) -> int:
        return self.hash_algorithm().digest_size


_HASH_FACTORIES: dict[DigestAlgorithm, Callable[[], hashes.HashAlgorithm]] = {
    DigestAlgorithm.MD5: hashes.MD5,
    DigestAlgorithm.SHA1: hashes.SHA1,
    DigestAlgorithm.SHA224: hashes.SHA224,
    DigestAlgorithm.SHA256: hashes.SHA256,
    DigestAlgorithm.SHA384: hashes.SHA384,
    DigestAlgorithm.SHA512: hashes.SHA512,
    DigestAlgorithm.SHA512_224: hashes.SHA512_224,
    DigestAlgorithm.SHA512_256: hashes.SHA512_256,
    DigestAlgorithm.SHA3_224: hashes.SHA3_224,
    DigestAlgorithm.SHA3_256: hashes.SHA3_256,
    DigestAlgorithm.SHA3_384: hashes.SHA3_384,
    DigestAlgorithm.SHA3_512: hashes.SHA3_512,
    # BLAKE2 in cryptography only supports the full digest length.
    DigestAlgorithm.BLAKE2B: lambda: hashes.BLAKE2b(64),
    DigestAlgorithm.BLAKE2S: lambda: hashes.BLAKE2s(32),
}


class DigestState:
    """A streaming hash context that can be cloned.

    The context is never finalized in place: `finalize()` is meant for clones,
    which are thrown away afterwards. `clone()` only reads the context, so one
    base state can be cloned from many threads at once.
    """

    __slots__ = ("algorithm", "_context")

    def __init__(self, algorithm: DigestAlgorithm, _context: Optional[hashes.Hash] = None) -> None:
        self.algorithm = algorithm
        self._context = _context if _context is not None else hashes.Hash(algorithm.hash_algorithm())

    def update(self, data: BytesLike) -> None:
        self._context.update(data)

    def clone(self) -> DigestState:
        return DigestState(self.algorithm, self._context.copy())

    def finalize(self) -> bytes:
        """Finish the hash and return the digest. The state is unusable afterwards."""
        return self._context.finalize()

    def peek(self) -> bytes:
        """Digest of everything absorbed so far, leaving this state untouched."""
        return self.clone().finalize()

    def __repr__(self) -> str:
        return f"DigestState({self.algorithm.value})"
