import os
from dataclasses import dataclass, field

from hash_search.candidates import CandidateEncoding
from hash_search.digests import DigestAlgorithm
from hash_search.partition import DEFAULT_SHIFT, PartitionStrategy, search_bound
from hash_search.results import SearchMode
from hash_search.target import TargetPrefix
from hash_search.utils import ConfigurationError


def default_workers() -> int:
    return os.cpu_count() or 1


@dataclass(frozen=True, slots=True)
class SearchConfig:
    """Everything a run needs, checked before any input is read."""

    target: TargetPrefix
    algorithm: DigestAlgorithm = DigestAlgorithm.MD5
    shift: int = DEFAULT_SHIFT
    mode: SearchMode = SearchMode.FIRST_MATCH
    workers: int = field(default_factory=default_workers)
    strategy: PartitionStrategy = PartitionStrategy.BLOCK
    encoding: CandidateEncoding = CandidateEncoding.DECIMAL

    @classmethod
    def create(
        cls,
        target_hex: str,
        *,
        digest: str = DigestAlgorithm.MD5.value,
        shift: int = DEFAULT_SHIFT,
        list_all: bool = False,
        workers: int | None = None,
        strategy: str = PartitionStrategy.BLOCK.value,
        encoding: str = CandidateEncoding.DECIMAL.value,
    ) -> "SearchConfig":
        """Build a validated config from plain option values."""
        config = cls(
            target=TargetPrefix.from_hex(target_hex),
            algorithm=DigestAlgorithm.from_name(digest),
            shift=shift,
            mode=SearchMode.ENUMERATE if list_all else SearchMode.FIRST_MATCH,
            workers=default_workers() if workers is None else workers,
            strategy=PartitionStrategy(strategy),
            encoding=CandidateEncoding(encoding),
        )
        config.validate()
        return config

    @property
    def max_search(self) -> int:
        return search_bound(self.shift)

    def validate(self) -> None:
        max_search = search_bound(self.shift)

        if self.workers < 1:
            raise ConfigurationError(f"worker count must be at least 1, got {self.workers}")

        digest_bits = 8 * self.algorithm.digest_size
        if self.target.bit_length > digest_bits:
            raise ConfigurationError(
                f"target prefix has {self.target.bit_length} bits but {self.algorithm} digests are only {digest_bits} bits"
            )

        limit = self.encoding.max_search
        if limit is not None and max_search > limit:
            raise ConfigurationError(
                f"{self.encoding} encoding only covers {limit.bit_length() - 1} bits, got {self.shift}"
            )
