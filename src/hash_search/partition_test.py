import pytest

from hash_search.partition import PartitionStrategy, partition, search_bound
from hash_search.utils import ConfigurationError


class TestSearchBound:
    """Test suite for search_bound()"""

    def test_values(self):
        """Test the bound for a few bit counts"""
        assert search_bound(1) == 1
        assert search_bound(8) == 255
        assert search_bound(24) == 2**24 - 1
        assert search_bound(63) == 2**63 - 1
        assert search_bound(64) == 2**64 - 1

    @pytest.mark.parametrize("shift", [0, -1, 65, 100])
    def test_out_of_range(self, shift):
        """Test that bit counts outside 1-64 are rejected"""
        with pytest.raises(ConfigurationError, match="invalid number of bits"):
            search_bound(shift)


class TestPartition:
    """Test suite for partition()"""

    @pytest.mark.parametrize("strategy", list(PartitionStrategy))
    @pytest.mark.parametrize("max_search, workers", [(1, 1), (1, 8), (10, 3), (255, 4), (256, 16), (1000, 7)])
    def test_covers_space_exactly_once(self, strategy, max_search, workers):
        """Test that the slices are disjoint and cover [0, max_search)"""
        slices = partition(max_search, workers, strategy)
        seen = [value for s in slices for value in s]
        assert sorted(seen) == list(range(max_search))
        assert len(slices) <= workers

    def test_block_is_contiguous(self):
        """Test block partitioning of 10 values over 3 workers"""
        assert partition(10, 3, PartitionStrategy.BLOCK) == [range(0, 4), range(4, 8), range(8, 10)]

    def test_stride_interleaves(self):
        """Test stride partitioning of 10 values over 3 workers"""
        assert partition(10, 3, PartitionStrategy.STRIDE) == [range(0, 10, 3), range(1, 10, 3), range(2, 10, 3)]

    def test_single_worker(self):
        """Test that one worker gets everything in order"""
        for strategy in PartitionStrategy:
            assert partition(255, 1, strategy) == [range(0, 255)]

    def test_drops_empty_slices(self):
        """Test that extra workers get no empty slices"""
        assert partition(2, 5, PartitionStrategy.BLOCK) == [range(0, 1), range(1, 2)]
        assert partition(2, 5, PartitionStrategy.STRIDE) == [range(0, 2, 5), range(1, 2, 5)]

    def test_full_64_bit_space(self):
        """Test that the 64-bit space splits without overflowing"""
        max_search = search_bound(64)
        slices = partition(max_search, 4, PartitionStrategy.BLOCK)
        assert slices[0].start == 0
        assert slices[-1].stop == max_search
        for left, right in zip(slices, slices[1:]):
            assert left.stop == right.start

    def test_bad_worker_count(self):
        """Test that zero workers is a configuration error"""
        with pytest.raises(ConfigurationError, match="worker count"):
            partition(10, 0)
