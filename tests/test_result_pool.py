"""Tests for the bounded best-k result pool."""

import pytest

from src.lib.design_result import OrderingPolicy, ResultOrdering
from src.lib.result_pool import ResultPool


class TestResultPool:
    """Tests for ResultPool insertion and eviction."""

    def test_capacity_must_be_positive(self) -> None:
        with pytest.raises(ValueError):
            ResultPool(0)

    def test_empty_pool(self) -> None:
        pool = ResultPool(3)
        assert len(pool) == 0
        assert pool.best() is None
        assert pool.results() == ()

    def test_keeps_best_first(self, make_result) -> None:
        """Results are held in best-first order."""
        pool = ResultPool(5)
        for final in (-3.0, -7.0, -5.0):
            pool.offer(make_result(final=final, restricted=0.0))
        assert [r.final_energy for r in pool.results()] == [-7.0, -5.0, -3.0]
        assert pool.best().final_energy == -7.0

    def test_evicts_worst_on_overflow(self, make_result) -> None:
        """Only the best `capacity` results survive."""
        pool = ResultPool(2)
        assert pool.offer(make_result(final=-1.0, restricted=0.0)) is True
        assert pool.offer(make_result(final=-2.0, restricted=0.0)) is True
        assert pool.offer(make_result(final=-3.0, restricted=0.0)) is True
        assert pool.offer(make_result(final=0.0, restricted=0.0)) is False
        assert [r.final_energy for r in pool] == [-3.0, -2.0]
        assert pool.offered == 4
        assert pool.evicted == 2

    def test_ties_keep_arrival_order(self, make_result) -> None:
        pool = ResultPool(3)
        first = make_result(final=-4.0, restricted=-1.0, sequence="FIRST")
        second = make_result(final=-4.0, restricted=-1.0, sequence="SECOND")
        pool.offer(first)
        pool.offer(second)
        assert pool.results() == (first, second)

    def test_tie_rejected_when_full(self, make_result) -> None:
        """An equal result does not displace a held one."""
        pool = ResultPool(1)
        pool.offer(make_result(final=-4.0, restricted=-1.0, sequence="HELD"))
        assert pool.offer(make_result(final=-4.0, restricted=-1.0, sequence="LATE")) is False
        assert pool.best().sequence == "HELD"

    def test_original_policy_depends_on_arrival_order(self, make_result) -> None:
        """Conflicting keys: whoever arrives second is placed in front."""
        x = make_result(final=-4.0, restricted=-8.0, sequence="X")
        y = make_result(final=-5.0, restricted=-2.0, sequence="Y")

        pool_xy = ResultPool(2)
        pool_xy.offer(x)
        pool_xy.offer(y)
        pool_yx = ResultPool(2)
        pool_yx.offer(y)
        pool_yx.offer(x)

        assert [r.sequence for r in pool_xy] == ["Y", "X"]
        assert [r.sequence for r in pool_yx] == ["X", "Y"]

    def test_lexicographic_policy_is_order_independent(self, make_result) -> None:
        x = make_result(final=-4.0, restricted=-8.0, sequence="X")
        y = make_result(final=-5.0, restricted=-2.0, sequence="Y")
        ordering = ResultOrdering(OrderingPolicy.LEXICOGRAPHIC)

        for order in ((x, y), (y, x)):
            pool = ResultPool(2, ordering)
            for res in order:
                pool.offer(res)
            assert [r.sequence for r in pool] == ["Y", "X"]

    def test_results_is_snapshot(self, make_result) -> None:
        pool = ResultPool(2)
        pool.offer(make_result(final=-1.0, restricted=0.0))
        snap = pool.results()
        pool.offer(make_result(final=-2.0, restricted=0.0))
        assert len(snap) == 1
        assert len(pool) == 2

    def test_clear(self, make_result) -> None:
        pool = ResultPool(1)
        pool.offer(make_result(final=-1.0, restricted=0.0))
        pool.offer(make_result(final=-2.0, restricted=0.0))
        pool.clear()
        assert len(pool) == 0
        assert pool.offered == 0
        assert pool.evicted == 0
