"""
Тесты параллельного шага назначения и редукции.
"""

from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest
from pkmeans.core.reducer import (
    Accumulator,
    ParallelAssignmentReducer,
    assign_chunks,
    make_chunks,
)
from pkmeans.exceptions import ConfigurationError


@pytest.fixture
def pool():
    executor = ThreadPoolExecutor(max_workers=3)
    yield executor
    executor.shutdown(wait=True)


class TestChunking:
    """Тесты разбиения индексов и статического расписания."""

    def test_make_chunks_covers_all_indices_once(self):
        chunks = make_chunks(1234, 500)

        assert [(c.start, c.stop) for c in chunks] == [(0, 500), (500, 1000), (1000, 1234)]

    def test_make_chunks_rejects_non_positive(self):
        with pytest.raises(ConfigurationError):
            make_chunks(10, 0)

    def test_assign_chunks_round_robin(self):
        chunks = make_chunks(10, 2)  # 5 чанков
        schedule = assign_chunks(chunks, 2)

        assert [c.start for c in schedule[0]] == [0, 4, 8]
        assert [c.start for c in schedule[1]] == [2, 6]

    def test_more_workers_than_chunks(self):
        schedule = assign_chunks(make_chunks(3, 500), 4)

        assert len(schedule) == 4
        assert sum(len(s) for s in schedule) == 1


class TestAccumulator:
    """Тесты аккумулятора сумм и счётчиков."""

    def test_add_block_and_reset(self):
        acc = Accumulator(3, 2)
        points = np.array([[1.0, 2.0], [3.0, 4.0], [5.0, 6.0]])
        acc.add_block(points, np.array([0, 2, 0]))

        np.testing.assert_allclose(acc.sums, [[6.0, 8.0], [0.0, 0.0], [3.0, 4.0]])
        np.testing.assert_array_equal(acc.counts, [2, 0, 1])

        acc.reset()
        assert not acc.sums.any()
        assert not acc.counts.any()

    def test_keeps_dtype(self):
        acc = Accumulator(2, 2, np.float32)
        assert acc.sums.dtype == np.float32


class TestParallelAssignmentReducer:
    """Тесты одного шага назначения + слияния."""

    def test_run_assigns_and_merges(self, pool, four_points):
        reducer = ParallelAssignmentReducer(
            four_points, n_clusters=2, n_workers=3, chunk_size=1, executor=pool
        )
        centroids = np.array([[0.0, 0.0], [10.0, 10.0]])
        membership = np.full(4, -1, dtype=np.int32)

        result = reducer.run(centroids, membership)

        np.testing.assert_array_equal(membership, [0, 0, 1, 1])
        np.testing.assert_array_equal(result.accumulator.counts, [2, 2])
        np.testing.assert_allclose(result.accumulator.sums, [[1.0, 0.0], [21.0, 20.0]])
        assert result.changed == 4
        assert result.delta == 1.0

    def test_counts_only_changed_points(self, pool, four_points):
        reducer = ParallelAssignmentReducer(
            four_points, n_clusters=2, n_workers=2, chunk_size=2, executor=pool
        )
        centroids = np.array([[0.0, 0.0], [10.0, 10.0]])
        membership = np.array([0, 1, 1, 1], dtype=np.int32)

        result = reducer.run(centroids, membership)

        assert result.changed == 1
        assert result.delta == pytest.approx(0.25)

    def test_worker_accumulators_cleared_after_merge(self, pool, medium_dataset):
        reducer = ParallelAssignmentReducer(
            medium_dataset, n_clusters=3, n_workers=3, chunk_size=500, executor=pool
        )
        membership = np.full(len(medium_dataset), -1, dtype=np.int32)

        result = reducer.run(medium_dataset[:3].copy(), membership)

        assert result.accumulator.counts.sum() == len(medium_dataset)
        for acc in reducer.local_accumulators:
            assert not acc.sums.any()
            assert not acc.counts.any()

    def test_centroids_not_modified(self, pool, medium_dataset):
        reducer = ParallelAssignmentReducer(
            medium_dataset, n_clusters=3, n_workers=2, chunk_size=100, executor=pool
        )
        centroids = medium_dataset[:3].copy()
        before = centroids.copy()
        membership = np.full(len(medium_dataset), -1, dtype=np.int32)

        reducer.run(centroids, membership)

        np.testing.assert_array_equal(centroids, before)
        assert centroids.flags.writeable

    def test_matches_single_worker(self, pool, medium_dataset):
        centroids = medium_dataset[:3].copy()

        single = ThreadPoolExecutor(max_workers=1)
        try:
            ref = ParallelAssignmentReducer(
                medium_dataset, n_clusters=3, n_workers=1, chunk_size=500, executor=single
            )
            ref_membership = np.full(len(medium_dataset), -1, dtype=np.int32)
            ref_result = ref.run(centroids, ref_membership)
            ref_sums = ref_result.accumulator.sums.copy()
            ref_counts = ref_result.accumulator.counts.copy()
        finally:
            single.shutdown(wait=True)

        par = ParallelAssignmentReducer(
            medium_dataset, n_clusters=3, n_workers=3, chunk_size=128, executor=pool
        )
        par_membership = np.full(len(medium_dataset), -1, dtype=np.int32)
        par_result = par.run(centroids, par_membership)

        np.testing.assert_array_equal(par_membership, ref_membership)
        np.testing.assert_array_equal(par_result.accumulator.counts, ref_counts)
        np.testing.assert_allclose(par_result.accumulator.sums, ref_sums, rtol=1e-12, atol=1e-9)

    def test_worker_error_propagates(self, pool, four_points):
        reducer = ParallelAssignmentReducer(
            four_points, n_clusters=2, n_workers=2, chunk_size=2, executor=pool
        )
        # Центроиды неверной размерности: ошибка воркера поднимается из run
        bad_centroids = np.zeros((2, 5))
        membership = np.full(4, -1, dtype=np.int32)

        with pytest.raises(ValueError):
            reducer.run(bad_centroids, membership)

        for acc in reducer.local_accumulators:
            assert not acc.counts.any()
