import numpy as np
import pytest

import percolation_numba
from percolation_stats import PercolationStats


def test_find_and_union():
    parent = np.arange(6)
    size = np.ones(6, dtype=np.int64)
    percolation_numba.union(parent, size, 0, 1)
    percolation_numba.union(parent, size, 2, 3)
    assert percolation_numba.find(parent, 0) == percolation_numba.find(parent, 1)
    assert percolation_numba.find(parent, 1) != percolation_numba.find(parent, 2)
    percolation_numba.union(parent, size, 1, 3)
    assert percolation_numba.find(parent, 0) == percolation_numba.find(parent, 2)
    assert percolation_numba.find(parent, 4) == 4


def test_single_site_trial():
    assert percolation_numba.percolation_trial(1) == 1.0


def test_seeded_trials_are_reproducible():
    percolation_numba.seed(123)
    first = percolation_numba.run_trials(10, 10)
    percolation_numba.seed(123)
    second = percolation_numba.run_trials(10, 10)
    np.testing.assert_array_equal(first, second)


def test_trial_values_in_range():
    percolation_numba.seed(7)
    n = 8
    results = percolation_numba.run_trials(n, 50)
    assert results.shape == (50,)
    assert np.all(results >= 1 / n)
    assert np.all(results <= 1.0)


def test_numba_backend_mean_near_known_threshold():
    stats = PercolationStats(20, 200, seed=2024, backend="numba")
    assert 0.55 <= stats.mean() <= 0.62
    assert stats.stddev() > 0
    assert stats.confidenceLo() < stats.mean() < stats.confidenceHi()
