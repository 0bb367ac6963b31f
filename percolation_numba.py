import numpy as np
from numba import njit


# weighted quick union with path compression over plain arrays
@njit(cache=True)
def find(parent, x):
    root = x
    while parent[root] != root:
        root = parent[root]
    while x != root:
        next_x = parent[x]
        parent[x] = root
        x = next_x
    return root


@njit(cache=True)
def union(parent, size, a, b):
    ra = find(parent, a)
    rb = find(parent, b)
    if ra == rb:
        return
    if size[ra] < size[rb]:
        parent[ra] = rb
        size[rb] += size[ra]
    else:
        parent[rb] = ra
        size[ra] += size[rb]


@njit(cache=True)
def seed(value):
    """Seed the generator used inside compiled functions."""
    np.random.seed(value)


@njit(cache=True)
def percolation_trial(n):
    """
    Open uniformly random blocked sites of an n-by-n grid until top and bottom
    connect. Returns the fraction of sites open at that moment.
    """
    total = n * n
    top = 0
    bottom = total + 1

    parent = np.arange(total + 2)
    size = np.ones(total + 2, dtype=np.int64)
    open_flags = np.zeros(total + 2, dtype=np.uint8)
    opened = 0

    while find(parent, top) != find(parent, bottom):
        row = np.random.randint(1, n + 1)
        col = np.random.randint(1, n + 1)
        site = (row - 1) * n + col
        if open_flags[site]:
            continue

        open_flags[site] = 1
        opened += 1

        if row == 1:
            union(parent, size, site, top)
        if row == n:
            union(parent, size, site, bottom)
        if row > 1 and open_flags[site - n]:
            union(parent, size, site, site - n)
        if row < n and open_flags[site + n]:
            union(parent, size, site, site + n)
        if col > 1 and open_flags[site - 1]:
            union(parent, size, site, site - 1)
        if col < n and open_flags[site + 1]:
            union(parent, size, site, site + 1)

    return opened / total


@njit(cache=True)
def run_trials(n, trials):
    results = np.empty(trials, dtype=np.float64)
    for t in range(trials):
        results[t] = percolation_trial(n)
    return results
