import argparse
import math

import numpy as np
from scipy.stats import linregress

from percolation import Percolation

CONFIDENCE_Z = 1.96
PROGRESS_EVERY = 50
SCALING_EXPONENT = -3 / 4

BACKENDS = ("python", "numba")


def _check_positive(name, value):
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise ValueError(f"{name} must be an integer")
    if value <= 0:
        raise ValueError(f"{name} must be a positive integer")
    return int(value)


def run_trial(n: int, rng) -> float:
    """
    Run one trial on a fresh n-by-n grid: keep drawing random sites and open
    the blocked ones until the grid percolates. Draws that land on an open
    site are thrown away.

    Returns the fraction of sites that were open when percolation happened.
    """
    simulator = Percolation(n)
    while not simulator.percolates():
        row = int(rng.integers(1, n + 1))
        col = int(rng.integers(1, n + 1))
        if not simulator.isOpen(row, col):
            simulator.open(row, col)

    return simulator.numberOfOpenSites() / (n * n)


class PercolationStats:
    """
    Monte Carlo estimate of the site percolation threshold on an n-by-n grid.

    All trials are run in the constructor; the per-trial thresholds are kept
    in 'thresholds' and never change afterwards.

    :param n: grid size
    :param trials: number of independent trials
    :param rng: source of random integers with an ``integers(lo, hi)`` method,
        defaults to ``np.random.default_rng(seed)``
    :param seed: seed for the default generator (ignored when rng is given)
    :param backend: "python" runs trials through Percolation, "numba" runs the
        compiled kernel in percolation_numba
    :param verbose: print progress every PROGRESS_EVERY trials
    """

    def __init__(self, n: int, trials: int, rng=None, seed=None, backend: str = "python", verbose: bool = False):
        self.gridSize = _check_positive("grid size n", n)
        self.trialCount = _check_positive("trials count", trials)

        if backend not in BACKENDS:
            raise ValueError(f"unknown backend {backend!r}, expected one of {BACKENDS}")
        if backend == "numba" and rng is not None:
            raise ValueError("the numba backend draws from its own generator, use seed instead of rng")
        self.backend = backend

        if backend == "numba":
            results = self._run_numba(seed, verbose)
        else:
            if rng is None:
                rng = np.random.default_rng(seed)
            results = self._run_python(rng, verbose)

        self._thresholds = np.asarray(results, dtype=np.float64)
        self._thresholds.setflags(write=False)

    def _run_python(self, rng, verbose):
        results = []
        for t in range(self.trialCount):
            results.append(run_trial(self.gridSize, rng))
            if verbose and (t + 1) % PROGRESS_EVERY == 0:
                print(f"  Progress: {t+1}/{self.trialCount} trials")
        return results

    def _run_numba(self, seed, verbose):
        # numba is only imported and compiled when this backend is asked for
        import percolation_numba

        if seed is not None:
            percolation_numba.seed(seed)
        if verbose:
            print(f"  Running {self.trialCount} compiled trials for n = {self.gridSize}...")
        return percolation_numba.run_trials(self.gridSize, self.trialCount)

    @property
    def thresholds(self) -> np.ndarray:
        return self._thresholds

    # sample mean of percolation threshold
    def mean(self) -> float:
        return float(np.mean(self._thresholds))

    # sample standard deviation of percolation threshold, nan for a single trial
    def stddev(self) -> float:
        if self.trialCount < 2:
            return float("nan")
        return float(np.std(self._thresholds, ddof=1))

    def confidenceLo(self) -> float:
        return self.mean() - CONFIDENCE_Z * self.stddev() / math.sqrt(self.trialCount)

    def confidenceHi(self) -> float:
        return self.mean() + CONFIDENCE_Z * self.stddev() / math.sqrt(self.trialCount)

    def confidence_interval(self):
        return self.confidenceLo(), self.confidenceHi()

    def report(self):
        print("=" * 60)
        print(f"STATS REPORT (n = {self.gridSize}, trials = {self.trialCount})")
        print("=" * 60)
        print(f"mean                    = {self.mean():.6f}")
        print(f"stddev                  = {self.stddev():.6f}")
        lo, hi = self.confidence_interval()
        print(f"95% confidence interval = [{lo:.6f}, {hi:.6f}]")
        print("=" * 60)


def estimate_percolation_threshold(n: int, trials: int, rng=None) -> float:
    """Mean percolation threshold over 'trials' random n-by-n grids."""
    return PercolationStats(n, trials, rng=rng).mean()


def sweep(sizes, trials: int, rng=None, seed=None, backend: str = "python", verbose: bool = False):
    """Run PercolationStats for every grid size in 'sizes', in order."""
    if backend == "numba" and rng is not None:
        raise ValueError("the numba backend draws from its own generator, use seed instead of rng")

    if backend == "python" and rng is None:
        rng = np.random.default_rng(seed)
    elif backend == "numba" and seed is not None:
        # seed once so each size continues the same stream
        import percolation_numba
        percolation_numba.seed(seed)

    results = []
    for n_value in sizes:
        if verbose:
            print(f"simulate n = {n_value}")
        results.append(PercolationStats(int(n_value), trials, rng=rng, backend=backend, verbose=verbose))
    return results


def extrapolate_threshold(sizes, means, exponent: float = SCALING_EXPONENT):
    """
    Finite-size scaling fit: regress mean threshold on L**exponent and read
    the threshold of an infinite lattice off the intercept.

    :return: (pc_inf, r_squared)
    """
    sizes = np.asarray(sizes, dtype=float)
    means = np.asarray(means, dtype=float)
    if sizes.shape != means.shape:
        raise ValueError("sizes and means must have the same length")
    if len(np.unique(sizes)) < 2:
        raise ValueError("need at least two distinct grid sizes to extrapolate")

    fit = linregress(sizes ** exponent, means)
    return float(fit.intercept), float(fit.rvalue ** 2)


def positive_int(text):
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{text!r} is not an integer")
    if value <= 0:
        raise argparse.ArgumentTypeError(f"{text!r} must be a positive integer")
    return value


def build_parser():
    parser = argparse.ArgumentParser(
        prog="percolation-stats",
        description="Estimate the site percolation threshold of an n-by-n grid by Monte Carlo simulation."
    )
    parser.add_argument('n', type=positive_int, help="Size of the square grid (n x n).")
    parser.add_argument('trials', type=positive_int, help="The number of Monte Carlo trials to perform.")
    parser.add_argument('--seed', type=int, default=None, help="Seed for the random generator.")
    parser.add_argument('--backend', choices=BACKENDS, default="python",
                        help="Run trials in pure python or with the compiled numba kernel.")
    parser.add_argument('--Lmax', type=positive_int, default=None,
                        help="Sweep grid sizes from n up to Lmax and extrapolate the threshold.")
    parser.add_argument('--Lstep', type=positive_int, default=10, help="Step size for the sweep.")
    parser.add_argument('--verbose', action='store_true', help="Print progress while running.")
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.Lmax is None:
        stats = PercolationStats(args.n, args.trials, seed=args.seed, backend=args.backend, verbose=args.verbose)
        print(f"mean                    = {stats.mean()}")
        print(f"stddev                  = {stats.stddev()}")
        print(f"95% confidence interval = [{stats.confidenceLo()}, {stats.confidenceHi()}]")
        return 0

    if args.Lmax < args.n:
        parser.error("--Lmax must not be smaller than n")

    sizes = list(range(args.n, args.Lmax + 1, args.Lstep))
    print("Starting Monte Carlo Percolation Analysis...")
    print(f"System sizes (n): {args.n} to {args.Lmax}, step {args.Lstep}")
    print(f"Trials per size: {args.trials}")

    results = sweep(sizes, args.trials, seed=args.seed, backend=args.backend, verbose=args.verbose)
    for stats in results:
        stats.report()

    if len(sizes) < 2:
        print("Only one grid size in the sweep, skipping extrapolation.")
        return 0

    pc_inf, r2 = extrapolate_threshold(sizes, [stats.mean() for stats in results])
    print(f"\n--- Extrapolation Results (exponent {SCALING_EXPONENT:.2f}) ---")
    print(f"pc(infinity) = {pc_inf:.6f}, R^2 = {r2:.4f}")
    print("-------------------------------------------------------")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
