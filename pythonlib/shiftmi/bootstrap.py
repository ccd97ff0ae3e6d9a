from __future__ import annotations

import sys

import numpy as np

from .errors import DomainError, InvalidArgumentError
from .hist2d import Hist2D
from .indices import calculate_indices_1d, check_axis
from .shift import check_shift_args, lag_range, run_sweep, shifted_views


def _check_samples(nr_samples):
    if nr_samples < 1:
        raise InvalidArgumentError("nr_samples must be greater or equal 1.")


def _warn_remainder(sizes, nr_samples):
    dropped = [n % nr_samples for n in sizes]
    if any(d for d in dropped):
        print(
            f"[WARN] bootstrap: data length not divisible by nr_samples={nr_samples}, "
            f"up to {max(dropped)} value pairs per histogram are left out",
            file=sys.stderr,
        )


def bootstrap_histogram(
    ix, iy, bins_x, bins_y, min_x, max_x, min_y, max_y, nr_samples, rng
) -> Hist2D:
    """
    Two-stage bootstrap on per-axis bin indices.

    ``nr_samples`` histograms are each filled from ``len(ix) // nr_samples``
    positions drawn with replacement. The returned histogram merges
    ``nr_samples`` of those, again drawn with replacement.
    """
    size = len(ix)
    per_histogram = size // nr_samples

    ensemble = []
    for _ in range(nr_samples):
        hist = Hist2D(bins_x, bins_y, min_x, max_x, min_y, max_y)
        if per_histogram:
            ridx = rng.integers(0, size, size=per_histogram)
            hist.fill_binned(ix[ridx], iy[ridx])
        ensemble.append(hist)

    final = Hist2D(bins_x, bins_y, min_x, max_x, min_y, max_y)
    for sample in rng.integers(0, nr_samples, size=nr_samples):
        final.merge_(ensemble[sample])
    return final


def bootstrapped_mutual_information(
    x,
    y,
    bins_x: int,
    bins_y: int,
    min_x,
    max_x,
    min_y,
    max_y,
    nr_samples: int,
    seed=None,
) -> float:
    """
    Bootstrap estimate of the mutual information of raw series ``x`` and ``y``.

    ``seed`` is anything ``np.random.default_rng`` accepts; ``None`` draws
    fresh entropy from the OS on every call.
    """
    x = np.asarray(x)
    y = np.asarray(y)
    check_axis(bins_x, min_x, max_x, "X")
    check_axis(bins_y, min_y, max_y, "Y")
    if len(x) != len(y):
        raise DomainError("x and y must have the same size.")
    _check_samples(nr_samples)
    _warn_remainder([len(x)], nr_samples)

    ix = calculate_indices_1d(bins_x, min_x, max_x, x)
    iy = calculate_indices_1d(bins_y, min_y, max_y, y)
    rng = np.random.default_rng(seed)
    hist = bootstrap_histogram(
        ix, iy, bins_x, bins_y, min_x, max_x, min_y, max_y, nr_samples, rng
    )
    return hist.mutual_information()


def shifted_mutual_information_with_bootstrap(
    shift_from: int,
    shift_to: int,
    bins_x: int,
    bins_y: int,
    min_x,
    max_x,
    min_y,
    max_y,
    x,
    y,
    nr_samples: int,
    shift_step: int = 1,
    seed=None,
    max_workers=None,
    show_progressbar=False,
) -> np.ndarray:
    """
    Like ``shifted_mutual_information`` but every lag reports a bootstrap
    estimate.

    Each lag gets its own generator spawned from ``seed``, so an integer
    seed gives the same profile for any ``max_workers``.
    """
    x = np.asarray(x)
    y = np.asarray(y)
    check_shift_args(
        len(x), len(y), shift_from, shift_to, bins_x, bins_y,
        min_x, max_x, min_y, max_y, shift_step,
    )
    _check_samples(nr_samples)

    shifts = lag_range(shift_from, shift_to, shift_step)
    _warn_remainder([len(x) - abs(s) for s in shifts], nr_samples)

    ix = calculate_indices_1d(bins_x, min_x, max_x, x)
    iy = calculate_indices_1d(bins_y, min_y, max_y, y)

    if isinstance(seed, np.random.SeedSequence):
        root = seed
    elif isinstance(seed, np.random.Generator):
        root = np.random.SeedSequence(int(seed.integers(2**63)))
    else:
        root = np.random.SeedSequence(seed)
    streams = {s: child for s, child in zip(shifts, root.spawn(len(shifts)))}

    def mi_at(s):
        rng = np.random.default_rng(streams[s])
        bx, by = shifted_views(ix, iy, s)
        hist = bootstrap_histogram(
            bx, by, bins_x, bins_y, min_x, max_x, min_y, max_y, nr_samples, rng
        )
        return hist.mutual_information()

    return run_sweep(
        mi_at,
        shifts,
        max_workers=max_workers,
        show_progressbar=show_progressbar,
        desc="Bootstrapping",
    )
