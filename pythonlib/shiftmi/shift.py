from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Tuple

import numpy as np
from tqdm import tqdm

from .errors import DomainError, InvalidArgumentError
from .hist2d import Hist2D
from .indices import calculate_indices_1d

BAR_FORMAT = (
    "{l_bar}{bar}| "
    "{n_fmt}/{total_fmt} • "
    "{elapsed}<{remaining} • "
    "{rate_fmt}"
)


def check_shift_args(
    size_x, size_y, shift_from, shift_to, bins_x, bins_y,
    min_x, max_x, min_y, max_y, shift_step,
):
    if size_x != size_y:
        raise DomainError("x and y must have the same size.")
    if shift_from >= shift_to:
        raise DomainError("shift_from has to be smaller than shift_to.")
    if not min_x < max_x:
        raise DomainError("minX has to be smaller than maxX.")
    if not min_y < max_y:
        raise DomainError("minY has to be smaller than maxY.")
    if bins_x < 1:
        raise InvalidArgumentError("There must be at least one binX.")
    if bins_y < 1:
        raise InvalidArgumentError("There must be at least one binY.")
    if abs(shift_to) >= size_x:
        raise DomainError("Maximum shift does not fit data size.")
    if abs(shift_from) >= size_x:
        raise DomainError("Minimum shift does not fit data size.")
    if shift_step < 1:
        raise InvalidArgumentError("shift_step must be greater or equal 1.")


def lag_range(shift_from: int, shift_to: int, shift_step: int = 1) -> range:
    """Lags visited by a sweep; ``shift_to`` itself is excluded."""
    return range(shift_from, shift_to, shift_step)


def shifted_views(ix: np.ndarray, iy: np.ndarray, shift: int) -> Tuple[np.ndarray, np.ndarray]:
    """
    Overlapping parts of two index arrays at lag ``shift``, as views.

    For a positive shift x is advanced: x[s:] pairs with y[:-s].
    For a negative shift y is advanced: x[:-|s|] pairs with y[|s|:].
    """
    if shift > 0:
        return ix[shift:], iy[:-shift]
    if shift < 0:
        return ix[:shift], iy[-shift:]
    return ix, iy


def run_sweep(
    task: Callable[[int], float],
    shifts: range,
    max_workers=None,
    show_progressbar=False,
    desc="Shifting",
) -> np.ndarray:
    """
    Evaluate ``task`` for every lag on a thread pool.

    Every lag writes only its own slot, so the output order is the lag order
    no matter which worker finishes first.
    """
    result = np.zeros(len(shifts), dtype=np.float64)

    def one(slot_and_shift):
        slot, s = slot_and_shift
        result[slot] = task(s)

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        list(
            tqdm(
                executor.map(one, enumerate(shifts)),
                total=len(shifts),
                desc=desc,
                colour="cyan",
                bar_format=BAR_FORMAT,
                dynamic_ncols=True,
                smoothing=0.1,
                disable=not show_progressbar,
            )
        )
    return result


def shifted_mutual_information(
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
    shift_step: int = 1,
    max_workers=None,
    show_progressbar=False,
) -> np.ndarray:
    """
    Mutual information of ``x`` against ``y`` for every lag in
    ``range(shift_from, shift_to, shift_step)``.

    Both series are binned once; every lag then histograms the overlapping
    parts of the index arrays.

    Returns
    -------
    np.ndarray
        float64 MI values (nats), entry ``k`` belongs to lag
        ``shift_from + k * shift_step``.
    """
    x = np.asarray(x)
    y = np.asarray(y)
    check_shift_args(
        len(x), len(y), shift_from, shift_to, bins_x, bins_y,
        min_x, max_x, min_y, max_y, shift_step,
    )
    ix = calculate_indices_1d(bins_x, min_x, max_x, x)
    iy = calculate_indices_1d(bins_y, min_y, max_y, y)

    def mi_at(s):
        hist = Hist2D(bins_x, bins_y, min_x, max_x, min_y, max_y)
        hist.fill_binned(*shifted_views(ix, iy, s))
        return hist.mutual_information()

    return run_sweep(
        mi_at,
        lag_range(shift_from, shift_to, shift_step),
        max_workers=max_workers,
        show_progressbar=show_progressbar,
    )


def data_bounds(values, axis=""):
    v = np.asarray(values, dtype=np.float64)
    if v.size == 0 or np.isnan(v).all():
        raise DomainError(f"Cannot take bounds{axis} of an empty series.")
    # NaN samples are ignored, they fall outside every bin anyway
    vmin, vmax = float(np.nanmin(v)), float(np.nanmax(v))
    if not vmin < vmax:
        raise DomainError(f"Series{axis} is constant, min has to be smaller than max.")
    return vmin, vmax


def shifted_mutual_information_easy(
    x,
    y,
    shift_range: Tuple[int, int] = (-500, 500),
    bins: Tuple[int, int] = (10, 10),
    shift_step: int = 1,
    **kwargs,
) -> np.ndarray:
    """Shifted MI with bounds taken from the min/max of each series."""
    min_x, max_x = data_bounds(x, "X")
    min_y, max_y = data_bounds(y, "Y")
    return shifted_mutual_information(
        shift_range[0], shift_range[1], bins[0], bins[1],
        min_x, max_x, min_y, max_y, x, y,
        shift_step=shift_step, **kwargs,
    )
