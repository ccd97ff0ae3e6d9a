import numpy as np

from .errors import DomainError, InvalidArgumentError

# marks a value (or a pair) outside the histogram range
OUT_OF_RANGE = np.iinfo(np.int64).max


def check_axis(bins, vmin, vmax, axis=""):
    if not vmin < vmax:
        raise DomainError(f"min{axis} has to be smaller than max{axis}.")
    if bins < 1:
        raise InvalidArgumentError(f"There must be at least one bin{axis}.")


def _raw_index(bins, vmin, vmax, values):
    normalized = (values - vmin) / (vmax - vmin)
    idx = np.floor(normalized * bins).astype(np.int64)
    # rounding just below vmax must not spill into a bin that does not exist
    return np.minimum(idx, bins - 1)


def calculate_index(bins, vmin, vmax, value):
    """
    Bin index of a single value.

    Bins are half-open [lo, hi) except the topmost one, which also takes
    ``vmax`` itself. Values outside [vmin, vmax] give ``OUT_OF_RANGE``.
    """
    check_axis(bins, vmin, vmax)
    return int(calculate_indices_1d(bins, vmin, vmax, np.asarray([value]))[0])


def calculate_indices_1d(bins, vmin, vmax, values):
    """
    Map raw values of one axis to bin indices.

    Parameters
    ----------
    bins : int
        Number of uniform bins between ``vmin`` and ``vmax``.
    vmin, vmax : number
        Axis bounds, ``vmin < vmax``.
    values : array_like
        Raw values, any real dtype.

    Returns
    -------
    np.ndarray
        int64 indices, same length and order as ``values``. Values outside
        [vmin, vmax] are set to ``OUT_OF_RANGE``.
    """
    check_axis(bins, vmin, vmax)
    v = np.asarray(values, dtype=np.float64)
    if v.ndim == 0:
        v = v[None]

    out = np.full(v.shape, OUT_OF_RANGE, dtype=np.int64)
    inside = (v >= vmin) & (v < vmax)
    out[inside] = _raw_index(bins, vmin, vmax, v[inside])
    out[v == vmax] = bins - 1
    return out


def calculate_indices_2d(bins_x, bins_y, min_x, max_x, min_y, max_y, x, y):
    """
    Map paired raw values to (ix, iy) index pairs.

    A pair is kept only if both coordinates lie in their closed range
    [min, max]; otherwise both of its indices are ``OUT_OF_RANGE``.
    Returns an int64 array of shape (N, 2).
    """
    check_axis(bins_x, min_x, max_x, "X")
    check_axis(bins_y, min_y, max_y, "Y")
    x = np.asarray(x, dtype=np.float64).ravel()
    y = np.asarray(y, dtype=np.float64).ravel()
    if x.size != y.size:
        raise DomainError("x and y must have the same size.")

    out = np.full((x.size, 2), OUT_OF_RANGE, dtype=np.int64)
    ok = (x >= min_x) & (x <= max_x) & (y >= min_y) & (y <= max_y)
    out[ok, 0] = _raw_index(bins_x, min_x, max_x, x[ok])
    out[ok, 1] = _raw_index(bins_y, min_y, max_y, y[ok])
    return out
