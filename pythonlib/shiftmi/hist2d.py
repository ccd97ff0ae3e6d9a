import numpy as np

from .errors import DomainError, ShapeMismatchError
from .hist1d import Hist1D, shannon_entropy
from .indices import calculate_indices_2d, check_axis


class Hist2D:
    """
    Joint histogram of two uniformly binned axes with mutual information.

    Parameters
    ----------
    bins_x, bins_y : int
        Number of bins per axis, at least 1.
    min_x, max_x, min_y, max_y : number
        Axis bounds, ``min < max`` on both axes. Values outside the closed
        ranges are ignored at insertion.

    Notes
    -----
    The marginals from ``reduce1d`` and the value of ``mutual_information``
    are computed on first use and cached. Filling afterwards does not
    invalidate them; pass ``force=True`` to recompute.
    """

    def __init__(self, bins_x, bins_y, min_x, max_x, min_y, max_y):
        check_axis(bins_x, min_x, max_x, "X")
        check_axis(bins_y, min_y, max_y, "Y")
        self.nx = int(bins_x)
        self.ny = int(bins_y)
        self.min_x, self.max_x = min_x, max_x
        self.min_y, self.max_y = min_y, max_y
        self.H = np.zeros((self.nx, self.ny), dtype=np.int64)
        self.count = 0
        self._hist1d = None
        self._mutual_information = None

    # ---------- filling ----------
    def _accumulate(self, bx, by):
        ok = (bx >= 0) & (bx < self.nx) & (by >= 0) & (by < self.ny)
        if not ok.any():
            return
        flat = bx[ok] * self.ny + by[ok]
        add = np.bincount(flat, minlength=self.nx * self.ny)
        self.H += add.reshape(self.nx, self.ny)
        self.count += int(ok.sum())

    def fill(self, x, y):
        """
        Fill with raw (x, y) values, scalars or arrays of equal length.
        Pairs with a coordinate outside its closed range are dropped.
        """
        pairs = calculate_indices_2d(
            self.nx, self.ny, self.min_x, self.max_x, self.min_y, self.max_y, x, y
        )
        self._accumulate(pairs[:, 0], pairs[:, 1])

    def fill_pairs(self, pairs):
        """
        Fill with precomputed index pairs, shape (N, 2).
        """
        p = np.asarray(pairs, dtype=np.int64).reshape(-1, 2)
        self._accumulate(p[:, 0], p[:, 1])

    def fill_binned(self, bx, by):
        """
        Fill with precomputed per-axis bin indices of equal length.
        """
        bx = np.asarray(bx, dtype=np.int64)
        by = np.asarray(by, dtype=np.int64)
        if bx.shape != by.shape:
            raise DomainError("Index sequences must have the same size.")
        self._accumulate(bx.ravel(), by.ravel())

    def increment_at(self, ix, iy):
        if 0 <= ix < self.nx and 0 <= iy < self.ny:
            self.H[ix, iy] += 1
            self.count += 1

    # ---------- arithmetic ----------
    def _check_compat(self, other):
        if not isinstance(other, Hist2D):
            raise TypeError("Can only combine Hist2D with Hist2D.")
        if (self.nx, self.ny) != (other.nx, other.ny):
            raise ShapeMismatchError(
                f"Histogram bin counts differ: {(self.nx, self.ny)} vs {(other.nx, other.ny)}"
            )

    def merge_(self, other):
        """In-place cell-wise sum. Only the bin counts have to agree, not the bounds."""
        self._check_compat(other)
        self.H += other.H
        self.count += other.count
        return self

    def __iadd__(self, other):
        if not isinstance(other, Hist2D):
            return NotImplemented
        return self.merge_(other)

    def __add__(self, other):
        if not isinstance(other, Hist2D):
            return NotImplemented
        self._check_compat(other)
        return self.copy().merge_(other)

    def __radd__(self, other):
        # supports sum(list_of_hists)
        if other == 0:
            return self.copy()
        return NotImplemented

    def copy(self):
        """Copy of shape, bounds and counts; cached results are not carried over."""
        out = Hist2D(self.nx, self.ny, self.min_x, self.max_x, self.min_y, self.max_y)
        out.H = self.H.copy()
        out.count = self.count
        return out

    # ---------- derived quantities ----------
    def reduce1d(self, force=False):
        """
        Marginal histograms (x: row sums, y: column sums).

        Returns
        -------
        (Hist1D, Hist1D)
            Read-only marginals, built once and cached unless ``force``.
        """
        if self._hist1d is None or force:
            hx = Hist1D(self.nx, self.min_x, self.max_x, counts=self.H.sum(axis=1))
            hy = Hist1D(self.ny, self.min_y, self.max_y, counts=self.H.sum(axis=0))
            hx.H.flags.writeable = False
            hy.H.flags.writeable = False
            self._hist1d = (hx, hy)
        return self._hist1d

    def joint_entropy(self):
        return shannon_entropy(self.H)

    def mutual_information(self, force=False):
        """
        I(X;Y) = H(X) + H(Y) - H(X,Y) in nats, 0 for an empty histogram.
        Cached after the first call unless ``force``.
        """
        if self._mutual_information is None or force:
            if self.count == 0:
                self._mutual_information = 0.0
            else:
                hx, hy = self.reduce1d(force=force)
                mi = hx.entropy() + hy.entropy() - self.joint_entropy()
                # rounding can leave a tiny negative value for independent data
                self._mutual_information = max(mi, 0.0)
        return self._mutual_information

    def bin_edges(self):
        return (
            np.linspace(self.min_x, self.max_x, self.nx + 1),
            np.linspace(self.min_y, self.max_y, self.ny + 1),
        )

    def __repr__(self):
        return f"Hist2D(nbins=({self.nx}, {self.ny}), count={self.count})"


def make_histogram2d(bins_x, bins_y, min_x, max_x, min_y, max_y):
    return Hist2D(bins_x, bins_y, min_x, max_x, min_y, max_y)
