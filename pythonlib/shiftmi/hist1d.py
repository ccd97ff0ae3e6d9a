import numpy as np

from .indices import OUT_OF_RANGE, calculate_indices_1d, check_axis


def shannon_entropy(counts):
    """Shannon entropy (nats) of a count array; empty bins contribute 0."""
    c = np.asarray(counts, dtype=float).ravel()
    total = c.sum()
    if total <= 0:
        return 0.0
    p = c[c > 0] / total
    return float(-np.sum(p * np.log(p)))


class Hist1D:
    def __init__(self, nbins, vmin, vmax, counts=None):
        check_axis(nbins, vmin, vmax)
        self.nbins = int(nbins)
        self.min = vmin
        self.max = vmax
        if counts is None:
            self.H = np.zeros(self.nbins, dtype=np.int64)
        else:
            self.H = np.asarray(counts, dtype=np.int64)
            if self.H.shape != (self.nbins,):
                raise ValueError(
                    f"counts must have shape ({self.nbins},), got {self.H.shape}"
                )

    @classmethod
    def from_values(cls, nbins, vmin, vmax, values):
        out = cls(nbins, vmin, vmax)
        out.fill(values)
        return out

    @property
    def count(self):
        return int(self.H.sum())

    def fill(self, x):
        b = calculate_indices_1d(self.nbins, self.min, self.max, x)
        b = b[b != OUT_OF_RANGE]
        if b.size == 0:
            return
        self.H += np.bincount(b, minlength=self.nbins)

    def merge_(self, other):
        if self.nbins != other.nbins:
            raise ValueError("Histogram bin counts differ.")
        self.H += other.H

    def probabilities(self):
        total = self.count
        if total == 0:
            return np.zeros(self.nbins, dtype=float)
        return self.H / float(total)

    def entropy(self):
        return shannon_entropy(self.H)

    def __repr__(self):
        return f"Hist1D(nbins={self.nbins}, range=[{self.min}, {self.max}], count={self.count})"
