class DomainError(ValueError):
    """Inputs are well-formed but inconsistent (bounds, lengths, lag range)."""


class ShapeMismatchError(DomainError):
    """Histograms with different bin counts cannot be merged."""


class InvalidArgumentError(ValueError):
    """A count-like argument (bins, shift step, sample number) is not positive."""
