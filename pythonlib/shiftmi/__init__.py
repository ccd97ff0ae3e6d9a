from .errors import DomainError, InvalidArgumentError, ShapeMismatchError
from .indices import (
    OUT_OF_RANGE,
    calculate_index,
    calculate_indices_1d,
    calculate_indices_2d,
)
from .hist1d import Hist1D, shannon_entropy
from .hist2d import Hist2D, make_histogram2d
from .shift import (
    data_bounds,
    lag_range,
    shifted_mutual_information,
    shifted_mutual_information_easy,
)
from .bootstrap import (
    bootstrapped_mutual_information,
    shifted_mutual_information_with_bootstrap,
)
from .config import default_cfg, load_config

__all__ = [name for name in dir() if not name.startswith("_")]
