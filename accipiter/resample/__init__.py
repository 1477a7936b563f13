"""### Resampling filters, weight tables and resizing. ###"""

from .filters import (
    ResampleFilter,
    Filter,
    get_filter,
    list_filters,
    gaussian_filter,
    NEAREST_NEIGHBOR,
    BOX,
    LINEAR,
    HERMITE,
    BSPLINE,
    MITCHELL_NETRAVALI,
    CATMULL_ROM,
    GAUSSIAN,
    LANCZOS,
    HANN,
    HAMMING,
    BLACKMAN,
    BARTLETT,
    WELCH,
    COSINE,
)

from .weights import (
    WeightEntry,
    WeightTable,
    build_weight_table,
)

from .resize import (
    Anchor,
    resize,
    fit,
    fill,
    thumbnail,
    crop_anchor,
)

__all__ = [
    "ResampleFilter",
    "Filter",
    "get_filter",
    "list_filters",
    "gaussian_filter",
    "NEAREST_NEIGHBOR",
    "BOX",
    "LINEAR",
    "HERMITE",
    "BSPLINE",
    "MITCHELL_NETRAVALI",
    "CATMULL_ROM",
    "GAUSSIAN",
    "LANCZOS",
    "HANN",
    "HAMMING",
    "BLACKMAN",
    "BARTLETT",
    "WELCH",
    "COSINE",
    "WeightEntry",
    "WeightTable",
    "build_weight_table",
    "Anchor",
    "resize",
    "fit",
    "fill",
    "thumbnail",
    "crop_anchor",
]
