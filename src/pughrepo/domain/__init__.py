"""Matrix domain vocabulary: entities, scales, projected state."""

from pughrepo.domain.state import (
    Criterion,
    DomainState,
    ScoreEntry,
    Tool,
    get_effective_scale,
)
from pughrepo.domain.values import (
    DEFAULT_MATRIX_CONFIG,
    DEFAULT_SCALE,
    SCALE_NEG2_POS2,
    BinaryScale,
    MatrixConfig,
    NumericScale,
    ScaleType,
    UnboundedScale,
    scale_label,
)

__all__ = [
    "BinaryScale",
    "Criterion",
    "DEFAULT_MATRIX_CONFIG",
    "DEFAULT_SCALE",
    "DomainState",
    "MatrixConfig",
    "NumericScale",
    "SCALE_NEG2_POS2",
    "ScaleType",
    "ScoreEntry",
    "Tool",
    "UnboundedScale",
    "get_effective_scale",
    "scale_label",
]
