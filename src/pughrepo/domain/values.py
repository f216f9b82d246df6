"""Scale definitions and matrix-wide configuration.

Frozen value types: two scales or configs with equal fields are the same
value. Defined once here, used by the event vocabulary and the projection.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field


class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class NumericScale(_FrozenModel):
    """Bounded numeric range with optional per-value labels."""

    kind: Literal["numeric"] = "numeric"
    min: float
    max: float
    step: float = 1
    labels: dict[int, str] | None = None


class BinaryScale(_FrozenModel):
    """Yes/No scale."""

    kind: Literal["binary"] = "binary"


class UnboundedScale(_FrozenModel):
    """Proportional scale normalised against the largest score."""

    kind: Literal["unbounded"] = "unbounded"


ScaleType = Annotated[
    NumericScale | BinaryScale | UnboundedScale,
    Field(discriminator="kind"),
]


DEFAULT_SCALE = NumericScale(
    min=1,
    max=10,
    step=1,
    labels={
        1: "Poor",
        2: "Below Avg",
        3: "Fair",
        4: "Below Avg+",
        5: "Average",
        6: "Above Avg",
        7: "Good",
        8: "Very Good",
        9: "Excellent",
        10: "Outstanding",
    },
)

SCALE_NEG2_POS2 = NumericScale(
    min=-2,
    max=2,
    step=1,
    labels={
        -2: "Poor",
        -1: "Below Avg",
        0: "Average",
        1: "Good",
        2: "Outstanding",
    },
)


class MatrixConfig(_FrozenModel):
    """Global matrix configuration; always has a value."""

    allow_negative: bool = False
    default_scale: ScaleType = DEFAULT_SCALE


DEFAULT_MATRIX_CONFIG = MatrixConfig()


def scale_label(scale: NumericScale | BinaryScale | UnboundedScale) -> str:
    """Short human description of a scale, e.g. ``Numeric (1 to 10)``."""
    match scale:
        case NumericScale():
            step = (
                f", step {scale.step:g}" if scale.step != 1 else ""
            )
            return f"Numeric ({scale.min:g} to {scale.max:g}{step})"
        case BinaryScale():
            return "Binary (Yes/No)"
        case UnboundedScale():
            return "Unbounded"
