"""
errors.py — Error taxonomy for the CYCLOPS model.

Every validation failure raised by the core is one of the concrete kinds
below. The hierarchy is closed:

    CyclopsError
    ├── ConstructionError      raised while building a model
    │   ├── HypersphereDomainError
    │   ├── InputAndHypersphereDomainError
    │   ├── MultihotDomainError
    │   ├── MultihotMatrixShapeError
    │   ├── MultihotOffsetShapeError
    │   ├── DenseInverseShapeError
    │   └── DenseShapeError
    └── FunctionError          raised while calling a layer or model
        ├── MultihotDimensionMismatch
        ├── InputDimensionMismatch
        ├── HypersphereNaNError
        └── HypersphereDivideError

Operator shape errors (``ShapeMismatchError``,
``DimensionIncompatibilityError``) sit outside the hierarchy, next to
``ValueError``.
"""

from typing import Sequence, Tuple, final


Shape = Tuple[int, ...]


class CyclopsError(Exception):
    """Base class for all CYCLOPS validation errors."""


class ConstructionError(CyclopsError):
    """Raised only while building or validating a ``CyclopsModel``."""


class FunctionError(CyclopsError):
    """Raised only while invoking a layer or a model on data."""


# ======================================================================
# Construction errors
# ======================================================================
@final
class HypersphereDomainError(ConstructionError):
    """Hypersphere dimension ``c`` is below 2."""

    def __init__(self, c: int):
        self.c = c
        super().__init__(f"`c` = {c}, but `c` must be ≥ 2.")


@final
class InputAndHypersphereDomainError(ConstructionError):
    """Input dimension ``n`` does not exceed the hypersphere dimension ``c``."""

    def __init__(self, n: int, c: int):
        self.n = n
        self.c = c
        super().__init__(f"`n` = {n} ≤ `c`, but `n` must be > {c}.")


@final
class MultihotDomainError(ConstructionError):
    """Number of multi-hot groups ``m`` is negative."""

    def __init__(self, m: int):
        self.m = m
        super().__init__(f"`m` = {m} < 0, but `m` must be ≥ 0.")


@final
class MultihotMatrixShapeError(ConstructionError):
    """``scale`` and ``mhoffset`` do not share a shape."""

    def __init__(self, scale_shape: Shape, mhoffset_shape: Shape):
        self.scale_shape = tuple(scale_shape)
        self.mhoffset_shape = tuple(mhoffset_shape)
        super().__init__(
            "scale and mhoffset do not have the same dimensions.\n"
            f"scale has dimensions {self.scale_shape} ≠ "
            f"{self.mhoffset_shape} dimensions of mhoffset."
        )


@final
class MultihotOffsetShapeError(ConstructionError):
    """``offset`` does not fit the column count of ``scale``."""

    def __init__(self, expected: Shape, actual: Shape):
        self.expected = tuple(expected)
        self.actual = tuple(actual)
        super().__init__(
            f"expected dimensions {self.expected}, but got {self.actual}."
        )


@final
class DenseInverseShapeError(ConstructionError):
    """Compression and expansion weights are not transposed shapes."""

    def __init__(self, compress_shape: Shape, expand_shape: Shape):
        self.compress_shape = tuple(compress_shape)
        self.expand_shape = tuple(expand_shape)
        c, n = self.compress_shape
        out_dim, in_dim = self.expand_shape
        super().__init__(
            "dense in and dense out do not have inverse dimensions.\n"
            f"Expected {n} => {c} compression to be mirrored by "
            f"{c} => {n} expansion, but got {in_dim} => {out_dim}."
        )


@final
class DenseShapeError(ConstructionError):
    """
    Compression weight violates ``2 ≤ c < n`` or disagrees with ``scale``.

    Both conditions share one kind; the message marks which part failed
    (``"5 ≠ 6 => 2"`` for a row mismatch, ``"5 => 1 < 2"`` for a small ``c``).
    """

    def __init__(self, weight_shape: Shape, n: int):
        self.weight_shape = tuple(weight_shape)
        self.n = n
        c, in_dim = self.weight_shape
        mismatch = "" if in_dim == n else f"{n} ≠ "
        too_small = " < 2" if c < 2 else ""
        super().__init__(
            "dense compression must satisfy n => c ≥ 2, where n > c, "
            f"but got {mismatch}{in_dim} => {c}{too_small}."
        )


# ======================================================================
# Function errors
# ======================================================================
@final
class MultihotDimensionMismatch(FunctionError):
    """Multi-hot indicator length differs from the number of groups."""

    def __init__(self, h_length: int, m: int):
        self.h_length = h_length
        self.m = m
        super().__init__(
            "Multi-hot encoding `h` and multi-hot parameters do not have "
            "fitting dimensions.\n"
            "Multi-hot encoding must have as many rows as the multi-hot "
            "parameters have columns.\n"
            f"Multi-hot encoding = {h_length} ≠ {m} = Multi-hot Parameters"
        )


@final
class InputDimensionMismatch(FunctionError):
    """Input length differs from the model's input dimension ``n``."""

    def __init__(self, x_length: int, n: int):
        self.x_length = x_length
        self.n = n
        super().__init__(
            "Input `x` and multi-hot parameters do not have the same "
            "number of rows.\n"
            f"Input = {x_length} ≠ {n} = Multi-hot Parameters"
        )


@final
class HypersphereNaNError(FunctionError):
    """
    Hypersphere input contains ``NaN``.

    ``indices`` holds 0-based positions; the message counts from 1.
    """

    def __init__(self, indices: Sequence[int]):
        self.indices = [int(i) for i in indices]
        positions = [i + 1 for i in self.indices]
        super().__init__(f"`NaN` at {positions}.")


@final
class HypersphereDivideError(FunctionError):
    """Every hypersphere input is exactly zero."""

    def __init__(self):
        super().__init__(
            "All values passed to the hypershpere node are `0`."
        )


CONSTRUCTION_ERRORS = (
    HypersphereDomainError,
    InputAndHypersphereDomainError,
    MultihotDomainError,
    MultihotMatrixShapeError,
    MultihotOffsetShapeError,
    DenseInverseShapeError,
    DenseShapeError,
)

FUNCTION_ERRORS = (
    MultihotDimensionMismatch,
    InputDimensionMismatch,
    HypersphereNaNError,
    HypersphereDivideError,
)


# ======================================================================
# Operator shape errors
# ======================================================================
class ShapeMismatchError(ValueError):
    """Elementwise operands violate the row-broadcast / full-shape rule."""

    def __init__(self, x_dims, y_dims, rows_only: bool):
        self.x_dims = x_dims
        self.y_dims = y_dims
        if rows_only:
            detail = "don't have the same number of rows"
        else:
            detail = "don't have matching dimensions"
        super().__init__(f"x and y {detail}.\nx has {x_dims} and y has {y_dims}.")


class DimensionIncompatibilityError(ValueError):
    """Matrix product operands have ``x.cols != y.rows``."""

    def __init__(self, x_cols: int, y_rows: int):
        self.x_cols = x_cols
        self.y_rows = y_rows
        super().__init__(
            "x and y don't have compatible dimensions. y must have as many "
            "rows as x has columns.\n"
            f"x has {x_cols} columns and y has {y_rows} rows."
        )
