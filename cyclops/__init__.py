"""CYCLOPS — multi-hot affine and hypersphere layers for circular encoders."""

from . import operators
from .cyclops_model import CyclopsModel, nparams
from .errors import (
    CONSTRUCTION_ERRORS,
    FUNCTION_ERRORS,
    ConstructionError,
    CyclopsError,
    DenseInverseShapeError,
    DenseShapeError,
    DimensionIncompatibilityError,
    FunctionError,
    HypersphereDivideError,
    HypersphereDomainError,
    HypersphereNaNError,
    InputAndHypersphereDomainError,
    InputDimensionMismatch,
    MultihotDimensionMismatch,
    MultihotDomainError,
    MultihotMatrixShapeError,
    MultihotOffsetShapeError,
    ShapeMismatchError,
)
from .layers import HypersphereNode, decode, encode, normalize

__all__ = [
    "operators",
    "CyclopsModel",
    "nparams",
    "encode",
    "decode",
    "normalize",
    "HypersphereNode",
    "CyclopsError",
    "ConstructionError",
    "FunctionError",
    "CONSTRUCTION_ERRORS",
    "FUNCTION_ERRORS",
    "HypersphereDomainError",
    "InputAndHypersphereDomainError",
    "MultihotDomainError",
    "MultihotMatrixShapeError",
    "MultihotOffsetShapeError",
    "DenseInverseShapeError",
    "DenseShapeError",
    "MultihotDimensionMismatch",
    "InputDimensionMismatch",
    "HypersphereNaNError",
    "HypersphereDivideError",
    "ShapeMismatchError",
    "DimensionIncompatibilityError",
]
