"""
validation.py — Domain and shape checks guarding every public entry point.

Checks run in a fixed order and the first failing check wins. Nothing is
caught or downgraded here; each failure surfaces as a concrete
``ConstructionError`` or ``FunctionError``.
"""

import torch
import torch.nn as nn
from typing import Optional

from .errors import (
    DenseInverseShapeError,
    DenseShapeError,
    HypersphereDivideError,
    HypersphereDomainError,
    HypersphereNaNError,
    InputAndHypersphereDomainError,
    InputDimensionMismatch,
    MultihotDimensionMismatch,
    MultihotDomainError,
    MultihotMatrixShapeError,
    MultihotOffsetShapeError,
)
from .operators import as_tensor


# ======================================================================
# Construction checks
# ======================================================================
def check_dimensions(n: int, m: int, c: int) -> None:
    """
    Validate the dimension triple of a freshly initialised model.

    Raises
    ------
    HypersphereDomainError
        When ``c < 2``.
    InputAndHypersphereDomainError
        When ``n <= c``.
    MultihotDomainError
        When ``m < 0``.
    """
    if c < 2:
        raise HypersphereDomainError(c)
    if n <= c:
        raise InputAndHypersphereDomainError(n, c)
    if m < 0:
        raise MultihotDomainError(m)


def check_parameters(
    scale: torch.Tensor,
    mhoffset: torch.Tensor,
    offset: torch.Tensor,
    compress: nn.Linear,
    expand: nn.Linear,
) -> torch.Tensor:
    """
    Validate pre-fit parameters and return ``offset`` as ``float32``.

    Parameters
    ----------
    scale, mhoffset : torch.Tensor
        Multi-hot parameter matrices of shape ``(n, m)``.
    offset : torch.Tensor
        Shape ``(n,)`` when ``m > 0``, shape ``(n, 0)`` when ``m == 0``.
    compress, expand : nn.Linear
        Maps ``n -> c`` and ``c -> n``.

    Returns
    -------
    torch.Tensor
        ``offset`` coerced to ``float32``.
    """
    for name, matrix in (("scale", scale), ("mhoffset", mhoffset)):
        if matrix.dim() != 2:
            raise TypeError(f"{name} must be a 2-D array, got rank {matrix.dim()}")
    if offset.dim() not in (1, 2):
        raise TypeError(f"offset must be a 1-D or 2-D array, got rank {offset.dim()}")
    for name, linear in (("compress", compress), ("expand", expand)):
        if not isinstance(linear, nn.Linear):
            raise TypeError(f"{name} must be an nn.Linear, got {type(linear).__name__}")

    scale_shape = tuple(scale.shape)
    offset_shape = tuple(offset.shape)
    compress_shape = tuple(compress.weight.shape)
    expand_shape = tuple(expand.weight.shape)

    if scale_shape != tuple(mhoffset.shape):
        raise MultihotMatrixShapeError(scale_shape, tuple(mhoffset.shape))

    n, m = scale_shape
    if m == 0:
        if offset_shape != scale_shape:
            raise MultihotOffsetShapeError(scale_shape, offset_shape)
    elif offset_shape != (n,):
        raise MultihotOffsetShapeError((n,), offset_shape)

    if compress_shape != expand_shape[::-1]:
        raise DenseInverseShapeError(compress_shape, expand_shape)

    c, in_dim = compress_shape
    if not 2 <= c < in_dim == n:
        raise DenseShapeError(compress_shape, n)

    return as_tensor(offset)


# ======================================================================
# Call checks
# ======================================================================
def check_input(x: torch.Tensor, h: Optional[torch.Tensor], scale: torch.Tensor) -> None:
    """
    Validate a data vector and multi-hot indicator against ``scale``.

    ``h=None`` counts as an empty indicator.
    """
    h_length = 0 if h is None else len(h)
    if h_length != scale.shape[1]:
        raise MultihotDimensionMismatch(h_length, scale.shape[1])
    if len(x) != scale.shape[0]:
        raise InputDimensionMismatch(len(x), scale.shape[0])


def check_hypersphere_domain(x: torch.Tensor) -> None:
    """Reject ``NaN`` entries first, then an all-zero input."""
    nan_mask = torch.isnan(x)
    if nan_mask.any():
        raise HypersphereNaNError(torch.nonzero(nan_mask).flatten().tolist())
    if (x == 0).all():
        raise HypersphereDivideError()
