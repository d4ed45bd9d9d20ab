"""
operators.py — Shape-checked elementwise and matrix operators.

All operators work on rank-1 and rank-2 ``float32`` (or ``float64``)
tensors and follow column-vector conventions: a vector of length *n* is an
*n×1* column.

Elementwise shape rule:
    * if either operand has exactly one column, both must have the same
      number of rows and the column is broadcast across the other operand;
    * otherwise both operands must have identical shapes;
    * scalars broadcast against anything.

Every call returns a freshly allocated tensor; inputs are never mutated.
"""

import numbers

import numpy as np
import torch
from typing import Tuple, Union

from .errors import DimensionIncompatibilityError, ShapeMismatchError


Operand = Union[numbers.Number, torch.Tensor]


# ----------------------------------------------------------------------
# Coercion helpers
# ----------------------------------------------------------------------
def _is_scalar(v) -> bool:
    if isinstance(v, (torch.Tensor, np.ndarray)):
        return v.ndim == 0
    return isinstance(v, numbers.Number)


def as_tensor(v, device=None) -> torch.Tensor:
    """
    Return ``v`` as a floating tensor (autograd history is kept).

    ``float64`` tensors keep double precision; everything else becomes
    ``float32``.
    """
    if isinstance(v, torch.Tensor):
        dtype = torch.float64 if v.dtype == torch.float64 else torch.float32
        return v.to(dtype=dtype, device=device)
    return torch.as_tensor(v, dtype=torch.float32, device=device)


def _rows(x: torch.Tensor) -> int:
    return x.shape[0]


def _cols(x: torch.Tensor) -> int:
    return x.shape[1] if x.dim() == 2 else 1


def _check_rank(x: torch.Tensor) -> None:
    if x.dim() > 2:
        raise ValueError(f"expected a vector or matrix, got rank {x.dim()}")


def _broadcast_pair(x, y) -> Tuple[torch.Tensor, torch.Tensor]:
    """Validate an elementwise pair and align vectors as columns."""
    if _is_scalar(x) and _is_scalar(y):
        raise TypeError("elementwise operators need at least one tensor operand")
    if _is_scalar(x) or _is_scalar(y):
        # 0-dim tensors mix with tensors on any device
        x, y = as_tensor(x), as_tensor(y)
        _check_rank(x)
        _check_rank(y)
        return x, y

    x, y = as_tensor(x), as_tensor(y)
    _check_rank(x)
    _check_rank(y)

    if _cols(x) == 1 or _cols(y) == 1:
        if _rows(x) != _rows(y):
            raise ShapeMismatchError(_rows(x), _rows(y), rows_only=True)
    elif x.shape != y.shape:
        raise ShapeMismatchError(tuple(x.shape), tuple(y.shape), rows_only=False)

    # torch broadcasts over trailing dims; a vector paired with a matrix
    # has to be lifted to an explicit column first.
    if x.dim() == 1 and y.dim() == 2:
        x = x.unsqueeze(-1)
    elif y.dim() == 1 and x.dim() == 2:
        y = y.unsqueeze(-1)
    return x, y


# ----------------------------------------------------------------------
# Elementwise operators
# ----------------------------------------------------------------------
def add(x: Operand, y: Operand) -> torch.Tensor:
    """
    Elementwise sum.

    Examples
    --------
    >>> add(torch.tensor([4., 2.]), torch.tensor([[6., 8.], [2., 4.]]))
    tensor([[10., 12.],
            [ 4.,  6.]])
    """
    x, y = _broadcast_pair(x, y)
    return x + y


def sub(x: Operand, y: Operand) -> torch.Tensor:
    """Elementwise difference."""
    x, y = _broadcast_pair(x, y)
    return x - y


def mul(x: Operand, y: Operand) -> torch.Tensor:
    """Elementwise (Hadamard) product."""
    x, y = _broadcast_pair(x, y)
    return x * y


def div(x: Operand, y: Operand) -> torch.Tensor:
    """
    Elementwise quotient.

    Division by zero follows IEEE-754: ``0/0`` is ``nan`` and ``v/0`` is
    ``±inf``. Nothing is trapped here.
    """
    x, y = _broadcast_pair(x, y)
    return x / y


def pow(x: torch.Tensor, y: numbers.Number) -> torch.Tensor:
    """Elementwise power of tensor ``x`` to scalar exponent ``y``."""
    if _is_scalar(x) or not _is_scalar(y):
        raise TypeError("pow expects a tensor base and a scalar exponent")
    return torch.pow(as_tensor(x), y)


# ----------------------------------------------------------------------
# Matrix product
# ----------------------------------------------------------------------
def matvec(x: torch.Tensor, y: Operand) -> torch.Tensor:
    """
    Matrix product ``x ⊗ y``.

    Parameters
    ----------
    x : torch.Tensor
        A *p×q* matrix, or a length-*p* vector (treated as *p×1*).
    y : torch.Tensor or number
        A *q×r* matrix, a length-*q* vector, or a scalar (one row).

    Returns
    -------
    torch.Tensor
        *p×r* matrix, or a length-*p* vector when ``y`` is a vector or scalar.

    Raises
    ------
    DimensionIncompatibilityError
        When ``x`` does not have as many columns as ``y`` has rows.
    """
    if _is_scalar(x):
        raise TypeError("matvec expects a tensor left operand")
    x = as_tensor(x)
    _check_rank(x)

    if _is_scalar(y):
        if _cols(x) != 1:
            raise DimensionIncompatibilityError(_cols(x), 1)
        return x * as_tensor(y, device=x.device)

    y = as_tensor(y, device=x.device)
    _check_rank(y)
    if _cols(x) != _rows(y):
        raise DimensionIncompatibilityError(_cols(x), _rows(y))

    if x.dim() == 1:
        x = x.unsqueeze(-1)
    dtype = torch.promote_types(x.dtype, y.dtype)
    return torch.matmul(x.to(dtype), y.to(dtype))
