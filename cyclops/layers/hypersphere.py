"""
hypersphere.py — Projection of a vector onto the unit hypersphere.

    ‖x‖₂ = √(Σ xᵢ²)
    x̂ = x / ‖x‖₂

The direction (angle) of ``x`` is preserved and the output has unit norm.
"""

import torch
import torch.nn as nn

from ..operators import as_tensor, div, pow
from ..validation import check_hypersphere_domain


def normalize(x: torch.Tensor) -> torch.Tensor:
    """
    Divide ``x`` by its Euclidean norm.

    Parameters
    ----------
    x : torch.Tensor
        Vector of shape ``(c,)``.

    Returns
    -------
    torch.Tensor
        Unit-norm vector of shape ``(c,)``.

    Raises
    ------
    HypersphereNaNError
        If any element of ``x`` is ``NaN``.
    HypersphereDivideError
        If every element of ``x`` is ``0``.
    """
    x = as_tensor(x)
    check_hypersphere_domain(x)
    return div(x, torch.sqrt(torch.sum(pow(x, 2))))


class HypersphereNode(nn.Module):
    """Parameter-free module form of :func:`normalize`."""

    def forward(self, x: torch.Tensor) -> torch.Tensor:
        return normalize(x)
