"""
compute_metrics.py — Parameter counting, phase readout and timing helpers.
"""

import math
import time

import numpy as np
import torch
import torch.nn as nn
from typing import Optional, Tuple


def count_parameters(model: nn.Module, trainable_only: bool = True) -> int:
    """Return the total number of parameters in a model."""
    if trainable_only:
        return sum(p.numel() for p in model.parameters() if p.requires_grad)
    return sum(p.numel() for p in model.parameters())


def hypersphere_phase(z: torch.Tensor) -> float:
    """
    Angle of a 2-D hypersphere coordinate, in ``[0, 2π)``.

    Parameters
    ----------
    z : torch.Tensor
        Vector of shape ``(2,)``, e.g. the output of ``normalize``.
    """
    if z.shape != (2,):
        raise ValueError(f"expected a 2-D coordinate, got shape {tuple(z.shape)}")
    return math.atan2(z[1].item(), z[0].item()) % (2 * math.pi)


def measure_wall_clock(
    model: nn.Module,
    x: torch.Tensor,
    h: Optional[torch.Tensor] = None,
    skip_check: bool = False,
    num_warmup: int = 3,
    num_runs: int = 10,
) -> Tuple[float, float]:
    """
    Measure wall-clock time for a single model call (ms).

    Returns
    -------
    Tuple[float, float]
        (mean_ms, std_ms) over ``num_runs`` iterations.
    """
    times = []
    with torch.no_grad():
        for _ in range(num_warmup):
            model(x, h, skip_check=skip_check)

        for _ in range(num_runs):
            t0 = time.perf_counter()
            model(x, h, skip_check=skip_check)
            times.append((time.perf_counter() - t0) * 1000)

    arr = np.array(times)
    return float(arr.mean()), float(arr.std())


def format_params(n: int) -> str:
    """Format parameter count: 1234567 → '1.23M'."""
    if n >= 1_000_000:
        return f"{n / 1_000_000:.2f}M"
    elif n >= 1_000:
        return f"{n / 1_000:.1f}K"
    return str(n)
