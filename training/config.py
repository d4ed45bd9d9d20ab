"""
config.py — Configuration for the synthetic CYCLOPS training demo.

Model dimensions, data generation and optimizer settings in one place.
"""

from dataclasses import dataclass
from typing import Optional
import torch


@dataclass
class TrainingConfig:
    """Settings for ``training/train_synthetic.py``."""

    # ── Model dimensions (passed to CyclopsModel) ──
    n: int = 12                 # input features
    m: int = 2                  # multi-hot groups
    c: int = 2                  # hypersphere dimensions
    identity_multihot_init: bool = True   # zero scale / mhoffset before training

    # ── Synthetic data ──
    num_samples: int = 256
    noise_std: float = 0.05
    group_effect_std: float = 0.1

    # ── Optimizer ──
    learning_rate: float = 1e-2
    weight_decay: float = 1e-4
    grad_clip_max_norm: float = 1.0

    # ── Training duration ──
    num_epochs: int = 30
    batch_size: int = 16        # samples accumulated per optimizer step

    # ── Reproducibility / output ──
    seed: int = 1234
    progress: bool = True
    log_level: str = "INFO"
    log_file: Optional[str] = None

    # ── Device ──
    device: str = "cuda" if torch.cuda.is_available() else "cpu"
