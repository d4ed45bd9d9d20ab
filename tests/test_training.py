"""
test_training.py — Smoke tests for the synthetic training demo.
"""

import logging
import math

import numpy as np
import pytest
import torch

from cyclops import CyclopsModel
from training.config import TrainingConfig
from training.train_synthetic import generate_circular_data, parse_args, predict_phases, train


def _tiny_config(**overrides) -> TrainingConfig:
    settings = dict(n=5, m=2, c=2, num_samples=12, num_epochs=2, batch_size=4,
                    progress=False, device="cpu")
    settings.update(overrides)
    return TrainingConfig(**settings)


class TestSyntheticData:
    def test_shapes(self):
        X, H, phases = generate_circular_data(_tiny_config())
        assert X.shape == (12, 5)
        assert X.dtype == torch.float32
        assert H.shape == (12, 2)
        assert (H.sum(dim=1) == 1).all()
        assert phases.shape == (12,)

    def test_no_groups(self):
        X, H, _ = generate_circular_data(_tiny_config(m=0))
        assert X.shape == (12, 5)
        assert H is None

    def test_seeded(self):
        a, _, _ = generate_circular_data(_tiny_config())
        b, _, _ = generate_circular_data(_tiny_config())
        assert torch.equal(a, b)


class TestTrain:
    def test_history(self):
        model, history = train(_tiny_config())
        assert isinstance(model, CyclopsModel)
        assert len(history) == 2
        assert all(math.isfinite(v) for v in history)

    def test_without_groups(self):
        model, history = train(_tiny_config(m=0, c=3))
        assert model.m == 0
        assert len(history) == 2

    def test_logs_parameter_count(self, caplog):
        with caplog.at_level(logging.INFO, logger="train_synthetic"):
            train(_tiny_config())
        assert "Model parameters: 52" in caplog.text

    def test_invalid_dimensions_surface(self):
        from cyclops.errors import InputAndHypersphereDomainError

        with pytest.raises(InputAndHypersphereDomainError):
            train(_tiny_config(n=2, m=0, c=2))

    def test_predict_phases(self):
        config = _tiny_config()
        model, _ = train(config)
        X, H, _ = generate_circular_data(config)
        phases = predict_phases(model, X, H)
        assert phases.shape == (12,)
        assert np.all((phases >= 0) & (phases < 2 * np.pi))

    def test_predict_phases_needs_circle(self):
        X, H, _ = generate_circular_data(_tiny_config(c=3))
        with pytest.raises(ValueError):
            predict_phases(CyclopsModel(5, 2, 3), X, H)


class TestCli:
    def test_parse_args(self):
        config = parse_args(["--features", "8", "--groups", "0", "--epochs", "3"])
        assert (config.n, config.m, config.c) == (8, 0, 2)
        assert config.num_epochs == 3
