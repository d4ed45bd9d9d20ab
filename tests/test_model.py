"""
test_model.py — Construction, parameter counting and the end-to-end call.
"""

import numpy as np
import pytest
import torch
import torch.nn as nn

from cyclops import CyclopsModel, nparams


class TestConstruction:
    def test_default_dimensions(self):
        model = CyclopsModel(3)
        assert (model.n, model.m, model.c) == (3, 0, 2)

    def test_from_dimensions_alias(self):
        model = CyclopsModel.from_dimensions(6, 2, 3)
        assert isinstance(model, CyclopsModel)
        assert (model.n, model.m, model.c) == (6, 2, 3)

    def test_parameter_shapes_with_groups(self):
        model = CyclopsModel(3, 2, 2)
        assert model.scale.shape == (3, 2)
        assert model.mhoffset.shape == (3, 2)
        assert model.offset.shape == (3,)
        assert model.compress.weight.shape == (2, 3)
        assert model.compress.bias.shape == (2,)
        assert model.expand.weight.shape == (3, 2)
        assert model.expand.bias.shape == (3,)

    def test_parameter_shapes_without_groups(self):
        model = CyclopsModel(5, 0, 4)
        assert model.scale.shape == (5, 0)
        assert model.mhoffset.shape == (5, 0)
        assert model.offset.shape == (5, 0)
        assert model.compress.weight.shape == (4, 5)

    def test_float32_parameters(self):
        model = CyclopsModel(4, 2)
        for p in model.parameters():
            assert p.dtype == torch.float32

    def test_seeded_construction_is_deterministic(self):
        a = CyclopsModel(6, 3, 3, generator=torch.Generator().manual_seed(7))
        b = CyclopsModel(6, 3, 3, generator=torch.Generator().manual_seed(7))
        for pa, pb in zip(a.parameters(), b.parameters()):
            assert torch.equal(pa, pb)

    def test_different_seeds_differ(self):
        a = CyclopsModel(6, 3, 3, generator=torch.Generator().manual_seed(1))
        b = CyclopsModel(6, 3, 3, generator=torch.Generator().manual_seed(2))
        assert not torch.equal(a.scale, b.scale)

    def test_from_parameters(self):
        model = CyclopsModel.from_parameters(
            torch.zeros(3, 1), torch.zeros(3, 1), torch.zeros(3),
            nn.Linear(3, 2), nn.Linear(2, 3),
        )
        assert (model.n, model.m, model.c) == (3, 1, 2)

    def test_from_parameters_without_groups(self):
        model = CyclopsModel.from_parameters(
            torch.zeros(3, 0), torch.zeros(3, 0), torch.zeros(3, 0),
            nn.Linear(3, 2), nn.Linear(2, 3),
        )
        assert model.m == 0

    def test_from_parameters_coerces_offset(self):
        model = CyclopsModel.from_parameters(
            np.zeros((4, 2)), np.zeros((4, 2)), np.arange(4),
            nn.Linear(4, 2), nn.Linear(2, 4),
        )
        assert model.offset.dtype == torch.float32
        assert torch.equal(model.offset.detach(), torch.arange(4, dtype=torch.float32))

    def test_from_parameters_copies_inputs(self):
        scale = torch.zeros(3, 1)
        model = CyclopsModel.from_parameters(
            scale, torch.zeros(3, 1), torch.zeros(3),
            nn.Linear(3, 2), nn.Linear(2, 3),
        )
        scale += 1
        assert model.scale.abs().sum().item() == 0.0

    @pytest.mark.parametrize("name", ["scale", "mhoffset", "offset", "compress", "expand"])
    def test_parameters_cannot_be_reassigned(self, name):
        model = CyclopsModel(4, 2)
        with pytest.raises(AttributeError):
            setattr(model, name, getattr(model, name))

    def test_repr(self):
        s = repr(CyclopsModel(5, 3))
        assert "CyclopsModel" in s
        assert "scale=5x3" in s
        assert "Linear(5 => 2)" in s
        assert "params=62" in s


class TestNparams:
    @pytest.mark.parametrize(
        "dims, expected",
        [((5, 0, 2), 27), ((6, 3, 3), 87), ((5, 2, 2), 52), ((5, 3, 2), 62), ((5, 0, 4), 49)],
    )
    def test_known_counts(self, dims, expected):
        assert nparams(CyclopsModel(*dims)) == expected

    @pytest.mark.parametrize("n, m, c", [(3, 0, 2), (4, 1, 3), (10, 5, 2), (8, 0, 7)])
    def test_closed_form(self, n, m, c):
        model = CyclopsModel(n, m, c)
        offset_len = n if m > 0 else 0
        assert nparams(model) == 2 * n * m + offset_len + 2 * c * n + n + c

    def test_matches_registered_parameters(self):
        model = CyclopsModel(7, 2, 3)
        assert nparams(model) == sum(p.numel() for p in model.parameters())
        assert model.count_parameters() == nparams(model)

    def test_biasless_dense_maps(self):
        model = CyclopsModel.from_parameters(
            torch.zeros(5, 3),
            torch.zeros(5, 3),
            torch.zeros(5),
            nn.Linear(5, 2, bias=False),
            nn.Linear(2, 5, bias=False),
        )
        assert nparams(model) == 62 - (5 + 2)
        assert nparams(model) == sum(p.numel() for p in model.parameters())
        assert model(torch.rand(5), torch.tensor([1, 0, 1])).shape == (5,)


class TestForward:
    def test_output_shape_with_groups(self):
        model = CyclopsModel(3, 2, 2)
        out = model(torch.ones(3), torch.ones(2, dtype=torch.int32))
        assert out.shape == (3,)
        assert out.dtype == torch.float32

    def test_output_shape_without_groups(self):
        model = CyclopsModel(3)
        assert model(torch.ones(3)).shape == (3,)
        assert model(torch.ones(3), None).shape == (3,)

    def test_skip_check_matches_checked_call(self):
        model = CyclopsModel(6, 2, 3)
        x = torch.rand(6)
        h = torch.tensor([1, 0])
        assert torch.equal(model(x, h), model(x, h, skip_check=True))

    def test_output_lies_in_expand_image(self):
        # the hypersphere output has unit norm, so expand sees a unit vector
        model = CyclopsModel(5, 0, 2)
        x = torch.rand(5) + 0.1
        with torch.no_grad():
            z = model.hypersphere(model.compress(x))
            assert torch.allclose(z.norm(), torch.tensor(1.0), atol=1e-6)
            assert torch.allclose(model(x), model.expand(z))

    def test_gradient_flow(self):
        model = CyclopsModel(6, 2, 2)
        x = torch.rand(6)
        out = model(x, torch.tensor([0, 1]))
        out.sum().backward()
        assert model.scale.grad is not None
        assert model.compress.weight.grad is not None
        assert model.expand.weight.grad is not None

    def test_state_dict_round_trip(self):
        model = CyclopsModel(5, 2, 2)
        clone = CyclopsModel(5, 2, 2)
        clone.load_state_dict(model.state_dict())
        x = torch.rand(5)
        h = torch.tensor([1, 1])
        assert torch.equal(model(x, h), clone(x, h))
