"""
CyclopsModel — Symmetric encoder / decoder over real-valued feature vectors.

The model call chains four stages:

    1. Multi-hot encode   x ⊙ (1 ⊕ scale ⊗ h) ⊕ mhoffset ⊗ h ⊕ offset
    2. Compress           Linear(n → c)
    3. Hypersphere node   z / ‖z‖₂
    4. Expand             Linear(c → n)

Parameters (n = input rows, m = multi-hot groups, c = hypersphere dims):

    scale       (n, m)
    mhoffset    (n, m)
    offset      (n,) when m > 0, (n, 0) when m == 0
    compress    Linear(n, c)   weight (c, n), bias (c,)
    expand      Linear(c, n)   weight (n, c), bias (n,)

with 2 ≤ c < n and m ≥ 0. Parameter values may be trained; parameter
identities and shapes are fixed once the model is built.
"""

import logging
import math

import torch
import torch.nn as nn
from typing import Optional

from .layers import HypersphereNode, encode
from .operators import as_tensor
from .validation import check_dimensions, check_input, check_parameters

logger = logging.getLogger(__name__)

_PARAMETER_NAMES = ("scale", "mhoffset", "offset", "compress", "expand")


class CyclopsModel(nn.Module):
    """
    CYCLOPS encoder / decoder.

    Parameters
    ----------
    n : int
        Number of rows in the input data.
    m : int
        Number of groups in the multi-hot encoding (default: 0).
    c : int
        Dimensionality of the hypersphere node, ``2 ≤ c < n`` (default: 2).
    generator : torch.Generator, optional
        Random source for every initialised parameter. When omitted the
        global torch RNG is used.

    Raises
    ------
    HypersphereDomainError
        When ``c < 2``.
    InputAndHypersphereDomainError
        When ``n <= c``.
    MultihotDomainError
        When ``m < 0``.
    """

    def __init__(
        self,
        n: int,
        m: int = 0,
        c: int = 2,
        generator: Optional[torch.Generator] = None,
    ):
        super().__init__()
        check_dimensions(n, m, c)

        if m == 0:
            scale = torch.zeros(n, 0)
            mhoffset = torch.zeros(n, 0)
            offset = torch.zeros(n, 0)
        else:
            scale = torch.randn(n, m, generator=generator)
            mhoffset = torch.randn(n, m, generator=generator)
            offset = torch.randn(n, generator=generator)

        compress = nn.Linear(n, c)
        expand = nn.Linear(c, n)
        if generator is not None:
            _reset_linear(compress, generator)
            _reset_linear(expand, generator)

        self._assemble(scale, mhoffset, offset, compress, expand)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    @classmethod
    def from_dimensions(
        cls,
        n: int,
        m: int = 0,
        c: int = 2,
        generator: Optional[torch.Generator] = None,
    ) -> "CyclopsModel":
        """Build a randomly initialised model; same as ``CyclopsModel(n, m, c)``."""
        return cls(n, m, c, generator=generator)

    @classmethod
    def from_parameters(
        cls,
        scale,
        mhoffset,
        offset,
        compress: nn.Linear,
        expand: nn.Linear,
    ) -> "CyclopsModel":
        """
        Build a model from pre-fit parameters.

        Parameters
        ----------
        scale, mhoffset : array-like
            Multi-hot parameter matrices of shape ``(n, m)``.
        offset : array-like
            Shape ``(n,)`` when ``m > 0``, shape ``(n, 0)`` when ``m == 0``.
        compress : nn.Linear
            Compression ``n -> c``.
        expand : nn.Linear
            Expansion ``c -> n``.

        Raises
        ------
        MultihotMatrixShapeError, MultihotOffsetShapeError,
        DenseInverseShapeError, DenseShapeError
            Checked in that order.
        """
        scale = as_tensor(scale)
        mhoffset = as_tensor(mhoffset)
        offset = check_parameters(scale, mhoffset, as_tensor(offset), compress, expand)

        model = cls.__new__(cls)
        nn.Module.__init__(model)
        model._assemble(scale, mhoffset, offset, compress, expand)
        return model

    def _assemble(self, scale, mhoffset, offset, compress, expand) -> None:
        self.scale = nn.Parameter(scale.detach().float().clone())
        self.mhoffset = nn.Parameter(mhoffset.detach().float().clone())
        self.offset = nn.Parameter(offset.detach().float().clone())
        self.compress = compress
        self.expand = expand
        self.hypersphere = HypersphereNode()
        self._frozen = True

        logger.debug(
            "Built CyclopsModel(n=%d, m=%d, c=%d) with %d parameters",
            self.n, self.m, self.c, nparams(self),
        )

    def __setattr__(self, name, value):
        if name in _PARAMETER_NAMES and self.__dict__.get("_frozen", False):
            raise AttributeError(f"CyclopsModel.{name} cannot be reassigned")
        super().__setattr__(name, value)

    # ------------------------------------------------------------------
    # Dimensions
    # ------------------------------------------------------------------
    @property
    def n(self) -> int:
        """Input dimensionality."""
        return self.scale.shape[0]

    @property
    def m(self) -> int:
        """Number of multi-hot groups."""
        return self.scale.shape[1]

    @property
    def c(self) -> int:
        """Hypersphere dimensionality."""
        return self.compress.weight.shape[0]

    # ------------------------------------------------------------------
    # Forward
    # ------------------------------------------------------------------
    def forward(
        self,
        x: torch.Tensor,
        h: Optional[torch.Tensor] = None,
        skip_check: bool = False,
    ) -> torch.Tensor:
        """
        Run the full CYCLOPS pipeline.

        Parameters
        ----------
        x : torch.Tensor
            Input vector of shape ``(n,)``.
        h : torch.Tensor, optional
            Integer multi-hot indicator of shape ``(m,)``. May be omitted
            only when ``m == 0``.
        skip_check : bool
            Skip input validation.

        Returns
        -------
        torch.Tensor
            Reconstruction of shape ``(n,)``.
        """
        if not skip_check:
            check_input(x, h, self.scale)

        encoded = encode(x, h, self, skip_check=True)
        return self.expand(self.hypersphere(self.compress(encoded)))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def count_parameters(self) -> int:
        """Return the total number of parameters."""
        return nparams(self)

    def __repr__(self) -> str:
        n, m, c = self.n, self.m, self.c
        offset_shape = "x".join(str(d) for d in self.offset.shape)
        return (
            f"CyclopsModel(\n"
            f"  scale={n}x{m},\n"
            f"  mhoffset={n}x{m},\n"
            f"  offset={offset_shape},\n"
            f"  compress=Linear({n} => {c}),\n"
            f"  expand=Linear({c} => {n}),\n"
            f"  params={nparams(self):,}\n"
            f")"
        )


def nparams(model: CyclopsModel) -> int:
    """
    Return the total number of parameters in a ``CyclopsModel``.

        2·(n·m) + len(offset) + 2·(c·n) + (n + c)

    The ``(n + c)`` bias term only counts biases the dense maps carry.
    """
    dense = sum(
        p.numel() for layer in (model.compress, model.expand) for p in layer.parameters()
    )
    return 2 * model.scale.numel() + model.offset.numel() + dense


def _reset_linear(linear: nn.Linear, generator: torch.Generator) -> None:
    """Re-run ``nn.Linear``'s default initialisation from ``generator``."""
    with torch.no_grad():
        nn.init.kaiming_uniform_(linear.weight, a=math.sqrt(5), generator=generator)
        bound = 1 / math.sqrt(linear.in_features)
        linear.bias.uniform_(-bound, bound, generator=generator)
