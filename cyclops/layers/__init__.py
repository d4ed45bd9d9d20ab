"""CYCLOPS layers — multi-hot affine transform and hypersphere node."""

from .hypersphere import HypersphereNode, normalize
from .multihot import decode, encode

__all__ = [
    "HypersphereNode",
    "normalize",
    "encode",
    "decode",
]
