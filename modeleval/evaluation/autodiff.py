"""
Reverse-mode differentiation driver on top of torch autograd.
"""

from __future__ import annotations

from typing import Any, Callable, Optional, Tuple

import numpy as np
import torch

from modeleval.core.arena import Arena, get_arena
from modeleval.utils.tools import is_dual, value_of


def reverse_sweep(value: Any, leaf: torch.Tensor) -> np.ndarray:
    """
    Run one backward sweep from ``value`` and return d value / d leaf.

    A value that does not depend on any dual number has a zero gradient.
    """
    if not is_dual(value):
        return np.zeros(leaf.shape[0], dtype=float)
    if value.numel() != 1:
        raise ValueError(f"Can only differentiate a scalar, got shape {tuple(value.shape)}.")
    (grad,) = torch.autograd.grad(value.reshape(()), leaf, allow_unused=True)
    if grad is None:
        return np.zeros(leaf.shape[0], dtype=float)
    return grad.detach().cpu().numpy().astype(float)


def ad_gradient(f: Callable[[Any], Any], x, arena: Optional[Arena] = None) -> Tuple[float, np.ndarray]:
    """
    Value and gradient of a scalar function generic over its scalar type.

    Args:
        f: Unary callable taking a 1-D vector (a tensor of dual numbers here)
            and returning a scalar of the same scalar type.
        x: Point at which to differentiate.
        arena: Arena recording the computation. Defaults to the calling
            thread's arena, which is recovered on every exit path.

    Returns:
        Tuple of ``f(x)`` and its gradient as a 1-D ndarray.
    """
    arena = arena if arena is not None else get_arena()
    with arena.scope():
        leaf = arena.var(x)
        fx = f(leaf)
        grad = reverse_sweep(fx, leaf)
        value = float(value_of(fx))
    return value, grad
