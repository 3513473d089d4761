"""
Arena holding the recorded computation graph of a templated evaluation.

Every tensor autograd saves for the backward sweep is packed into the active
arena through ``torch.autograd.graph.saved_tensors_hooks``; the graph keeps
only handles into the arena. Recovering the arena drops those tensors, which
invalidates every dual value created inside the scope: unpacking a stale
handle raises ``ArenaError`` instead of silently reading another evaluation's
data.

An arena is not locked. Each thread gets its own default arena from
``get_arena()``; sharing one explicitly across threads must be serialized by
the caller.
"""

from __future__ import annotations

import itertools
import threading
from contextlib import contextmanager
from typing import Iterator, List, Tuple

import numpy as np
import torch

from modeleval.defaults import DEFAULT_DEVICE, DEFAULT_DTYPE
from modeleval.exceptions import ArenaError
from modeleval.utils.logging import ModelEvalLogger

_logger = ModelEvalLogger.get_module_logger(__name__)

Handle = Tuple[int, int]


class Arena:
    """
    Append-only store of AD nodes.

    Args:
        dtype: Floating point type of the leaves created by ``var``.
        device: Device of the leaves created by ``var``.

    Attributes:
        recoveries (int): Number of times ``recover`` has run.
        high_water_mark (int): Largest size reached since construction.
    """

    def __init__(self, dtype: torch.dtype = DEFAULT_DTYPE, device: str = DEFAULT_DEVICE):
        self.dtype = dtype
        self.device = torch.device(device)
        self._nodes: List[torch.Tensor] = []
        self._serials: List[int] = []
        self._counter = itertools.count()
        self.recoveries = 0
        self.high_water_mark = 0

    def __len__(self) -> int:
        return len(self._nodes)

    @property
    def size(self) -> int:
        """Number of nodes currently held."""
        return len(self._nodes)

    def _push(self, tensor: torch.Tensor) -> Handle:
        serial = next(self._counter)
        self._nodes.append(tensor)
        self._serials.append(serial)
        self.high_water_mark = max(self.high_water_mark, len(self._nodes))
        return len(self._nodes) - 1, serial

    def _pack(self, tensor: torch.Tensor) -> Handle:
        return self._push(tensor)

    def _unpack(self, handle: Handle) -> torch.Tensor:
        index, serial = handle
        if index >= len(self._nodes) or self._serials[index] != serial:
            raise ArenaError(
                "A dual value was used after the arena holding its computation "
                "graph was recovered."
            )
        return self._nodes[index]

    def var(self, values) -> torch.Tensor:
        """
        Create a 1-D leaf of dual numbers from primal values.

        Each entry starts with a zero adjoint and is linked into the arena.
        """
        primal = np.asarray(values, dtype=float).reshape(-1)
        leaf = torch.tensor(primal, dtype=self.dtype, device=self.device, requires_grad=True)
        self._push(leaf)
        return leaf

    def recover(self, mark: int = 0) -> None:
        """
        Drop every node stored at or after position ``mark``.

        Args:
            mark: Size to return to. ``0`` empties the arena.
        """
        if not 0 <= mark <= len(self._nodes):
            raise ValueError(f"Cannot recover arena of size {len(self._nodes)} to {mark}.")
        released = len(self._nodes) - mark
        del self._nodes[mark:]
        del self._serials[mark:]
        self.recoveries += 1
        _logger.debug("Recovered arena: released %d nodes, %d remain", released, mark)

    @contextmanager
    def scope(self) -> Iterator["Arena"]:
        """
        Record saved tensors into this arena for the duration of the block.

        The arena is recovered to its size at entry exactly once when the block
        exits, whether it returns normally or raises.
        """
        mark = len(self._nodes)
        try:
            with torch.autograd.graph.saved_tensors_hooks(self._pack, self._unpack):
                yield self
        finally:
            self.recover(mark)

    def __repr__(self) -> str:
        return f"Arena(size={self.size}, high_water_mark={self.high_water_mark}, recoveries={self.recoveries})"


_local = threading.local()


def get_arena() -> Arena:
    """Return the calling thread's default arena, creating it on first use."""
    arena = getattr(_local, "arena", None)
    if arena is None:
        arena = Arena()
        _local.arena = arena
    return arena
