"""
Model interfaces for log-density evaluation.

This module provides the two model shapes the evaluation layer understands:

**Templated density** (``TemplatedModel``):
    One ``log_prob`` method, generic over the ``propto``/``jacobian`` flags and
    over the scalar type. It is called with plain floats or with dual numbers
    (``torch.Tensor`` with ``requires_grad=True``); gradients are derived by
    the evaluation layer through reverse-mode AD.

**Virtual interface** (``InterfaceModel``):
    Four already-specialized density entry points plus its own combined
    value-and-gradient method. The evaluation layer never differentiates it.

Both shapes share the metadata surface of ``ModelBase``. Two capabilities are
optional and detected by the capability classifier rather than stubbed out:

``transform_inits(context, msgs=None) -> np.ndarray``
    Read constrained values from a variable context and return the
    unconstrained parameter vector.

``write_array(rng, params_r, include_tparams=True, include_gqs=True, msgs=None) -> np.ndarray``
    Map an unconstrained vector to constrained values, optionally followed by
    transformed parameters and generated quantities (which may draw from
    ``rng``, a ``numpy.random.Generator``).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, List, Optional, Protocol, Sequence, TextIO, Tuple, Union, runtime_checkable

import numpy as np

RealVector = Union[List[float], np.ndarray]
"""Flat list of floats or a dense 1-D ndarray."""

IntVector = List[int]


class ModelBase(ABC):
    """
    Metadata shared by every model, independent of how its density is evaluated.

    Args:
        num_params_r: Number of continuous unconstrained parameters. Fixed for
            the lifetime of the model.
        param_ranges_i: Inclusive ``(lower, upper)`` bounds of each discrete
            parameter, if the model has any.
    """

    def __init_subclass__(cls, **kwargs: Any) -> None:
        """Classify every concrete subclass as soon as it is defined.

        A class satisfying both strategies, or neither, raises
        ``ConfigurationError`` here instead of at its first evaluation.
        """
        super().__init_subclass__(**kwargs)
        # ABCMeta sets __abstractmethods__ only after this hook returns.
        if any(getattr(getattr(cls, name, None), "__isabstractmethod__", False) for name in dir(cls)):
            return
        from modeleval.core.capability import classify

        classify(cls)

    def __init__(self, num_params_r: int, param_ranges_i: Optional[Sequence[Tuple[int, int]]] = None):
        if int(num_params_r) < 0:
            raise ValueError(f"num_params_r must be non-negative, got {num_params_r}.")
        self._num_params_r = int(num_params_r)
        self._param_ranges_i = [tuple(r) for r in (param_ranges_i or [])]

    @property
    def num_params_r(self) -> int:
        """Number of continuous unconstrained parameters."""
        return self._num_params_r

    @property
    def num_params_i(self) -> int:
        """Number of discrete parameters."""
        return len(self._param_ranges_i)

    def param_range_i(self, idx: int) -> Tuple[int, int]:
        """Return the inclusive bounds of discrete parameter ``idx``."""
        if not 0 <= idx < self.num_params_i:
            raise IndexError(
                f"param_range_i: index {idx} out of range for "
                f"{self.num_params_i} discrete parameters."
            )
        return self._param_ranges_i[idx]

    @abstractmethod
    def model_name(self) -> str:
        """Return the name of the model."""

    @abstractmethod
    def model_compile_info(self) -> List[str]:
        """Return free-form build/compile information."""

    @abstractmethod
    def get_param_names(self) -> List[str]:
        """Return the names of the declared parameters."""

    @abstractmethod
    def get_dims(self) -> List[List[int]]:
        """Return the dimensions of each declared parameter."""

    @abstractmethod
    def constrained_param_names(self, include_tparams: bool = True, include_gqs: bool = True) -> List[str]:
        """Return flat names of the constrained scalars, in ``write_array`` order."""

    @abstractmethod
    def unconstrained_param_names(self, include_tparams: bool = True, include_gqs: bool = True) -> List[str]:
        """Return flat names of the unconstrained scalars."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.model_name()!r}, num_params_r={self.num_params_r})"


class TemplatedModel(ModelBase):
    """
    Model exposing a single density generic over mode flags and scalar type.

    Subclasses implement ``log_prob`` using operations that work both on
    floats and on ``torch`` tensors (see ``modeleval.utils.tools``).
    """

    @abstractmethod
    def log_prob(
        self,
        params_r: Any,
        params_i: IntVector,
        propto: bool,
        jacobian: bool,
        msgs: Optional[TextIO] = None,
    ) -> Any:
        """
        Evaluate the log density.

        Args:
            params_r: Unconstrained parameters. A sequence of scalars or a 1-D
                array/tensor; entries are plain floats or dual numbers.
            params_i: Discrete parameters (possibly empty).
            propto: Drop terms that do not depend on a dual argument.
            jacobian: Add the log Jacobian of the inverse transform.
            msgs: Optional text stream for diagnostic messages.

        Returns:
            Log density, of the same scalar type as ``params_r``.
        """


class InterfaceModel(ModelBase):
    """
    Model exposing specialized density entry points and its own gradient.

    Only ``log_prob`` and ``log_prob_grad`` are required. The other three
    variants default to a more basic one; a model overrides them when its
    density actually depends on the flag.
    """

    def __init__(self, num_params_r: int):
        super().__init__(num_params_r)

    def model_compile_info(self) -> List[str]:
        return ["custom model"]

    @abstractmethod
    def log_prob(self, params_r: RealVector, msgs: Optional[TextIO] = None) -> float:
        """Log density with normalizing constants and without Jacobian."""

    def log_prob_jacobian(self, params_r: RealVector, msgs: Optional[TextIO] = None) -> float:
        """Log density with normalizing constants and with Jacobian."""
        return self.log_prob(params_r, msgs)

    def log_prob_propto(self, params_r: RealVector, msgs: Optional[TextIO] = None) -> float:
        """Log density dropping normalizing constants, without Jacobian."""
        return self.log_prob(params_r, msgs)

    def log_prob_propto_jacobian(self, params_r: RealVector, msgs: Optional[TextIO] = None) -> float:
        """Log density dropping normalizing constants, with Jacobian."""
        return self.log_prob_jacobian(params_r, msgs)

    @abstractmethod
    def log_prob_grad(
        self,
        params_r: RealVector,
        gradient: RealVector,
        propto: bool,
        jacobian: bool,
        msgs: Optional[TextIO] = None,
    ) -> float:
        """
        Return the log density and write its gradient into ``gradient``.

        ``gradient`` must be overwritten with slice assignment
        (``gradient[:] = ...``) so that both list and ndarray buffers work.
        """


@runtime_checkable
class TemplatedDensity(Protocol):
    """Structural surface of a templated-density model registered by duck typing."""

    num_params_r: int

    def log_prob(self, params_r: Any, params_i: IntVector, propto: bool, jacobian: bool, msgs: Optional[TextIO] = None) -> Any:
        ...


@runtime_checkable
class VirtualInterface(Protocol):
    """Structural surface of a virtual-interface model registered by duck typing."""

    num_params_r: int

    def log_prob(self, params_r: RealVector, msgs: Optional[TextIO] = None) -> float:
        ...

    def log_prob_jacobian(self, params_r: RealVector, msgs: Optional[TextIO] = None) -> float:
        ...

    def log_prob_propto(self, params_r: RealVector, msgs: Optional[TextIO] = None) -> float:
        ...

    def log_prob_propto_jacobian(self, params_r: RealVector, msgs: Optional[TextIO] = None) -> float:
        ...

    def log_prob_grad(self, params_r: RealVector, gradient: RealVector, propto: bool, jacobian: bool, msgs: Optional[TextIO] = None) -> float:
        ...
