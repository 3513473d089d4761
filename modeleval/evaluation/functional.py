"""
Adapter turning a templated-density model into a unary function.
"""

from __future__ import annotations

from typing import Any, Optional, TextIO

from modeleval.core.capability import Capability, capabilities_of
from modeleval.defaults import FUNCTIONAL_MODE
from modeleval.exceptions import CapabilityMismatchError


class ModelFunctional:
    """
    Callable returning a model's log density, for generic AD and optimizers.

    The density is evaluated with ``propto=True, jacobian=True`` and no
    discrete parameters, for whatever scalar type ``x`` holds (floats or dual
    numbers). The model and stream are held by reference.

    Args:
        model: A templated-density model.
        msgs: Optional stream passed to the model for diagnostics.

    Raises:
        CapabilityMismatchError: If ``model`` is a virtual-interface model,
            which has no entry point generic over the scalar type.

    Examples:
        >>> f = ModelFunctional(model)
        >>> value, grad = ad_gradient(f, [0.0, 1.0])
    """

    def __init__(self, model: Any, msgs: Optional[TextIO] = None):
        capabilities_of(model).require(Capability.DUAL_LOG_PROB, CapabilityMismatchError)
        self.model = model
        self.msgs = msgs

    def __call__(self, x: Any) -> Any:
        return self.model.log_prob(x, [], FUNCTIONAL_MODE.propto, FUNCTIONAL_MODE.jacobian, self.msgs)
