"""
Log-density mode representation.

A mode is the pair of flags that selects one of the four log-density variants
a model can compute: with or without normalizing constants, and with or
without the Jacobian adjustment of the unconstraining transform.
"""

from dataclasses import dataclass
from typing import Iterator

import numpy as np


@dataclass(frozen=True)
class LogDensityMode:
    """
    Selects one of the four log-density variants.

    Attributes:
        propto (bool):
            If True, terms that do not depend on any parameter (normalizing
            constants) are dropped and the density is only defined up to an
            additive constant. Default: False.

        jacobian (bool):
            If True, the log absolute determinant of the Jacobian of the
            inverse (unconstrained -> constrained) transform is added.
            Default: False.

    Examples:
        >>> LogDensityMode(propto=True, jacobian=True)
        LogDensityMode(propto=True, jacobian=True)
        >>> len(list(LogDensityMode.all()))
        4
    """

    propto: bool = False
    """Drop normalizing constants."""

    jacobian: bool = False
    """Add the log Jacobian of the inverse transform."""

    def __post_init__(self) -> None:
        for name in ("propto", "jacobian"):
            value = getattr(self, name)
            if not isinstance(value, (bool, np.bool_)):
                raise TypeError(f"{name} must be a bool, got {type(value).__module__}.{type(value).__qualname__}.")
            # numpy booleans are stored as plain bools.
            object.__setattr__(self, name, bool(value))

    @classmethod
    def all(cls) -> Iterator["LogDensityMode"]:
        """Iterate over the four valid modes."""
        for propto in (False, True):
            for jacobian in (False, True):
                yield cls(propto=propto, jacobian=jacobian)
