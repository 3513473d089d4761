"""
Named-variable contexts used to seed unconstrained parameter values.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Protocol, runtime_checkable

import numpy as np


@runtime_checkable
class VarContext(Protocol):
    """
    Read-only store of named real and integer variables.

    Values are returned flattened in column-major order, together with the
    dimensions of the variable (an empty list for scalars).
    """

    def contains_r(self, name: str) -> bool:
        ...

    def vals_r(self, name: str) -> List[float]:
        ...

    def dims_r(self, name: str) -> List[int]:
        ...

    def contains_i(self, name: str) -> bool:
        ...

    def vals_i(self, name: str) -> List[int]:
        ...

    def dims_i(self, name: str) -> List[int]:
        ...


class DictVarContext:
    """
    ``VarContext`` backed by a mapping of names to scalars or arrays.

    Integer-typed arrays are integer variables; integers are also readable as
    reals, as they are in the modeling language.

    Examples:
        >>> context = DictVarContext({"xy": [0.5, 0.5], "n": 3})
        >>> context.vals_r("xy")
        [0.5, 0.5]
        >>> context.dims_i("n")
        []
    """

    def __init__(self, values: Mapping[str, Any]):
        self._values: Dict[str, np.ndarray] = {name: np.asarray(value) for name, value in values.items()}
        for name, value in self._values.items():
            if not (np.issubdtype(value.dtype, np.number) or value.dtype == bool):
                raise TypeError(f"Variable {name!r} must be numeric, got dtype {value.dtype}.")

    def _lookup(self, name: str) -> np.ndarray:
        try:
            return self._values[name]
        except KeyError:
            raise KeyError(f"Variable {name!r} not found in context.") from None

    def contains_r(self, name: str) -> bool:
        return name in self._values

    def contains_i(self, name: str) -> bool:
        return name in self._values and np.issubdtype(self._values[name].dtype, np.integer)

    def vals_r(self, name: str) -> List[float]:
        return self._lookup(name).flatten(order="F").astype(float).tolist()

    def vals_i(self, name: str) -> List[int]:
        if not self.contains_i(name):
            raise KeyError(f"Integer variable {name!r} not found in context.")
        return self._lookup(name).flatten(order="F").astype(int).tolist()

    def dims_r(self, name: str) -> List[int]:
        return list(self._lookup(name).shape)

    def dims_i(self, name: str) -> List[int]:
        if not self.contains_i(name):
            raise KeyError(f"Integer variable {name!r} not found in context.")
        return list(self._values[name].shape)

    def param_names(self) -> List[str]:
        return list(self._values)

    def __repr__(self) -> str:
        return f"DictVarContext({self.param_names()})"
