import numpy as np
import pytest

from modeleval.io import DictVarContext
from modeleval.io.var_context import VarContext


@pytest.fixture
def context():
    return DictVarContext(
        {
            "mu": 1.5,
            "matrix": np.array([[1.0, 2.0], [3.0, 4.0]]),
            "counts": np.array([1, 2, 3]),
            "n": 4,
        }
    )


def test_satisfies_protocol(context):
    assert isinstance(context, VarContext)


def test_scalar_real(context):
    assert context.contains_r("mu")
    assert context.vals_r("mu") == [1.5]
    assert context.dims_r("mu") == []


def test_values_are_column_major(context):
    assert context.vals_r("matrix") == [1.0, 3.0, 2.0, 4.0]
    assert context.dims_r("matrix") == [2, 2]


def test_integers_readable_as_reals(context):
    assert context.contains_r("counts")
    assert context.vals_r("counts") == [1.0, 2.0, 3.0]


def test_integer_variables(context):
    assert context.contains_i("counts")
    assert context.vals_i("counts") == [1, 2, 3]
    assert context.dims_i("n") == []
    assert not context.contains_i("mu")


def test_real_is_not_an_integer_variable(context):
    with pytest.raises(KeyError):
        context.vals_i("mu")
    with pytest.raises(KeyError):
        context.dims_i("matrix")


def test_missing_variable(context):
    assert not context.contains_r("sigma")
    with pytest.raises(KeyError, match="sigma"):
        context.vals_r("sigma")


def test_non_numeric_rejected():
    with pytest.raises(TypeError):
        DictVarContext({"label": "abc"})


def test_param_names(context):
    assert context.param_names() == ["mu", "matrix", "counts", "n"]
