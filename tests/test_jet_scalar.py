import numpy as np
import pytest

from jetba.jet_arith import JetData, vector_div_vector, vector_mul_vector, vector_sub_vector
from jetba.jet_scalar import (
    abs_jet,
    cos_jet,
    jet_add_scalar,
    jet_div_scalar,
    jet_mul_scalar,
    jet_sub_scalar,
    scalar_div_jet,
    scalar_sub_jet,
    sin_jet,
    sqrt_jet,
)


@pytest.fixture
def jet():
    res = np.array([0.5, 1.5, 2.0, 3.25])
    grad = np.array(
        [
            [1.0, 0.0, 0.0, 0.5],
            [0.0, 1.0, 2.0, -1.0],
        ]
    )
    return JetData(res, grad)


def test_add_then_sub_round_trip(jet):
    back = jet_sub_scalar(jet_add_scalar(jet, 4.0), 4.0)
    np.testing.assert_allclose(back.res, jet.res)
    np.testing.assert_array_equal(back.grad, jet.grad)


def test_add_keeps_gradient_and_does_not_alias(jet):
    out = jet_add_scalar(jet, 2.0)
    np.testing.assert_array_equal(out.grad, jet.grad)
    out.grad[0, 0] = 99.0
    assert jet.grad[0, 0] == 1.0


def test_add_scalar_value(jet):
    out = jet_add_scalar(jet, 1.0)
    np.testing.assert_allclose(out.res, jet.res + 1.0)


def test_mul_then_div_round_trip(jet):
    back = jet_div_scalar(jet_mul_scalar(jet, 4.0), 4.0)
    np.testing.assert_allclose(back.res, jet.res)
    np.testing.assert_allclose(back.grad, jet.grad)


def test_mul_scales_gradient(jet):
    out = jet_mul_scalar(jet, -2.0)
    np.testing.assert_allclose(out.grad, jet.grad * -2.0)
    np.testing.assert_allclose(out.res, jet.res * -2.0)


def test_div_by_zero_gives_infinity():
    out = jet_div_scalar(JetData([1.0, -1.0], [[1.0, 1.0]]), 0.0)
    assert out.res[0] == np.inf
    assert out.res[1] == -np.inf
    np.testing.assert_array_equal(out.res, np.array([np.inf, -np.inf]))


def test_scalar_sub_jet_matches_vector_sub(jet):
    out = scalar_sub_jet(5.0, jet)
    expected = vector_sub_vector(JetData(np.full(jet.n_item, 5.0)), jet)
    np.testing.assert_allclose(out.res, expected.res)
    np.testing.assert_allclose(out.grad, expected.grad)


def test_scalar_sub_jet_negates_gradient(jet):
    out = scalar_sub_jet(0.0, jet)
    np.testing.assert_array_equal(out.grad, -jet.grad)
    np.testing.assert_array_equal(out.res, -jet.res)


def test_scalar_div_jet_matches_vector_div(jet):
    out = scalar_div_jet(3.0, jet)
    expected = vector_div_vector(JetData(np.full(jet.n_item, 3.0)), jet)
    np.testing.assert_allclose(out.res, expected.res)
    np.testing.assert_allclose(out.grad, expected.grad)


def test_scalar_div_jet_times_jet_is_constant(jet):
    product = vector_mul_vector(scalar_div_jet(3.0, jet), jet)
    np.testing.assert_allclose(product.res, np.full(jet.n_item, 3.0))
    np.testing.assert_allclose(product.grad, np.zeros_like(jet.grad), atol=1e-12)


def test_abs_of_negated_jet_restores_it(jet):
    negated = jet_mul_scalar(jet, -1.0)
    out = abs_jet(negated)
    np.testing.assert_allclose(out.res, jet.res)
    np.testing.assert_allclose(out.grad, jet.grad)


def test_abs_positive_is_identity(jet):
    out = abs_jet(jet)
    np.testing.assert_array_equal(out.res, jet.res)
    np.testing.assert_array_equal(out.grad, jet.grad)


def test_abs_at_zero_negates_gradient():
    out = abs_jet(JetData([0.0], [[1.0]]))
    assert out.res[0] == 0.0
    assert out.grad[0, 0] == -1.0


def test_sin_cos_pythagorean_identity(jet):
    s = sin_jet(jet)
    c = cos_jet(jet)
    total = vector_mul_vector(s, s)
    total_c = vector_mul_vector(c, c)
    np.testing.assert_allclose(total.res + total_c.res, np.ones(jet.n_item))
    np.testing.assert_allclose(
        total.grad + total_c.grad, np.zeros_like(jet.grad), atol=1e-12
    )


def test_sin_cos_at_zero():
    zero = JetData([0.0], [[1.0]])
    s = sin_jet(zero)
    c = cos_jet(zero)
    assert s.res[0] == 0.0
    assert s.grad[0, 0] == 1.0
    assert c.res[0] == 1.0
    assert c.grad[0, 0] == 0.0


def test_sqrt_squared_restores_jet(jet):
    root = sqrt_jet(jet)
    squared = vector_mul_vector(root, root)
    np.testing.assert_allclose(squared.res, jet.res)
    np.testing.assert_allclose(squared.grad, jet.grad)


def test_sqrt_negative_is_nan():
    out = sqrt_jet(JetData([-1.0], [[1.0]]))
    np.testing.assert_array_equal(out.res, np.array([np.nan]))
    np.testing.assert_array_equal(out.grad, np.array([[np.nan]]))


@pytest.mark.parametrize(
    "op",
    [
        lambda f: jet_add_scalar(f, 2.0),
        lambda f: jet_mul_scalar(f, 2.0),
        lambda f: scalar_sub_jet(2.0, f),
        sin_jet,
        cos_jet,
        sqrt_jet,
        abs_jet,
    ],
)
def test_scalar_vector_stays_scalar(op):
    out = op(JetData([1.0, 4.0]))
    assert out.grad_shape == 0
    assert out.n_item == 2


def test_float32_dtype_preserved():
    f = JetData(np.array([1.0, 4.0], dtype=np.float32), np.ones((1, 2), dtype=np.float32))
    for out in (jet_mul_scalar(f, 2.0), sqrt_jet(f), scalar_div_jet(1.0, f)):
        assert out.res.dtype == np.float32
        assert out.grad.dtype == np.float32


def test_inputs_unchanged(jet):
    before_res = jet.res.copy()
    before_grad = jet.grad.copy()
    jet_mul_scalar(jet, 3.0)
    sqrt_jet(jet)
    abs_jet(jet)
    np.testing.assert_array_equal(jet.res, before_res)
    np.testing.assert_array_equal(jet.grad, before_grad)