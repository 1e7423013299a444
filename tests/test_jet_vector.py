import numpy as np
import pytest

from jetba.jet_vector import Device, JetVector


def make(values, grad_shape, row):
    jv = JetVector(grad_shape)
    for v in values:
        jv.append_jet(v, row)
    return jv


def plain(values):
    jv = JetVector(0)
    for v in values:
        jv.append_jet(v)
    return jv


def assert_same(a, b):
    assert a.grad_shape == b.grad_shape
    np.testing.assert_allclose(a.res, b.res)
    np.testing.assert_allclose(a.grad, b.grad)


def test_append_seeds_one_hot_gradient():
    x = make([1.5, 2.5], 3, 1)
    np.testing.assert_array_equal(x.res, [1.5, 2.5])
    np.testing.assert_array_equal(x.grad, [[0, 0], [1, 1], [0, 0]])
    assert x.n_item == 2


def test_append_without_row_uses_grad_position():
    x = JetVector(2)
    x.set_grad_position(0)
    x.append_jet(4.0)
    np.testing.assert_array_equal(x.grad, [[1.0], [0.0]])


def test_append_without_position_on_jet_raises():
    with pytest.raises(RuntimeError):
        JetVector(2).append_jet(1.0)


def test_append_with_row_needs_grad_shape():
    with pytest.raises(RuntimeError):
        JetVector(0).append_jet(1.0, 0)


def test_set_grad_shape_twice_raises():
    x = JetVector()
    x.set_grad_shape(2)
    assert x.grad_shape == 2
    with pytest.raises(RuntimeError):
        x.set_grad_shape(3)


def test_set_grad_position_on_working_vector_raises():
    x = make([1.0], 1, 0)
    with pytest.raises(RuntimeError):
        x.set_grad_position(0)


def test_clear_empties():
    x = make([1.0, 2.0], 2, 0)
    x.clear()
    assert x.is_empty()
    assert x.grad_shape == 0
    assert x.n_item == 0


def test_init_as_copies_shape_with_zeros():
    t = make([1.0, 2.0, 3.0], 2, 0)
    x = JetVector()
    x.init_as(t)
    assert x.grad_shape == t.grad_shape
    assert x.n_item == t.n_item
    assert not x.res.any()
    assert not x.grad.any()


def test_init_as_non_empty_raises():
    x = make([1.0], 1, 0)
    with pytest.raises(RuntimeError):
        x.init_as(make([2.0], 1, 0))


def test_to_cpu_returns_self():
    x = make([1.0], 1, 0)
    assert x.to(Device.CPU) is x
    assert x.device is Device.CPU


def test_to_unknown_device_raises():
    with pytest.raises(ValueError):
        make([1.0], 1, 0).to(7)


def test_copy_is_independent():
    x = make([1.0, 2.0], 1, 0)
    y = x.copy()
    y += 1.0
    np.testing.assert_array_equal(x.res, [1.0, 2.0])
    assert_same(y - 1.0, x)


def test_add_then_sub_round_trip():
    x = make([1.0, 2.0], 2, 0)
    y = make([3.0, -4.0], 2, 1)
    assert_same((x + y) - y, x)


def test_mul_then_div_round_trip():
    x = make([1.0, 2.0], 2, 0)
    y = make([3.0, -4.0], 2, 1)
    assert_same((x * y) / y, x)


def test_square_gradient_is_twice_value():
    x = make([3.0, -1.0], 1, 0)
    sq = x * x
    np.testing.assert_allclose(sq.res, x.res * x.res)
    np.testing.assert_allclose(sq.grad[0], 2 * x.res)


def test_scalar_multiplication_matches_addition():
    x = make([1.0, 2.5], 2, 1)
    assert_same(2.0 * x, x + x)
    assert_same(x * 2.0, x + x)


def test_negation():
    x = make([1.0, -2.0], 2, 0)
    assert_same(-(-x), x)
    assert_same(-x, x.scalar_sub_this(0.0))
    assert_same(x + (-x), x * 0.0)


def test_rsub_and_scalar_sub_this_agree():
    x = make([1.0, -2.0], 1, 0)
    assert_same(5.0 - x, x.scalar_sub_this(5.0))
    assert_same(5.0 - x, -(x - 5.0))


def test_rtruediv_inverts():
    x = make([2.0, -4.0], 1, 0)
    inv = 1.0 / x
    assert_same(inv, x.scalar_div_this(1.0))
    assert_same(inv * x, x / x)
    np.testing.assert_allclose((inv * x).res, np.ones(2))


def test_jet_plus_plain_vector_keeps_gradient():
    x = make([1.0, 2.0], 2, 0)
    p = plain([10.0, 20.0])
    s = x + p
    np.testing.assert_allclose(s.res, x.res + p.res)
    np.testing.assert_allclose(s.grad, x.grad)
    assert_same(p + x, s)


def test_shape_mismatch_raises():
    with pytest.raises(ValueError):
        make([1.0, 2.0], 1, 0) + make([1.0, 2.0, 3.0], 1, 0)


def test_pure_scalar_combines_as_number():
    x = make([1.0, 2.0], 1, 0)
    three = JetVector.from_scalar(3.0)
    assert_same(three * x, x * 3.0)
    assert_same(x - three, x - 3.0)
    assert_same(three - x, 3.0 - x)
    both = three + JetVector.from_scalar(4.0)
    assert both.is_pure_scalar
    assert both.pure_scalar == 7.0


def test_inplace_keeps_identity():
    x = make([1.0, 2.0], 1, 0)
    ref = x
    original = x.copy()
    x += original
    x -= original
    x *= 2.0
    x /= 2.0
    assert x is ref
    assert_same(x, original)


def test_sin_cos_identity():
    x = make([0.3, 1.2, -2.0], 2, 0)
    one = x.sin() * x.sin() + x.cos() * x.cos()
    np.testing.assert_allclose(one.res, np.ones(3))
    np.testing.assert_allclose(one.grad, np.zeros((2, 3)), atol=1e-12)


def test_sqrt_squared_round_trip():
    x = make([4.0, 9.0, 2.0], 1, 0)
    r = x.sqrt()
    assert_same(r * r, x)


def test_abs_flips_negative_items():
    x = make([2.0, -3.0], 1, 0)
    a = abs(x)
    np.testing.assert_allclose(a.res, np.abs(x.res))
    np.testing.assert_allclose(a.grad[0], np.sign(x.res))


def test_str_format():
    x = make([1.0, 2.0], 2, 0)
    assert str(x) == (
        "[Res: [ 1, 2, ],\n"
        "Grad[0]: [ 1, 1, ],\n"
        "Grad[1]: [ 0, 0, ],\n"
        "_device: 0]"
    )


def test_unsupported_operand_raises_type_error():
    with pytest.raises(TypeError):
        make([1.0], 1, 0) + "a"