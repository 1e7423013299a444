"""Element-wise arithmetic on forward-mode jets stored as value/gradient arrays.

A jet vector holds ``n_item`` values together with ``grad_shape`` gradient
rows, each row as long as the value array. A jet vector with no gradient
rows is a plain vector of scalars: it takes part in arithmetic but carries
no derivative information.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

__all__ = [
    "JetData",
    "vector_add_vector",
    "vector_sub_vector",
    "vector_mul_vector",
    "vector_div_vector",
]


def _as_float_array(values, dtype=None) -> np.ndarray:
    array = np.asarray(values, dtype=dtype)
    if not np.issubdtype(array.dtype, np.floating):
        array = array.astype(np.float64)
    return array


@dataclass
class JetData:
    """Values of a jet vector and the gradient rows that go with them."""

    res: np.ndarray
    grad: np.ndarray = field(default=None)  # type: ignore[assignment]

    def __post_init__(self) -> None:
        self.res = _as_float_array(self.res).reshape(-1)
        if self.grad is None:
            self.grad = np.empty((0, self.res.size), dtype=self.res.dtype)
        else:
            grad = _as_float_array(self.grad, dtype=self.res.dtype)
            if grad.ndim == 1 and grad.size == 0:
                grad = grad.reshape(0, self.res.size)
            if grad.ndim != 2 or grad.shape[1] != self.res.size:
                raise ValueError(
                    f"gradient of shape {grad.shape} does not fit "
                    f"{self.res.size} values"
                )
            self.grad = grad

    @property
    def grad_shape(self) -> int:
        """Number of gradient rows; zero for a plain scalar vector."""
        return self.grad.shape[0]

    @property
    def n_item(self) -> int:
        """Number of values held."""
        return self.res.size

    @property
    def is_scalar(self) -> bool:
        """True when no gradient rows are carried."""
        return self.grad_shape == 0

    def copy(self) -> "JetData":
        """Return an independent copy."""
        return JetData(self.res.copy(), self.grad.copy())


def _check_operands(f: JetData, g: JetData) -> None:
    if f.n_item != g.n_item:
        raise ValueError(
            f"operands hold different numbers of items: {f.n_item} and {g.n_item}"
        )
    if not f.is_scalar and not g.is_scalar and f.grad_shape != g.grad_shape:
        raise ValueError(
            f"operands have different gradient shapes: "
            f"{f.grad_shape} and {g.grad_shape}"
        )


def _scalar_result(res: np.ndarray) -> JetData:
    return JetData(res)


def vector_add_vector(f: JetData, g: JetData) -> JetData:
    """Return ``f + g``, carrying gradients of whichever operands have them."""
    _check_operands(f, g)
    res = f.res + g.res
    if not f.is_scalar and not g.is_scalar:
        return JetData(res, f.grad + g.grad)
    if not f.is_scalar:
        return JetData(res, f.grad.copy())
    if not g.is_scalar:
        return JetData(res, g.grad.copy())
    return _scalar_result(res)


def vector_sub_vector(f: JetData, g: JetData) -> JetData:
    """Return ``f - g``, carrying gradients of whichever operands have them."""
    _check_operands(f, g)
    res = f.res - g.res
    if not f.is_scalar and not g.is_scalar:
        return JetData(res, f.grad - g.grad)
    if not f.is_scalar:
        return JetData(res, f.grad.copy())
    if not g.is_scalar:
        return JetData(res, -g.grad)
    return _scalar_result(res)


def vector_mul_vector(f: JetData, g: JetData) -> JetData:
    """Return ``f * g`` using the product rule for the gradients."""
    _check_operands(f, g)
    res = f.res * g.res
    if not f.is_scalar and not g.is_scalar:
        return JetData(res, f.res * g.grad + f.grad * g.res)
    if not f.is_scalar:
        return JetData(res, f.grad * g.res)
    if not g.is_scalar:
        return JetData(res, g.grad * f.res)
    return _scalar_result(res)


def vector_div_vector(f: JetData, g: JetData) -> JetData:
    """Return ``f / g`` using the quotient rule for the gradients.

    Division by zero follows IEEE rules and yields infinities or NaNs.
    """
    _check_operands(f, g)
    with np.errstate(divide="ignore", invalid="ignore"):
        if f.is_scalar and g.is_scalar:
            return _scalar_result(f.res / g.res)
        inv_ga = 1.0 / g.res
        res = f.res * inv_ga
        if not f.is_scalar and not g.is_scalar:
            grad = (f.grad - f.res * inv_ga * g.grad) * inv_ga
        elif not f.is_scalar:
            grad = f.grad * inv_ga
        else:
            grad = -f.res * inv_ga * g.grad * inv_ga
    return JetData(res, grad)