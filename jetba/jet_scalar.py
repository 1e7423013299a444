"""Jet-vector operations with a plain scalar operand and element-wise functions.

Every function takes :class:`~jetba.jet_arith.JetData` operands and returns a
new :class:`~jetba.jet_arith.JetData`; the inputs are never modified. Gradient
rows follow the chain rule, and a jet with no gradient rows stays a plain
vector of scalars.
"""

from __future__ import annotations

import numpy as np

from jetba.jet_arith import JetData

__all__ = [
    "jet_add_scalar",
    "jet_sub_scalar",
    "jet_mul_scalar",
    "jet_div_scalar",
    "scalar_sub_jet",
    "scalar_div_jet",
    "abs_jet",
    "cos_jet",
    "sin_jet",
    "sqrt_jet",
]


def _scalar(jet: JetData, value) -> np.floating:
    """Return ``value`` as a scalar of the jet's floating type."""
    return jet.res.dtype.type(value)


def jet_add_scalar(f: JetData, g) -> JetData:
    """Return ``f + g``; the gradient is unchanged."""
    return JetData(f.res + _scalar(f, g), f.grad.copy())


def jet_sub_scalar(f: JetData, g) -> JetData:
    """Return ``f - g``; the gradient is unchanged."""
    return JetData(f.res - _scalar(f, g), f.grad.copy())


def jet_mul_scalar(f: JetData, g) -> JetData:
    """Return ``f * g``; values and gradient rows are both scaled."""
    factor = _scalar(f, g)
    return JetData(f.res * factor, f.grad * factor)


def jet_div_scalar(f: JetData, g) -> JetData:
    """Return ``f / g`` as multiplication by the reciprocal of ``g``.

    A zero divisor follows IEEE rules and yields infinities or NaNs.
    """
    with np.errstate(divide="ignore", invalid="ignore"):
        inverse = _scalar(f, 1.0) / _scalar(f, g)
        return JetData(f.res * inverse, f.grad * inverse)


def scalar_sub_jet(f, g: JetData) -> JetData:
    """Return ``f - g`` for a scalar ``f``; the gradient is negated."""
    return JetData(_scalar(g, f) - g.res, -g.grad)


def scalar_div_jet(f, g: JetData) -> JetData:
    """Return ``f / g`` for a scalar ``f``.

    The gradient is ``-f * g' / g**2``. Zero values in ``g`` follow IEEE rules.
    """
    numerator = _scalar(g, f)
    with np.errstate(divide="ignore", invalid="ignore"):
        res = numerator / g.res
        grad = -g.grad * numerator / (g.res * g.res)
    return JetData(res, grad)


def abs_jet(f: JetData) -> JetData:
    """Return ``|f|``.

    Each item is multiplied by +1 when its value is positive and by -1
    otherwise, so an item whose value is exactly zero has its gradient negated.
    """
    mask = np.where(f.res > 0, 1.0, -1.0).astype(f.res.dtype)
    return JetData(f.res * mask, f.grad * mask)


def cos_jet(f: JetData) -> JetData:
    """Return ``cos(f)`` with gradient ``-sin(f) * f'``."""
    return JetData(np.cos(f.res), -np.sin(f.res) * f.grad)


def sin_jet(f: JetData) -> JetData:
    """Return ``sin(f)`` with gradient ``cos(f) * f'``."""
    return JetData(np.sin(f.res), np.cos(f.res) * f.grad)


def sqrt_jet(f: JetData) -> JetData:
    """Return ``sqrt(f)`` with gradient ``0.5 * f' / sqrt(f)``.

    Negative values give NaN and zero values give infinite gradients.
    """
    with np.errstate(divide="ignore", invalid="ignore"):
        res = np.sqrt(f.res)
        grad = f.res.dtype.type(0.5) * f.grad / res
    return JetData(res, grad)