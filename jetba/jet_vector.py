"""A vector of forward-mode jets with operator overloading.

A :class:`JetVector` holds ``n_item`` values and, for each of ``grad_shape``
directions, a gradient row of the same length. A vector with a gradient
shape of zero is a plain vector of scalars. A *pure scalar* is a single
number wrapped as a jet vector; it combines with any other vector as that
number.
"""

from __future__ import annotations

import enum
import math
import numbers
import operator
from typing import Callable

import numpy as np

from jetba.jet_arith import (
    JetData,
    vector_add_vector,
    vector_div_vector,
    vector_mul_vector,
    vector_sub_vector,
)
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

__all__ = ["Device", "JetVector"]


class Device(enum.IntEnum):
    """Where the data of a jet vector lives."""

    CPU = 0


def _is_real(value) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _scalar_apply(op: Callable, a, b) -> float:
    with np.errstate(all="ignore"):
        return float(op(np.float64(a), np.float64(b)))


def _unary_scalar(func: Callable, value: float) -> float:
    with np.errstate(all="ignore"):
        return float(func(np.float64(value)))


class JetVector:
    """Values with gradient rows, combined element-wise by the chain rule."""

    def __init__(self, grad_shape: int = 0) -> None:
        if grad_shape < 0:
            raise ValueError(f"gradient shape must not be negative: {grad_shape}")
        self._n = int(grad_shape)
        self._res: list[float] = []
        self._grad: list[list[float]] = [[] for _ in range(self._n)]
        self._grad_position = -1
        self._device = Device.CPU
        self._pure_scalar_flag = False
        self._pure_scalar = 0.0

    @classmethod
    def from_scalar(cls, value) -> "JetVector":
        """Return a pure scalar that acts as ``value`` in every operation."""
        jet = cls()
        jet._pure_scalar_flag = True
        jet._pure_scalar = float(value)
        return jet

    # --- state -----------------------------------------------------------

    @property
    def grad_shape(self) -> int:
        """Number of gradient rows."""
        return self._n

    @property
    def n_item(self) -> int:
        """Number of values held."""
        return len(self._res)

    @property
    def grad_position(self) -> int:
        """Gradient row that appended values are seeded in, or -1."""
        return self._grad_position

    @property
    def device(self) -> Device:
        """The device the data lives on."""
        return self._device

    @property
    def is_pure_scalar(self) -> bool:
        """True for a vector made by :meth:`from_scalar`."""
        return self._pure_scalar_flag

    @property
    def pure_scalar(self) -> float:
        """The number a pure scalar stands for."""
        return self._pure_scalar

    @property
    def res(self) -> np.ndarray:
        """A copy of the values."""
        return np.array(self._res, dtype=np.float64)

    @property
    def grad(self) -> np.ndarray:
        """A copy of the gradient rows, shaped ``(grad_shape, n_item)``."""
        return np.array(self._grad, dtype=np.float64).reshape(self._n, len(self._res))

    def set_grad_shape(self, n: int) -> None:
        """Set the number of gradient rows of a vector that has none yet."""
        if self._n != 0:
            raise RuntimeError(
                "Can not set Grad Shape on a working JetVector, "
                "use 'clear()' method first."
            )
        if n < 0:
            raise ValueError(f"gradient shape must not be negative: {n}")
        self._n = int(n)
        self._grad = [[0.0] * len(self._res) for _ in range(self._n)]

    def set_grad_position(self, position: int) -> None:
        """Choose the gradient row that appended values are seeded in."""
        if self._grad_position != -1 or not self.is_empty():
            raise RuntimeError(
                "Can not set Grad Position on a working JetVector, "
                "use 'clear()' method first."
            )
        self._grad_position = int(position)

    def append_jet(self, value, n: int | None = None) -> None:
        """Append one value.

        With ``n`` given, the new item's gradient is one in row ``n`` and zero
        elsewhere; a row index outside the gradient shape gives an all-zero
        gradient. Without ``n``, the item is seeded in the row chosen by
        :meth:`set_grad_position`.
        """
        if n is None:
            if self._n != 0 and self._grad_position < 0:
                raise RuntimeError(
                    "JetVector needs a gradient position to append a value "
                    "without an explicit gradient row."
                )
            seed = self._grad_position
        else:
            if self._n == 0:
                raise RuntimeError(
                    "JetVector does not allow insert Jet "
                    "while the gradient shape is not initialized."
                )
            seed = n
        self._res.append(float(value))
        for i, row in enumerate(self._grad):
            row.append(1.0 if i == seed else 0.0)

    def clear(self) -> None:
        """Drop all values and gradient rows."""
        self._res = []
        self._grad = []
        self._n = 0

    def is_empty(self) -> bool:
        """True when no values are held."""
        return not self._res

    def init_as(self, template: "JetVector") -> None:
        """Size an empty vector like ``template``, filled with zeros."""
        if template is self:
            return
        if not self.is_empty():
            raise RuntimeError("You can not init a vector that is not empty.")
        self._device = template._device
        self._n = template._n
        size = len(template._res)
        self._res = [0.0] * size
        self._grad = [[0.0] * len(row) for row in template._grad]

    def to(self, device) -> "JetVector":
        """Move the data to ``device`` and return this vector."""
        Device(device)
        return self.cpu()

    def cpu(self) -> "JetVector":
        """Make sure the data lives on the host and return this vector."""
        self._device = Device.CPU
        return self

    def copy(self) -> "JetVector":
        """Return an independent copy."""
        other = JetVector(self._n)
        other._res = list(self._res)
        other._grad = [list(row) for row in self._grad]
        other._grad_position = self._grad_position
        other._device = self._device
        other._pure_scalar_flag = self._pure_scalar_flag
        other._pure_scalar = self._pure_scalar
        return other

    # --- helpers ---------------------------------------------------------

    def _jet(self) -> JetData:
        return JetData(
            np.array(self._res, dtype=np.float64),
            np.array(self._grad, dtype=np.float64).reshape(self._n, len(self._res)),
        )

    @staticmethod
    def _wrap(jet: JetData) -> "JetVector":
        out = JetVector(jet.grad_shape)
        out._res = jet.res.tolist()
        out._grad = jet.grad.tolist()
        return out

    def _assign(self, result: "JetVector") -> "JetVector":
        self._n = result._n
        self._res = result._res
        self._grad = result._grad
        self._pure_scalar_flag = result._pure_scalar_flag
        self._pure_scalar = result._pure_scalar
        return self

    def _combine(self, other, op, vec_fn, jet_scalar, scalar_jet):
        if isinstance(other, JetVector):
            if self._pure_scalar_flag and other._pure_scalar_flag:
                return JetVector.from_scalar(
                    _scalar_apply(op, self._pure_scalar, other._pure_scalar)
                )
            if self._pure_scalar_flag:
                return self._wrap(scalar_jet(self._pure_scalar, other._jet()))
            if other._pure_scalar_flag:
                return self._wrap(jet_scalar(self._jet(), other._pure_scalar))
            return self._wrap(vec_fn(self._jet(), other._jet()))
        if _is_real(other):
            if self._pure_scalar_flag:
                return JetVector.from_scalar(_scalar_apply(op, self._pure_scalar, other))
            return self._wrap(jet_scalar(self._jet(), other))
        return NotImplemented

    def _rcombine(self, other, op, scalar_jet):
        if not _is_real(other):
            return NotImplemented
        if self._pure_scalar_flag:
            return JetVector.from_scalar(_scalar_apply(op, other, self._pure_scalar))
        return self._wrap(scalar_jet(other, self._jet()))

    def _unary(self, jet_fn, scalar_fn) -> "JetVector":
        if self._pure_scalar_flag:
            return JetVector.from_scalar(_unary_scalar(scalar_fn, self._pure_scalar))
        return self._wrap(jet_fn(self._jet()))

    def _inplace(self, result) -> "JetVector":
        if result is NotImplemented:
            return NotImplemented
        return self._assign(result)

    # --- arithmetic ------------------------------------------------------

    def __add__(self, other):
        return self._combine(
            other, operator.add, vector_add_vector, jet_add_scalar,
            lambda s, j: jet_add_scalar(j, s),
        )

    def __radd__(self, other):
        return self._rcombine(other, operator.add, lambda s, j: jet_add_scalar(j, s))

    def __sub__(self, other):
        return self._combine(
            other, operator.sub, vector_sub_vector, jet_sub_scalar, scalar_sub_jet
        )

    def __rsub__(self, other):
        return self._rcombine(other, operator.sub, scalar_sub_jet)

    def __mul__(self, other):
        return self._combine(
            other, operator.mul, vector_mul_vector, jet_mul_scalar,
            lambda s, j: jet_mul_scalar(j, s),
        )

    def __rmul__(self, other):
        return self._rcombine(other, operator.mul, lambda s, j: jet_mul_scalar(j, s))

    def __truediv__(self, other):
        return self._combine(
            other, operator.truediv, vector_div_vector, jet_div_scalar, scalar_div_jet
        )

    def __rtruediv__(self, other):
        return self._rcombine(other, operator.truediv, scalar_div_jet)

    def __neg__(self):
        return self.scalar_sub_this(0.0)

    def __iadd__(self, other):
        return self._inplace(self.__add__(other))

    def __isub__(self, other):
        return self._inplace(self.__sub__(other))

    def __imul__(self, other):
        return self._inplace(self.__mul__(other))

    def __itruediv__(self, other):
        return self._inplace(self.__truediv__(other))

    def __abs__(self):
        return self._unary(abs_jet, np.abs)

    def scalar_sub_this(self, f) -> "JetVector":
        """Return ``f - self`` for a scalar ``f``."""
        result = self._rcombine(f, operator.sub, scalar_sub_jet)
        if result is NotImplemented:
            raise TypeError(f"expected a real number, got {type(f).__name__}")
        return result

    def scalar_div_this(self, f) -> "JetVector":
        """Return ``f / self`` for a scalar ``f``."""
        result = self._rcombine(f, operator.truediv, scalar_div_jet)
        if result is NotImplemented:
            raise TypeError(f"expected a real number, got {type(f).__name__}")
        return result

    def sin(self) -> "JetVector":
        """Return the element-wise sine."""
        return self._unary(sin_jet, np.sin)

    def cos(self) -> "JetVector":
        """Return the element-wise cosine."""
        return self._unary(cos_jet, np.cos)

    def sqrt(self) -> "JetVector":
        """Return the element-wise square root."""
        return self._unary(sqrt_jet, np.sqrt)

    def __str__(self) -> str:
        parts = ["[Res: [ ", "".join(f"{v:g}, " for v in self._res), "],\n"]
        for i, row in enumerate(self._grad):
            parts.append(f"Grad[{i}]: [ ")
            parts.append("".join(f"{v:g}, " for v in row))
            parts.append("],\n")
        parts.append(f"_device: {int(self._device)}]")
        return "".join(parts)

    def __repr__(self) -> str:
        if self._pure_scalar_flag:
            return f"JetVector.from_scalar({self._pure_scalar!r})"
        return f"<JetVector n_item={self.n_item} grad_shape={self._n}>"


# math is used for parity checks of pure scalars in callers; keep the name bound
_ = math