"""Vertices of an optimisation graph and the jet vectors that batch them.

A :class:`VertexVector` gathers the vertices that fill one slot of a family
of edges. Every entry of the vertices' estimation matrices becomes one
:class:`~jetba.jet_vector.JetVector` whose items run over the vertices, so
an edge's residual can be evaluated for the whole family at once.
Matrix entries are visited in column-major order.
"""

from __future__ import annotations

import enum

import numpy as np

from jetba.jet_vector import JetVector

__all__ = [
    "VertexKind",
    "BaseVertex",
    "CameraVertex",
    "PointVertex",
    "VertexVector",
    "VertexWrapper",
    "EdgeWrapper",
]


def _as_matrix(value) -> np.ndarray:
    """Return ``value`` as a two-dimensional float array; vectors become columns."""
    if value is None:
        return np.empty((0, 0), dtype=np.float64)
    array = np.array(value, dtype=np.float64)
    if array.ndim == 0:
        return array.reshape(1, 1)
    if array.ndim == 1:
        return array.reshape(-1, 1)
    if array.ndim != 2:
        raise ValueError(f"expected a matrix, got an array of shape {array.shape}")
    return array


def _column_major(matrix: np.ndarray) -> np.ndarray:
    return matrix.ravel(order="F")


def _jet_matrix(rows: int, cols: int) -> np.ndarray:
    if rows < 0 or cols < 0:
        raise ValueError(f"matrix shape must not be negative: ({rows}, {cols})")
    matrix = np.empty((rows, cols), dtype=object)
    for index in np.ndindex(rows, cols):
        matrix[index] = JetVector()
    return matrix


def _drop_item(jet: JetVector, index: int) -> JetVector:
    """Return a jet vector holding the items of ``jet`` except ``index``."""
    rebuilt = JetVector(jet.grad_shape)
    rebuilt.set_grad_position(jet.grad_position)
    seed_explicitly = rebuilt.grad_shape != 0 and rebuilt.grad_position < 0
    for value in np.delete(jet.res, index):
        if seed_explicitly:
            rebuilt.append_jet(value, -1)
        else:
            rebuilt.append_jet(value)
    return rebuilt


class VertexKind(enum.IntEnum):
    """Role of a vertex in a bundle-adjustment graph."""

    CAMERA = 0
    POINT = 1
    NONE = 2


class BaseVertex:
    """A graph vertex holding an estimation and an observation matrix.

    Vertices hash by identity, so distinct vertices stay distinct in sets
    and dictionaries even when their estimations are equal.
    """

    def __init__(self, estimation=None, observation=None, fixed: bool = False) -> None:
        self._estimation = _as_matrix(estimation)
        self._observation = _as_matrix(observation)
        self.fixed = bool(fixed)
        self.absolute_position = 0

    @property
    def estimation(self) -> np.ndarray:
        """The current estimate, as a matrix."""
        return self._estimation

    @estimation.setter
    def estimation(self, value) -> None:
        self._estimation = _as_matrix(value)

    @property
    def observation(self) -> np.ndarray:
        """The observation attached to the vertex, as a matrix."""
        return self._observation

    @observation.setter
    def observation(self, value) -> None:
        self._observation = _as_matrix(value)

    def grad_shape(self) -> int:
        """Number of free parameters: zero when fixed, else the estimation size."""
        return 0 if self.fixed else int(self._estimation.size)

    def kind(self) -> VertexKind:
        """The role of this vertex."""
        return VertexKind.NONE

    def __eq__(self, other):
        if not isinstance(other, BaseVertex):
            return NotImplemented
        return bool(np.array_equal(self._estimation, other._estimation))

    __hash__ = object.__hash__

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(estimation={self._estimation.tolist()!r}, "
            f"fixed={self.fixed!r})"
        )


class CameraVertex(BaseVertex):
    """A vertex holding camera parameters."""

    def kind(self) -> VertexKind:
        return VertexKind.CAMERA


class PointVertex(BaseVertex):
    """A vertex holding a landmark."""

    def kind(self) -> VertexKind:
        return VertexKind.POINT


class VertexVector:
    """The vertices filling one slot of a family of edges, batched into jets."""

    def __init__(self, fixed: bool = False) -> None:
        self.fixed = bool(fixed)
        self._data: list[BaseVertex] = []
        self._counter: dict[int, int] = {}
        self._jv_estimation = _jet_matrix(0, 0)
        self._jv_observation = _jet_matrix(0, 0)

    def __len__(self) -> int:
        return len(self._data)

    def __getitem__(self, index):
        return self._data[index]

    def __iter__(self):
        return iter(self._data)

    @property
    def jv_estimation(self) -> np.ndarray:
        """Matrix of jet vectors batching the estimations."""
        return self._jv_estimation

    @property
    def jv_observation(self) -> np.ndarray:
        """Matrix of jet vectors batching the observations."""
        return self._jv_observation

    def resize_jv_estimation(self, rows: int, cols: int) -> None:
        """Make the estimation jets a fresh ``rows`` by ``cols`` matrix."""
        self._jv_estimation = _jet_matrix(rows, cols)

    def resize_jv_observation(self, rows: int, cols: int) -> None:
        """Make the observation jets a fresh matrix without gradients."""
        self._jv_observation = _jet_matrix(rows, cols)
        for jet in _column_major(self._jv_observation):
            jet.set_grad_shape(0)

    def set_grad_shape_and_offset(self, n: int, offset: int) -> None:
        """Give entry ``(i, j)`` gradient row ``offset + i * cols + j`` of ``n``.

        A fixed vector gets no gradient rows at all.
        """
        rows, cols = self._jv_estimation.shape
        for (i, j), jet in np.ndenumerate(self._jv_estimation):
            jet.set_grad_shape(0 if self.fixed else n)
            jet.set_grad_position(-1 if self.fixed else offset + i * cols + j)

    def push_back(self, vertex: BaseVertex) -> None:
        """Append ``vertex`` and its values to every jet."""
        estimation = _column_major(vertex.estimation)
        observation = _column_major(vertex.observation)
        if estimation.size < self._jv_estimation.size:
            raise ValueError(
                f"estimation has {estimation.size} entries, "
                f"{self._jv_estimation.size} are needed"
            )
        if observation.size < self._jv_observation.size:
            raise ValueError(
                f"observation has {observation.size} entries, "
                f"{self._jv_observation.size} are needed"
            )
        self._data.append(vertex)
        key = id(vertex)
        self._counter[key] = self._counter.get(key, 0) + 1
        for jet, value in zip(_column_major(self._jv_estimation), estimation):
            jet.append_jet(value)
        for jet, value in zip(_column_major(self._jv_observation), observation):
            jet.append_jet(value)

    def erase(self, index: int) -> None:
        """Remove the vertex at ``index`` and its item from every jet."""
        if not -len(self._data) <= index < len(self._data):
            raise IndexError(f"vertex index {index} out of range")
        index %= len(self._data)
        for matrix in (self._jv_estimation, self._jv_observation):
            for position, jet in np.ndenumerate(matrix):
                matrix[position] = _drop_item(jet, index)
        vertex = self._data.pop(index)
        key = id(vertex)
        if self._counter[key] == 1:
            del self._counter[key]
        else:
            self._counter[key] -= 1

    def exist_vertex(self, vertex: BaseVertex) -> bool:
        """True when this very vertex object has been pushed."""
        return id(vertex) in self._counter

    def cpu(self) -> None:
        """Make sure every jet's data lives on the host."""
        for matrix in (self._jv_estimation, self._jv_observation):
            for jet in _column_major(matrix):
                jet.cpu()

    def grad_shape(self) -> int:
        """Free parameters per vertex: zero when fixed."""
        return 0 if self.fixed else int(self._jv_estimation.size)


class VertexWrapper:
    """Read-only view of one slot's batched estimation and observation."""

    def __init__(self, estimation=None, observation=None) -> None:
        self._estimation = estimation
        self._observation = observation

    @property
    def estimation(self):
        """The batched estimation jets."""
        return self._estimation

    @property
    def observation(self):
        """The batched observation jets."""
        return self._observation


class EdgeWrapper:
    """The view an edge has of its batched vertices and measurement.

    It binds to any object exposing ``vertex_vectors`` (a sequence of
    :class:`VertexVector`) and ``measurement`` (the batched measurement).
    """

    def __init__(self) -> None:
        self._data: list[VertexWrapper] = []
        self._measurement = None
        self._bound = False

    def __getitem__(self, index) -> VertexWrapper:
        return self._data[index]

    def __len__(self) -> int:
        return len(self._data)

    @property
    def measurement(self):
        """The batched measurement of the bound edge family."""
        if not self._bound:
            raise RuntimeError("edge wrapper is not bound to an edge vector")
        return self._measurement

    def bind_edge_vector(self, edge_vector) -> None:
        """Point at the batched data held by ``edge_vector``."""
        self._measurement = edge_vector.measurement
        self._data = [
            VertexWrapper(vv.jv_estimation, vv.jv_observation)
            for vv in edge_vector.vertex_vectors
        ]
        self._bound = True