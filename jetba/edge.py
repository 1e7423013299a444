"""Edges of an optimisation graph.

An edge links vertices and carries a measurement and an information
matrix. Concrete edges implement :meth:`BaseEdge.forward`, which computes
the residual from the batched jets of a whole family of edges at once.
"""

from __future__ import annotations

import abc
import enum

import numpy as np

from jetba.vertex import BaseVertex, EdgeWrapper

__all__ = ["EdgeKind", "BaseEdge"]


def _as_matrix(value) -> np.ndarray:
    array = np.array(value, dtype=np.float64)
    if array.ndim == 0:
        return array.reshape(1, 1)
    if array.ndim == 1:
        return array.reshape(-1, 1)
    if array.ndim != 2:
        raise ValueError(f"expected a matrix, got an array of shape {array.shape}")
    return array


class EdgeKind(enum.IntEnum):
    """How the vertices of an edge family are arranged."""

    ONE = 0
    ONE_CAMERA_ONE_POINT = 1
    TWO_CAMERA = 2
    MULTI = 3


class BaseEdge(abc.ABC):
    """An edge over an ordered list of vertices."""

    def __init__(self) -> None:
        self._data: list[BaseVertex] = []
        self._edge_wrapper = EdgeWrapper()
        self._measurement = np.empty((0, 0), dtype=np.float64)
        self._information = np.empty((0, 0), dtype=np.float64)

    def __len__(self) -> int:
        return len(self._data)

    def __getitem__(self, index) -> BaseVertex:
        return self._data[index]

    def __iter__(self):
        return iter(self._data)

    def append_vertex(self, vertex: BaseVertex) -> None:
        """Link ``vertex`` as the next vertex of this edge."""
        self._data.append(vertex)

    def exist_vertex(self, vertex: BaseVertex) -> bool:
        """True when this very vertex object is linked by the edge."""
        return any(v is vertex for v in self._data)

    @abc.abstractmethod
    def forward(self):
        """Return the residual computed from the batched vertex jets."""

    def set_measurement(self, measurement) -> None:
        """Store the measurement matrix of this edge."""
        self._measurement = _as_matrix(measurement)

    def set_information(self, information) -> None:
        """Store the information matrix of this edge."""
        self._information = _as_matrix(information)

    @property
    def measurement(self) -> np.ndarray:
        """The measurement of this single edge."""
        return self._measurement

    @property
    def information(self) -> np.ndarray:
        """The information matrix of this single edge."""
        return self._information

    def bind_edge_vector(self, edge_vector) -> None:
        """Bind the batched data of the family this edge belongs to."""
        self._edge_wrapper.bind_edge_vector(edge_vector)

    @property
    def vertices(self) -> EdgeWrapper:
        """Batched jets of the vertex slots, for use in :meth:`forward`."""
        return self._edge_wrapper

    @property
    def jet_measurement(self):
        """Batched measurement jets, for use in :meth:`forward`."""
        return self._edge_wrapper.measurement