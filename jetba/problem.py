"""A bundle-adjustment problem: vertices, edges and the Hessian pattern.

Edges are shared out between workers. Every worker but the last is
handed ``n_item // world_size + 1`` edges, and each worker records which
cameras and points its edges connect. The free parameters of all vertices
can be gathered into one flat vector and written back after a solve.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from jetba.edge import BaseEdge
from jetba.hessian_entrance import HessianEntrance
from jetba.vertex import BaseVertex, VertexKind

__all__ = ["ProblemOption", "Problem"]


@dataclass
class ProblemOption:
    """Settings of a problem."""

    use_schur: bool = True
    device_used: list[int] = field(default_factory=lambda: [0])
    n_item: int = -1


def _missing(vertex_id) -> KeyError:
    return KeyError(f"The ID {vertex_id} does not exist in the current graph.")


class Problem:
    """Vertices and edges of a problem, with the pattern of its Hessian."""

    def __init__(self, option: ProblemOption) -> None:
        if not option.device_used:
            raise ValueError("at least one device must be used")
        self._option = option
        self._vertices: dict[int, BaseVertex] = {}
        self._vertices_sets: dict[VertexKind, dict[BaseVertex, None]] = {}
        self._edges: list[BaseEdge] = []
        self._split_size = 0
        self._working_device = 0
        self._hessian_entrances: list[HessianEntrance] = []
        if option.use_schur:
            if option.n_item < 0:
                raise ValueError("the number of items must be known to use Schur")
            self._split_size = option.n_item // len(option.device_used) + 1
            self._hessian_entrances = [HessianEntrance() for _ in option.device_used]

    @property
    def option(self) -> ProblemOption:
        """The settings the problem was made with."""
        return self._option

    @property
    def edges(self) -> list[BaseEdge]:
        """The edges added so far."""
        return list(self._edges)

    @property
    def vertices_sets(self) -> dict[VertexKind, list[BaseVertex]]:
        """Vertices linked by edges, grouped by kind in kind order."""
        return {
            kind: list(self._vertices_sets[kind])
            for kind in sorted(self._vertices_sets)
        }

    @property
    def hessian_entrances(self) -> list[HessianEntrance]:
        """The Hessian pattern recorded for each worker."""
        return self._hessian_entrances

    @property
    def hessian_shape(self) -> int:
        """Number of free parameters over all vertices."""
        return sum(
            len(group) * _entries(group)
            for group in self._ordered_groups()
            if not _first(group).fixed
        )

    def append_vertex(self, vertex_id: int, vertex: BaseVertex) -> None:
        """Register ``vertex`` under ``vertex_id``; an existing ID is kept."""
        self._vertices.setdefault(vertex_id, vertex)

    def append_edge(self, edge: BaseEdge) -> None:
        """Add ``edge`` and record the connections it makes."""
        use_schur = self._option.use_schur
        if use_schur:
            if len(edge) != 2:
                raise ValueError(
                    f"a Schur problem needs edges of two vertices, got {len(edge)}"
                )
            if any(v.kind() not in (VertexKind.CAMERA, VertexKind.POINT) for v in edge):
                raise ValueError("a Schur problem needs camera and point vertices")
            if self._working_device >= len(self._hessian_entrances):
                raise RuntimeError(
                    f"more edges than the {self._option.n_item} items planned"
                )
        self._edges.append(edge)
        for index in reversed(range(len(edge))):
            vertex = edge[index]
            kind = vertex.kind()
            self._vertices_sets.setdefault(kind, {})[vertex] = None
            if not use_schur:
                continue
            for device, entrance in enumerate(self._hessian_entrances):
                entrance.dim[kind] = vertex.grad_shape()
                row = entrance.nra[kind].setdefault(vertex, {})
                if device == self._working_device:
                    row[edge[1 ^ index]] = None
        if use_schur:
            entrance = self._hessian_entrances[self._working_device]
            entrance.counter += 1
            if entrance.counter >= self._split_size:
                self._working_device += 1

    def get_vertex(self, vertex_id: int) -> BaseVertex:
        """Return the vertex registered under ``vertex_id``."""
        try:
            return self._vertices[vertex_id]
        except KeyError:
            raise _missing(vertex_id) from None

    def erase_vertex(self, vertex_id: int) -> None:
        """Remove a vertex and the edges that link it."""
        vertex = self._vertices.pop(vertex_id, None)
        if vertex is None:
            raise _missing(vertex_id)
        self._edges = [e for e in self._edges if not e.exist_vertex(vertex)]
        for group in self._vertices_sets.values():
            group.pop(vertex, None)

    def build_random_access(self) -> None:
        """Freeze the Hessian pattern of every worker into lists."""
        for entrance in self._hessian_entrances:
            entrance.build_random_access()

    def set_absolute_position(self) -> np.ndarray:
        """Number the vertices of each kind and gather their free parameters.

        Returns the flat parameter vector, kind by kind, each estimation
        taken in column-major order. Kinds whose vertices are fixed are
        numbered but contribute nothing.
        """
        chunks = []
        for group in self._ordered_groups():
            fixed = _first(group).fixed
            size = _entries(group)
            for position, vertex in enumerate(group):
                vertex.absolute_position = position
                if not fixed:
                    chunks.append(vertex.estimation.ravel(order="F")[:size])
        if not chunks:
            return np.empty(0, dtype=np.float64)
        return np.concatenate(chunks).astype(np.float64)

    def write_back(self, x) -> None:
        """Store the parameter vector ``x`` back into the vertex estimations."""
        values = np.asarray(x, dtype=np.float64).reshape(-1)
        if values.size != self.hessian_shape:
            raise ValueError(
                f"expected {self.hessian_shape} parameters, got {values.size}"
            )
        offset = 0
        for group in self._ordered_groups():
            if _first(group).fixed:
                continue
            size = _entries(group)
            for vertex in group:
                shape = vertex.estimation.shape
                flat = vertex.estimation.ravel(order="F").copy()
                flat[:size] = values[offset:offset + size]
                vertex.estimation = flat.reshape(shape, order="F")
                offset += size

    def _ordered_groups(self) -> list[list[BaseVertex]]:
        return [
            list(self._vertices_sets[kind])
            for kind in sorted(self._vertices_sets)
            if self._vertices_sets[kind]
        ]


def _first(group: list[BaseVertex]) -> BaseVertex:
    return group[0]


def _entries(group: list[BaseVertex]) -> int:
    return int(_first(group).estimation.size)