"""Block sparsity pattern of the reduced Hessian handled by one worker.

For each of the two vertex kinds (cameras first, then points) the entrance
records which vertices of the other kind every vertex is linked to. The
pattern is collected in ordered mappings while edges are added. It is then
frozen into plain lists for indexed access.
"""

from __future__ import annotations

from jetba.vertex import BaseVertex

__all__ = ["HessianEntrance"]


class HessianEntrance:
    """Connections between cameras and points seen by one worker."""

    def __init__(self) -> None:
        # vertex -> ordered set (dict keys) of connected vertices, per kind
        self.nra: list[dict[BaseVertex, dict[BaseVertex, None]]] = [{}, {}]
        self.ra: list[list[list[BaseVertex]]] = [[], []]
        self.counter = 0
        self.dim = [0, 0]

    def build_random_access(self) -> None:
        """Freeze the collected connections into lists of rows."""
        self.ra = [[list(row) for row in block.values()] for block in self.nra]