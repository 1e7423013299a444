"""Solver descriptions used to pick a linear system and its method.

The classes state which kind of linear system a solver works on, which
iterative method it uses and whether the system is formed explicitly.
"""

from __future__ import annotations

import enum

__all__ = [
    "LinearSystemKind",
    "SolverKind",
    "ComputeKind",
    "BaseSolver",
    "PCGSolver",
    "SchurSolver",
    "SchurPCGSolver",
    "ImplicitSchurPCGSolver",
]


class LinearSystemKind(enum.Enum):
    """Shape of the linear system a solver works on."""

    BASE_LINEAR_SYSTEM = enum.auto()
    SCHUR = enum.auto()


class SolverKind(enum.Enum):
    """Method used to solve the linear system."""

    BASE_SOLVER = enum.auto()
    PCG = enum.auto()


class ComputeKind(enum.Enum):
    """Whether the reduced system is formed or applied on the fly."""

    EXPLICIT = enum.auto()
    IMPLICIT = enum.auto()


class BaseSolver:
    """A solver bound to the options of a problem."""

    def __init__(self, problem_option, solver_option) -> None:
        self.problem_option = problem_option
        self.solver_option = solver_option

    def linear_system_kind(self) -> LinearSystemKind:
        return LinearSystemKind.BASE_LINEAR_SYSTEM

    def solver_kind(self) -> SolverKind:
        return SolverKind.BASE_SOLVER

    def compute_kind(self) -> ComputeKind:
        return ComputeKind.EXPLICIT


class PCGSolver(BaseSolver):
    """A solver using preconditioned conjugate gradients."""

    def solver_kind(self) -> SolverKind:
        return SolverKind.PCG


class SchurSolver(BaseSolver):
    """A solver working on the Schur complement system."""

    def linear_system_kind(self) -> LinearSystemKind:
        return LinearSystemKind.SCHUR


class SchurPCGSolver(PCGSolver, SchurSolver):
    """Conjugate gradients on an explicitly formed Schur complement."""


class ImplicitSchurPCGSolver(PCGSolver, SchurSolver):
    """Conjugate gradients on a Schur complement applied on the fly."""

    def compute_kind(self) -> ComputeKind:
        return ComputeKind.IMPLICIT