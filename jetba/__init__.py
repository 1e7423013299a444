"""Jet-vector automatic differentiation, graph vertices and edges, problem
assembly and a sparse symmetric solve for bundle adjustment."""

__version__ = "0.1.0"

__all__ = [
    "jet_arith",
    "jet_scalar",
    "jet_vector",
    "vertex",
    "edge",
    "memory_pool",
    "solvers",
    "hessian_entrance",
    "problem",
    "linear_solver",
]