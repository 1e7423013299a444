"""Direct solution of sparse symmetric linear systems.

The matrix comes in compressed sparse row form, of which only the lower
triangle (entries whose column is not past their row) is read; the rest
follows by symmetry.
"""

from __future__ import annotations

import warnings

import numpy as np
import scipy.sparse as sp
from scipy.sparse.linalg import MatrixRankWarning, spsolve

__all__ = ["solve_sparse_symmetric"]


def solve_sparse_symmetric(values, col_indices, row_ptr, b, rows, cols) -> np.ndarray:
    """Solve ``A x = b`` for the symmetric matrix ``A`` given by its lower triangle.

    Raises :class:`numpy.linalg.LinAlgError` when ``A`` is singular.
    """
    if rows != cols:
        raise ValueError(f"matrix must be square, got {rows} by {cols}")
    rhs = np.asarray(b, dtype=np.float64).reshape(-1)
    if rhs.size != rows:
        raise ValueError(f"right-hand side has {rhs.size} entries, {rows} are needed")
    row_ptr = np.asarray(row_ptr, dtype=np.int64)
    if row_ptr.size != rows + 1:
        raise ValueError(f"row pointer must have {rows + 1} entries, got {row_ptr.size}")
    nnz = int(row_ptr[-1])
    data = np.asarray(values, dtype=np.float64)[:nnz]
    indices = np.asarray(col_indices, dtype=np.int64)[:nnz]
    matrix = sp.csr_matrix((data, indices, row_ptr), shape=(rows, cols))
    lower = sp.tril(matrix, format="csc")
    full = (lower + sp.triu(lower.T, k=1)).tocsc()
    with warnings.catch_warnings():
        warnings.simplefilter("error", MatrixRankWarning)
        try:
            solution = spsolve(full, rhs)
        except MatrixRankWarning as exc:
            raise np.linalg.LinAlgError("matrix is singular") from exc
    solution = np.atleast_1d(np.asarray(solution, dtype=np.float64))
    if not np.all(np.isfinite(solution)):
        raise np.linalg.LinAlgError("matrix is singular")
    return solution