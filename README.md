# jetba

`jetba` provides building blocks for bundle-adjustment problems. It has these parts:

- **Jet vectors** (`jetba.jet_vector.JetVector`). A jet vector is a batch of forward-mode jets: a vector of values plus `grad_shape` gradient rows of the same length.
  - Arithmetic applies the chain rule. Supported operations are `+`, `-`, `*` and `/`, with another jet vector or with a real number. `+=`, `-=`, `*=` and `/=` are also supported, as are unary minus and `abs`. Jet vectors also have `sin()`, `cos()` and `sqrt()`.
  - `JetVector.from_scalar(value)` wraps one number. The result acts as that number in every operation.
  - Data lives on the host only: `Device` has the single member `CPU`.
  - The element-wise kernels work on `JetData` (values and gradients as numpy arrays). They live in `jetba.jet_arith`:
    - `vector_add_vector`
    - `vector_sub_vector`
    - `vector_mul_vector`
    - `vector_div_vector`
  - More kernels live in `jetba.jet_scalar`:
    - `jet_add_scalar`, `jet_sub_scalar`, `jet_mul_scalar`, `jet_div_scalar`
    - `scalar_sub_jet`, `scalar_div_jet`
    - `abs_jet`, `sin_jet`, `cos_jet`, `sqrt_jet`
- **Vertices** (`jetba.vertex`).
  - `BaseVertex`, `CameraVertex` and `PointVertex` hold an estimation matrix and an observation matrix, plus a `fixed` flag. Vectors given to them are stored as columns.
  - `VertexVector` gathers the vertices of one edge slot. Each matrix entry becomes a `JetVector`, with entries taken in column-major order.
  - `VertexWrapper` and `EdgeWrapper` give an edge a read-only view of those batches.
- **Edges** (`jetba.edge`). `BaseEdge` is the abstract base for residual models. It links vertices and stores a measurement and an information matrix. Subclasses implement `forward()`. `EdgeKind` names the arrangements of vertices in an edge family.
- **Problem assembly** (`jetba.problem`, `jetba.hessian_entrance`). `Problem`, configured by `ProblemOption`, does the following:
  - It registers vertices by ID and adds edges.
  - With `use_schur`, it records which cameras and points each worker's edges connect. The record goes into one `HessianEntrance` per entry of `device_used`.
  - It packs the free parameters of all vertices into one flat vector with `set_absolute_position()`. `write_back(x)` stores such a vector back into the vertices.
- **Solver descriptors** (`jetba.solvers`). Each solver class tells which kinds it uses, through three methods:
  - `linear_system_kind()` returns a `LinearSystemKind`.
  - `solver_kind()` returns a `SolverKind`.
  - `compute_kind()` returns a `ComputeKind`.

  The classes are `BaseSolver`, `PCGSolver`, `SchurSolver`, `SchurPCGSolver` and `ImplicitSchurPCGSolver`.
- **Sparse solve** (`jetba.linear_solver.solve_sparse_symmetric`). It solves `A x = b` for a symmetric matrix given in CSR form.
  - Only the lower triangle of the matrix is read.
  - A singular matrix raises `numpy.linalg.LinAlgError`.
- **Work splitting** (`jetba.memory_pool`). `item_num(rank, n_item, world_size)` and `split_items(n_item, world_size)` share items among workers. Every worker except the last takes `n_item // world_size + 1` items, and the last worker takes the rest.

## Installation

```
pip install jetba
```

To install with the test dependencies:

```
pip install "jetba[test]"
```

## Example: differentiating through jet arithmetic

```python
from jetba.jet_vector import JetVector

x = JetVector(2)            # two gradient rows
x.append_jet(3.0, 0)        # value 3, seeded in row 0
x.append_jet(4.0, 1)        # value 4, seeded in row 1

y = x * x + 1.0
print(y.res)                # [10. 17.]
print(y.grad)               # [[6. 0.]
                            #  [0. 8.]]
```

## Example: assembling a problem

```python
from jetba.edge import BaseEdge
from jetba.problem import Problem, ProblemOption
from jetba.vertex import CameraVertex, PointVertex


class MyEdge(BaseEdge):
    def forward(self):
        return self.vertices[0].estimation


problem = Problem(ProblemOption(use_schur=True, device_used=[0], n_item=1))
camera = CameraVertex([1.0, 2.0])
point = PointVertex([3.0, 4.0, 5.0])
problem.append_vertex(0, camera)
problem.append_vertex(1, point)

edge = MyEdge()
edge.append_vertex(camera)
edge.append_vertex(point)
problem.append_edge(edge)

x = problem.set_absolute_position()      # [1. 2. 3. 4. 5.], cameras first
problem.write_back(x + 0.5)              # camera estimation becomes [[1.5], [2.5]]

problem.build_random_access()
problem.hessian_entrances[0].ra          # [[[point]], [[camera]]]
```

## Example: solving a sparse symmetric system

```python
import numpy as np
from jetba.linear_solver import solve_sparse_symmetric

# [[4, 1], [1, 3]] in CSR form
values = np.array([4.0, 1.0, 1.0, 3.0])
col_indices = np.array([0, 1, 0, 1])
row_ptr = np.array([0, 2, 4])
x = solve_sparse_symmetric(values, col_indices, row_ptr, np.array([1.0, 2.0]), 2, 2)
```

## What the package does not do

`jetba` has no optimisation loop. Specifically:

- `Problem` does not evaluate residuals or build the normal equations.
- It does not run Levenberg–Marquardt or any other iteration.
- The solver classes only describe a solver. They hold their options and report their kinds, but solve nothing.
- Computation runs on the host only.
- There is no command-line tool.

## Running the tests

```
pytest
```