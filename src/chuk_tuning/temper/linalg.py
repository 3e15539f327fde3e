"""
Integer linear algebra for temperaments.

Matrices are lists of rows. Entries are Python ints (or Fractions for
the exact lattice reduction) so nothing overflows no matter how large
the mapping or comma coordinates get.

- hnf / hnf_with_transform: row-style Hermite normal form
- kernel / cokernel / saturate: integer null spaces
- preimage: generators dual to a saturated mapping
- lll_transform: lattice reduction returning the unimodular transform
"""

from __future__ import annotations

from fractions import Fraction
from typing import Sequence

from chuk_tuning.constants import ErrorMessages
from chuk_tuning.errors import ReductionError

Matrix = list[list[int]]

# Gram-Schmidt norms below this are treated as zero in floating point reduction
_EPSILON = 1e-12

LLL_DELTA = Fraction(3, 4)


def identity(n: int) -> Matrix:
    return [[int(i == j) for j in range(n)] for i in range(n)]


def transpose(matrix: Sequence[Sequence[int]], width: int = 0) -> Matrix:
    """Transpose a matrix (width is the row length of an empty matrix)."""
    if not matrix:
        return [[] for _ in range(width)]
    return [list(column) for column in zip(*matrix)]


def prune_zero_rows(matrix: Matrix) -> Matrix:
    return [row for row in matrix if any(row)]


def _subtract_row(matrix: Matrix, target: int, source: int, factor: int) -> None:
    if factor:
        row = matrix[source]
        matrix[target] = [a - factor * b for a, b in zip(matrix[target], row)]


def hnf_with_transform(matrix: Sequence[Sequence[int]]) -> tuple[Matrix, Matrix]:
    """
    Hermite normal form with the unimodular transform that produces it.

    Pivots are positive and the entries above each pivot are reduced into
    [0, pivot). Zero rows end up at the bottom.

    Args:
        matrix: Integer matrix as a list of rows

    Returns:
        (H, U) with U @ matrix == H and det(U) == +-1
    """
    h = [[int(x) for x in row] for row in matrix]
    m = len(h)
    n = len(h[0]) if m else 0
    u = identity(m)
    pivot = 0
    for column in range(n):
        if pivot >= m:
            break
        while True:
            candidates = [i for i in range(pivot, m) if h[i][column]]
            if not candidates:
                break
            smallest = min(candidates, key=lambda i: abs(h[i][column]))
            h[pivot], h[smallest] = h[smallest], h[pivot]
            u[pivot], u[smallest] = u[smallest], u[pivot]
            done = True
            for i in range(pivot + 1, m):
                if h[i][column]:
                    q = h[i][column] // h[pivot][column]
                    _subtract_row(h, i, pivot, q)
                    _subtract_row(u, i, pivot, q)
                    if h[i][column]:
                        done = False
            if done:
                break
        if not h[pivot][column]:
            continue
        if h[pivot][column] < 0:
            h[pivot] = [-x for x in h[pivot]]
            u[pivot] = [-x for x in u[pivot]]
        p = h[pivot][column]
        for i in range(pivot):
            q = h[i][column] // p
            _subtract_row(h, i, pivot, q)
            _subtract_row(u, i, pivot, q)
        pivot += 1
    return h, u


def hnf(matrix: Sequence[Sequence[int]]) -> Matrix:
    """Hermite normal form of an integer matrix."""
    return hnf_with_transform(matrix)[0]


def kernel(matrix: Sequence[Sequence[int]], width: int | None = None) -> Matrix:
    """
    Integer basis of the right null space {x : matrix @ x == 0}.

    The basis is saturated: every integer vector of the null space is an
    integer combination of the returned rows.

    Args:
        matrix: Integer matrix as a list of rows
        width: Number of columns (required when the matrix has no rows)
    """
    if width is None:
        width = len(matrix[0]) if matrix else 0
    if not matrix:
        return identity(width)
    h, u = hnf_with_transform(transpose(matrix))
    return [u[i] for i, row in enumerate(h) if not any(row)]


def cokernel(matrix: Sequence[Sequence[int]], height: int | None = None) -> Matrix:
    """
    Integer basis of the left null space {y : y @ matrix == 0}.

    Args:
        matrix: Integer matrix as a list of rows
        height: Number of rows (required when the matrix has no columns)
    """
    if height is None:
        height = len(matrix)
    width = len(matrix[0]) if matrix else 0
    if not width:
        return identity(height)
    return kernel(transpose(matrix), height)


def saturate(matrix: Sequence[Sequence[int]], width: int | None = None) -> Matrix:
    """Remove contorsion: the smallest saturated lattice containing the rows."""
    if width is None:
        width = len(matrix[0]) if matrix else 0
    return kernel(kernel(matrix, width), width)


def preimage(mapping: Sequence[Sequence[int]]) -> Matrix:
    """
    Generators dual to a saturated mapping.

    Returns:
        One integer vector per mapping row with mapping @ g_j == e_j

    Raises:
        ReductionError: If the mapping is contorted (not saturated)
    """
    rank = len(mapping)
    if not rank:
        return []
    h, u = hnf_with_transform(transpose(mapping))
    for i in range(rank):
        if h[i] != [int(i == j) for j in range(rank)]:
            raise ReductionError(ErrorMessages.CONTORTED_MAPPING)
    return u[:rank]


# =============================================================================
# Lattice reduction
# =============================================================================


def _dot(a: Sequence, b: Sequence):
    return sum(x * y for x, y in zip(a, b))


def _gram_schmidt(vectors: list[list], exact: bool) -> tuple[list[list], list]:
    ortho: list[list] = []
    norms: list = []
    for vector in vectors:
        o = list(vector)
        for basis_vector, norm in zip(ortho, norms):
            coefficient = _dot(vector, basis_vector) / norm
            o = [x - coefficient * y for x, y in zip(o, basis_vector)]
        norm = _dot(o, o)
        if (exact and norm == 0) or (not exact and norm <= _EPSILON):
            raise ReductionError(ErrorMessages.BASIS_DEPENDENT)
        ortho.append(o)
        norms.append(norm)
    return ortho, norms


def _mu(vectors: list[list], ortho: list[list], norms: list) -> list[list]:
    return [
        [_dot(vectors[i], ortho[j]) / norms[j] if j < i else 0 for j in range(len(vectors))]
        for i in range(len(vectors))
    ]


def lll_transform(
    vectors: Sequence[Sequence], weights: Sequence[float] | None = None
) -> Matrix:
    """
    Lenstra-Lenstra-Lovasz reduction of a lattice basis (delta = 3/4).

    Without weights the reduction runs in exact rational arithmetic. With
    weights every coordinate is scaled by its weight and the reduction
    runs in floating point.

    Args:
        vectors: Basis vectors as rows (ints or Fractions)
        weights: Optional per-coordinate weights

    Returns:
        Unimodular U such that U @ vectors is the reduced basis

    Raises:
        ReductionError: If the vectors are linearly dependent
    """
    exact = weights is None
    if weights is None:
        b = [[Fraction(x) for x in row] for row in vectors]
        delta: Fraction | float = LLL_DELTA
        half: Fraction | float = Fraction(1, 2)
    else:
        b = [[float(x) * w for x, w in zip(row, weights)] for row in vectors]
        delta = float(LLL_DELTA)
        half = 0.5
    n = len(b)
    u = identity(n)
    if n < 2:
        if n == 1:
            _gram_schmidt(b, exact)
        return u
    ortho, norms = _gram_schmidt(b, exact)
    mu = _mu(b, ortho, norms)
    k = 1
    while k < n:
        for j in range(k - 1, -1, -1):
            if abs(mu[k][j]) > half:
                q = round(mu[k][j])
                b[k] = [x - q * y for x, y in zip(b[k], b[j])]
                u[k] = [x - q * y for x, y in zip(u[k], u[j])]
                for i in range(j):
                    mu[k][i] -= q * mu[j][i]
                mu[k][j] -= q
        if norms[k] >= (delta - mu[k][k - 1] ** 2) * norms[k - 1]:
            k += 1
        else:
            b[k], b[k - 1] = b[k - 1], b[k]
            u[k], u[k - 1] = u[k - 1], u[k]
            ortho, norms = _gram_schmidt(b, exact)
            mu = _mu(b, ortho, norms)
            k = max(k - 1, 1)
    return u


def apply_transform(transform: Matrix, vectors: Sequence[Sequence]) -> list[list]:
    """Compute transform @ vectors."""
    width = len(vectors[0]) if vectors else 0
    return [
        [sum((c * vectors[j][col] for j, c in enumerate(row) if c), Fraction(0)) for col in range(width)]
        for row in transform
    ]
