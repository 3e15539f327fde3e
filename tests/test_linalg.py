"""
Tests for integer linear algebra.
"""

from fractions import Fraction

import pytest

from chuk_tuning.errors import ReductionError
from chuk_tuning.temper.linalg import (
    apply_transform,
    cokernel,
    hnf,
    hnf_with_transform,
    kernel,
    lll_transform,
    preimage,
    prune_zero_rows,
    saturate,
    transpose,
)

MEANTONE = [[1, 0, -4], [0, 1, 4]]


def matmul(a, b):
    return [[sum(x * y for x, y in zip(row, column)) for column in zip(*b)] for row in a]


class TestHermiteNormalForm:
    """Tests for hnf and its transform."""

    def test_meantone(self) -> None:
        """12 & 19 reduce to the meantone mapping."""
        assert hnf([[12, 19, 28], [19, 30, 44]]) == MEANTONE

    def test_pivots_positive_and_reduced(self) -> None:
        """Entries above a pivot are reduced modulo the pivot."""
        assert hnf([[2, 3], [4, 5]]) == [[2, 0], [0, 1]]

    def test_zero_rows_last(self) -> None:
        """Dependent rows become zero rows at the bottom."""
        result = hnf([[1, 2], [2, 4], [0, 3]])
        assert result[-1] == [0, 0]
        assert prune_zero_rows(result) == [[1, 2], [0, 3]]

    def test_transform(self) -> None:
        """U @ M == H."""
        matrix = [[12, 19, 28], [19, 30, 44], [22, 35, 51]]
        h, u = hnf_with_transform(matrix)
        assert matmul(u, matrix) == h

    def test_empty(self) -> None:
        """The empty matrix is already in normal form."""
        assert hnf([]) == []


class TestNullSpaces:
    """Tests for kernel, cokernel and saturation."""

    def test_kernel(self) -> None:
        """The meantone kernel is the syntonic comma."""
        (comma,) = kernel(MEANTONE)
        assert comma in ([4, -4, 1], [-4, 4, -1])

    def test_kernel_annihilates(self) -> None:
        """Every kernel row maps to zero."""
        matrix = [[12, 19, 28, 34]]
        rows = kernel(matrix)
        assert len(rows) == 3
        for row in rows:
            assert matmul(matrix, [[x] for x in row]) == [[0]]

    def test_kernel_of_nothing(self) -> None:
        """Without rows every vector is in the kernel."""
        assert kernel([], 2) == [[1, 0], [0, 1]]

    def test_cokernel(self) -> None:
        """Vals tempering out 81/80 span meantone."""
        commas = transpose([[-4, 4, -1]])
        assert hnf(cokernel(commas)) == MEANTONE

    def test_cokernel_without_columns(self) -> None:
        """With no commas every val survives."""
        assert cokernel(transpose([], 2), 2) == [[1, 0], [0, 1]]

    def test_saturate(self) -> None:
        """Contorsion is removed."""
        assert hnf(saturate([[24, 38, 56]])) == [[12, 19, 28]]

    def test_transpose(self) -> None:
        """Rows become columns."""
        assert transpose([[1, 2, 3], [4, 5, 6]]) == [[1, 4], [2, 5], [3, 6]]
        assert transpose([], 3) == [[], [], []]


class TestPreimage:
    """Tests for preimage generators."""

    def test_meantone(self) -> None:
        """Octave and twelfth."""
        assert preimage(MEANTONE) == [[1, 0, 0], [0, 1, 0]]

    def test_dual(self) -> None:
        """mapping @ generator is the identity."""
        mapping = [[2, 3, 5, 6], [0, 1, -2, -2]]
        generators = preimage(mapping)
        assert matmul(mapping, transpose(generators)) == [[1, 0], [0, 1]]

    def test_contorted(self) -> None:
        """Contorted mappings have no integer preimage."""
        with pytest.raises(ReductionError):
            preimage([[2, 0, 0]])

    def test_empty(self) -> None:
        """Rank zero has no generators."""
        assert preimage([]) == []


class TestLLL:
    """Tests for lattice reduction."""

    def test_exact(self) -> None:
        """Size reduction of a skewed basis."""
        vectors = [[1, 0], [1, 1]]
        transform = lll_transform(vectors)
        assert transform == [[1, 0], [-1, 1]]
        assert apply_transform(transform, vectors) == [[1, 0], [0, 1]]

    def test_weighted(self) -> None:
        """Weighted reduction runs in floating point."""
        vectors = [[1, 0], [1, 1]]
        transform = lll_transform(vectors, [1.0, 1.585])
        assert apply_transform(transform, vectors) == [[1, 0], [0, 1]]

    def test_swap(self) -> None:
        """Short vectors move to the front."""
        vectors = [[10, 1], [1, 0]]
        reduced = apply_transform(lll_transform(vectors), vectors)
        assert reduced[0] in ([1, 0], [-1, 0])

    def test_unimodular(self) -> None:
        """The transform has determinant one in absolute value."""
        vectors = [[-4, 4, -1], [-15, 8, 1], [1, 0, 0]]
        u = lll_transform(vectors)
        determinant = (
            u[0][0] * (u[1][1] * u[2][2] - u[1][2] * u[2][1])
            - u[0][1] * (u[1][0] * u[2][2] - u[1][2] * u[2][0])
            + u[0][2] * (u[1][0] * u[2][1] - u[1][1] * u[2][0])
        )
        assert abs(determinant) == 1

    def test_dependent(self) -> None:
        """Dependent vectors cannot be reduced."""
        with pytest.raises(ReductionError):
            lll_transform([[1, 2], [2, 4]])

    def test_fractions(self) -> None:
        """Rational coordinates are accepted."""
        vectors = [[Fraction(1, 2), 0], [Fraction(1, 2), 1]]
        reduced = apply_transform(lll_transform(vectors), vectors)
        assert reduced == [[Fraction(1, 2), 0], [0, 1]]
