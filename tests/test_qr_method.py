"""Tests for the QR eigenvalue solver."""

import logging

import numpy as np
import pytest

from eigen_lab.algorithms.matrices import create_matrix_with_complex_pair, create_test_matrix
from eigen_lab.algorithms.qr_method import (
    QRMethod,
    complex_pair_eigenvalues,
    extract_eigenvalues,
    is_quasi_triangular,
    sort_by_magnitude,
)
from eigen_lab.data.scalar_types import ScalarType
from eigen_lab.exceptions import InvalidInputError, NotImplementedSolverError

SYMMETRIC = np.array([[2.0, 1.0], [1.0, 2.0]])
HERMITIAN = np.array([[3, 3 - 2j], [3 + 2j, 2]])
ROTATION = np.array([[0.0, -1.0], [1.0, 0.0]])


class TestComplexPairEigenvalues:
    """Tests for the 2x2 quadratic formula."""

    def test_conjugate_pair(self) -> None:
        """[[1, -2], [2, 1]] has eigenvalues 1 ± 2i."""
        first, second = complex_pair_eigenvalues(np.array([[1.0, -2.0], [2.0, 1.0]]))
        assert first == pytest.approx(1 + 2j)
        assert second == pytest.approx(1 - 2j)

    def test_real_pair(self) -> None:
        """Blocks with real eigenvalues should give real results."""
        values = complex_pair_eigenvalues(SYMMETRIC)
        assert values == pytest.approx((3.0, 1.0))

    def test_complex_block(self) -> None:
        """Complex blocks should be handled in complex arithmetic."""
        values = complex_pair_eigenvalues(HERMITIAN)
        assert sorted(v.real for v in values) == pytest.approx([-1.14005, 6.14005], abs=1e-5)


class TestExtractEigenvalues:
    """Tests for reading eigenvalues off a quasi-triangular matrix."""

    def test_upper_triangular(self) -> None:
        """Triangular matrices should yield their diagonal."""
        matrix = np.array([[1.0, 2.0, 3.0], [0.0, 4.0, 5.0], [0.0, 0.0, 6.0]])
        np.testing.assert_allclose(extract_eigenvalues(matrix, 1e-6), [1.0, 4.0, 6.0])

    def test_block_then_diagonal(self) -> None:
        """A leading 2x2 block should be taken as a pair."""
        matrix = np.array([[1.0, -2.0, 7.0], [2.0, 1.0, 8.0], [0.0, 0.0, 5.0]])
        values = extract_eigenvalues(matrix, 1e-6)
        np.testing.assert_allclose(values, [1 + 2j, 1 - 2j, 5.0])

    def test_small_subdiagonal_ignored(self) -> None:
        """Sub-diagonal entries below tolerance should not form a block."""
        matrix = np.array([[3.0, 1.0], [1e-9, 1.0]])
        np.testing.assert_allclose(extract_eigenvalues(matrix, 1e-6), [3.0, 1.0])

    def test_complex_modulus_compared(self) -> None:
        """Complex sub-diagonals should be compared by modulus."""
        # |8e-7 + 8e-7j| > 1e-6 although both parts are below it
        matrix = np.array([[1.0, 1.0], [8e-7 + 8e-7j, 2.0]])
        values = extract_eigenvalues(matrix, 1e-6)
        assert values.size == 2
        assert values[0].real == pytest.approx(2.0, abs=1e-5)

    def test_always_complex(self) -> None:
        """Result should be complex128 whatever the input dtype."""
        values = extract_eigenvalues(np.eye(2, dtype=np.float32), 1e-6)
        assert values.dtype == np.complex128


class TestQuasiTriangular:
    """Tests for is_quasi_triangular."""

    def test_small_matrices(self) -> None:
        """1x1 and 2x2 matrices are always reduced."""
        assert is_quasi_triangular(np.ones((1, 1)), 1e-6)
        assert is_quasi_triangular(ROTATION, 1e-6)

    def test_isolated_block(self) -> None:
        """A single large sub-diagonal entry is a 2x2 block."""
        matrix = np.array([[1.0, 0.0, 0.0], [1.0, 1.0, 0.0], [0.0, 0.0, 1.0]])
        assert is_quasi_triangular(matrix, 1e-6)

    def test_consecutive_entries(self) -> None:
        """Two adjacent large sub-diagonal entries form a 3x3 block."""
        matrix = np.array([[1.0, 0.0, 0.0], [1.0, 1.0, 0.0], [0.0, 1.0, 1.0]])
        assert not is_quasi_triangular(matrix, 1e-6)


class TestSortByMagnitude:
    """Tests for sort_by_magnitude."""

    def test_descending(self) -> None:
        """Largest magnitude first."""
        values = np.array([1.0, -3.0, 2j], dtype=np.complex128)
        np.testing.assert_array_equal(sort_by_magnitude(values), [-3.0, 2j, 1.0])

    def test_stable_for_ties(self) -> None:
        """Equal magnitudes should keep their order."""
        values = np.array([1j, -1j, 0.5], dtype=np.complex128)
        np.testing.assert_array_equal(sort_by_magnitude(values), [1j, -1j, 0.5])


class TestQRMethod:
    """Tests for QRMethod."""

    @pytest.mark.parametrize(
        "scalar_type,atol",
        [(ScalarType.FLOAT64, 1e-6), (ScalarType.FLOAT32, 1e-5)],
    )
    def test_symmetric(self, scalar_type, atol) -> None:
        """[[2, 1], [1, 2]] has eigenvalues 3 and 1, largest first."""
        solver = QRMethod(scalar_type, max_iterations=200)
        solver.set_matrix(SYMMETRIC)
        solver.solve()

        eigenvalues = solver.get_eigenvalues()
        assert abs(eigenvalues[0]) == pytest.approx(3.0, abs=atol)
        assert abs(eigenvalues[1]) == pytest.approx(1.0, abs=atol)

    def test_runs_exact_budget(self) -> None:
        """QR always performs max_iterations steps."""
        solver = QRMethod(max_iterations=37, record_history=True)
        solver.set_matrix(SYMMETRIC)
        result = solver.solve()

        assert result.iterations == 37
        assert len(result.history) == 37
        assert result.converged
        assert result.eigenvectors is None

    def test_history_decreases(self) -> None:
        """Sub-diagonal magnitude should shrink on a symmetric matrix."""
        solver = QRMethod(max_iterations=20, record_history=True)
        solver.set_matrix(SYMMETRIC)
        history = solver.solve().history
        assert history[-1] < history[0]

    def test_eigenvectors_not_supported(self) -> None:
        """get_eigenvectors should always raise."""
        solver = QRMethod(max_iterations=10)
        with pytest.raises(NotImplementedSolverError, match="QR"):
            solver.get_eigenvectors()

        solver.set_matrix(SYMMETRIC)
        solver.solve()
        with pytest.raises(NotImplementedError):
            solver.get_eigenvectors()

    def test_rotation_gives_conjugate_pair(self) -> None:
        """A 90-degree rotation has eigenvalues ±i."""
        solver = QRMethod(max_iterations=50)
        solver.set_matrix(ROTATION)
        eigenvalues = solver.solve().eigenvalues

        pair = sorted(eigenvalues, key=lambda z: z.imag)
        assert pair == pytest.approx([-1j, 1j], abs=1e-12)

    def test_real_matrix_with_complex_pair(self) -> None:
        """Real dominant eigenvalue first, then the conjugate pair."""
        matrix = create_matrix_with_complex_pair(1.0, 2.0, [5.0], seed=1)
        solver = QRMethod(max_iterations=1000)
        solver.set_matrix(matrix)
        result = solver.solve()

        assert result.converged
        assert result.eigenvalues[0] == pytest.approx(5.0, abs=1e-6)
        pair = sorted(result.eigenvalues[1:], key=lambda z: z.imag)
        assert pair == pytest.approx([1 - 2j, 1 + 2j], abs=1e-6)

    def test_complex_hermitian(self) -> None:
        """Largest eigenvalue of the Hermitian test matrix is 6.14005."""
        solver = QRMethod(ScalarType.COMPLEX128, max_iterations=200)
        solver.set_matrix(HERMITIAN)
        eigenvalues = solver.solve().eigenvalues

        assert eigenvalues[0].real == pytest.approx(6.14005, abs=1e-5)
        assert eigenvalues[0].imag == pytest.approx(0.0, abs=1e-9)
        assert eigenvalues[1].real == pytest.approx(-1.14005, abs=1e-5)

    def test_known_spectrum(self) -> None:
        """Full spectrum of a generated symmetric matrix."""
        problem = create_test_matrix(6, 10.0, spectrum="geometric", seed=42)
        solver = QRMethod(max_iterations=500)
        solver.set_matrix(problem.matrix)
        eigenvalues = solver.solve().eigenvalues
        np.testing.assert_allclose(eigenvalues, problem.eigenvalues, atol=1e-8)

    def test_unsorted_keeps_diagonal_order(self) -> None:
        """With sorting off, eigenvalues come in diagonal order."""
        matrix = np.diag([1.0, 3.0])
        unsorted = QRMethod(max_iterations=5, sort_eigenvalues=False)
        unsorted.set_matrix(matrix)
        np.testing.assert_allclose(unsorted.solve().eigenvalues, [1.0, 3.0])

        ordered = QRMethod(max_iterations=5)
        ordered.set_matrix(matrix)
        np.testing.assert_allclose(ordered.solve().eigenvalues, [3.0, 1.0])

    def test_unreduced_matrix_warns(self, caplog) -> None:
        """A cyclic permutation never reduces; the result says so."""
        matrix = np.array([[0.0, 0.0, 1.0], [1.0, 0.0, 0.0], [0.0, 1.0, 0.0]])
        solver = QRMethod(max_iterations=10)
        solver.set_matrix(matrix)

        with caplog.at_level(logging.WARNING, logger="eigen_lab"):
            result = solver.solve()

        assert not result.converged
        assert "not reduced" in caplog.text

    def test_input_is_not_modified(self) -> None:
        """solve() should work on a copy of the stored matrix."""
        solver = QRMethod(max_iterations=20)
        solver.set_matrix(SYMMETRIC)
        solver.solve()
        np.testing.assert_array_equal(solver.matrix, SYMMETRIC)

    def test_invalid_matrices(self) -> None:
        """Empty and non-square matrices should be rejected."""
        solver = QRMethod()
        with pytest.raises(InvalidInputError, match="empty"):
            solver.set_matrix(np.empty((0, 0)))
        with pytest.raises(InvalidInputError, match="square"):
            solver.set_matrix(np.ones((3, 2)))

    def test_solve_without_matrix(self) -> None:
        """solve() before set_matrix() should raise."""
        with pytest.raises(InvalidInputError, match="No matrix"):
            QRMethod().solve()

    def test_single_entry(self) -> None:
        """A 1x1 matrix is its own eigenvalue."""
        solver = QRMethod(max_iterations=3)
        solver.set_matrix([[-4.0]])
        result = solver.solve()
        np.testing.assert_allclose(result.eigenvalues, [-4.0])
        assert result.residual == 0.0
