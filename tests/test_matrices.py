"""Tests for matrix generation utilities."""

import numpy as np
import pytest

from eigen_lab.algorithms.matrices import (
    DEFAULT_SEED,
    SPECTRUM_TYPES,
    KnownSpectrumMatrix,
    create_matrix_with_complex_pair,
    create_matrix_with_spectrum,
    create_test_matrix,
    dominance_ratio,
    geometric_spectrum,
    linear_spectrum,
    random_orthogonal,
    slow_spectrum,
)


class TestSpectra:
    """Tests for spectrum shapes."""

    def test_linear(self) -> None:
        """Linear spectrum should span [1, κ] evenly."""
        values = linear_spectrum(5, 9.0)
        np.testing.assert_allclose(values, [1.0, 3.0, 5.0, 7.0, 9.0])

    def test_geometric(self) -> None:
        """Geometric spectrum should have a constant ratio."""
        values = geometric_spectrum(4, 1000.0)
        np.testing.assert_allclose(values, [1.0, 10.0, 100.0, 1000.0])

    def test_slow_gap(self) -> None:
        """Slow spectrum should have the requested dominant gap."""
        values = slow_spectrum(50, 100.0, eigenvalue_gap=1.1)
        assert values[0] == 100.0
        assert values[0] / values[1] == pytest.approx(1.1)
        assert values[-1] == pytest.approx(1.0)

    def test_slow_single(self) -> None:
        """A 1x1 slow spectrum is just κ."""
        np.testing.assert_array_equal(slow_spectrum(1, 5.0), [5.0])


class TestRandomOrthogonal:
    """Tests for random_orthogonal function."""

    def test_orthogonal(self) -> None:
        """Q^T Q should be the identity."""
        q = random_orthogonal(20, seed=1)
        np.testing.assert_allclose(q.T @ q, np.eye(20), atol=1e-12)

    def test_unitary(self) -> None:
        """Complex Q should be unitary."""
        q = random_orthogonal(20, complex_field=True, seed=1)
        assert np.iscomplexobj(q)
        np.testing.assert_allclose(q.conj().T @ q, np.eye(20), atol=1e-12)


class TestCreateMatrixWithSpectrum:
    """Tests for create_matrix_with_spectrum function."""

    def test_symmetric_with_spectrum(self) -> None:
        """Real spectra should give symmetric matrices with those eigenvalues."""
        A = create_matrix_with_spectrum([5.0, 2.0, 1.0], seed=42)
        assert np.allclose(A, A.T)
        np.testing.assert_allclose(np.sort(np.linalg.eigvalsh(A)), [1.0, 2.0, 5.0])

    def test_hermitian(self) -> None:
        """complex_field should give a Hermitian matrix."""
        A = create_matrix_with_spectrum([4.0, -1.0], complex_field=True, seed=42)
        assert np.iscomplexobj(A)
        assert np.allclose(A, A.conj().T)
        np.testing.assert_allclose(np.sort(np.linalg.eigvalsh(A)), [-1.0, 4.0])

    def test_complex_eigenvalues_need_complex_field(self) -> None:
        """Non-real eigenvalues cannot come from a real construction."""
        with pytest.raises(ValueError, match="complex_field"):
            create_matrix_with_spectrum([1 + 1j, 2.0])

    def test_complex_dtype_with_real_values(self) -> None:
        """Complex arrays with zero imaginary parts are accepted."""
        A = create_matrix_with_spectrum(np.array([1.0, 2.0], dtype=complex), seed=0)
        assert not np.iscomplexobj(A)


class TestCreateMatrixWithComplexPair:
    """Tests for create_matrix_with_complex_pair function."""

    def test_real_matrix(self) -> None:
        """The matrix itself should be real."""
        A = create_matrix_with_complex_pair(1.0, 2.0, [5.0], seed=3)
        assert A.shape == (3, 3)
        assert A.dtype == np.float64

    def test_eigenvalues(self) -> None:
        """Eigenvalues should be a ± bi plus the real extras."""
        A = create_matrix_with_complex_pair(1.0, 2.0, [5.0, -3.0], seed=3)
        values = np.linalg.eigvals(A)
        expected = [-3.0, 1 - 2j, 1 + 2j, 5.0]
        actual = sorted(values, key=lambda z: (round(z.real, 6), z.imag))
        np.testing.assert_allclose(actual, expected, atol=1e-10)


class TestDominanceRatio:
    """Tests for dominance_ratio function."""

    def test_ratio(self) -> None:
        """|λ₂|/|λ₁| with magnitudes sorted."""
        assert dominance_ratio([1.0, -4.0, 2.0]) == pytest.approx(0.5)

    def test_degenerate(self) -> None:
        """Single values and zero spectra give 0."""
        assert dominance_ratio([3.0]) == 0.0
        assert dominance_ratio([0.0, 0.0]) == 0.0


class TestCreateTestMatrix:
    """Tests for create_test_matrix function."""

    @pytest.mark.parametrize("spectrum", SPECTRUM_TYPES)
    def test_known_spectrum(self, spectrum: str) -> None:
        """Stored eigenvalues should match the matrix."""
        problem = create_test_matrix(20, 100.0, spectrum=spectrum)

        assert isinstance(problem, KnownSpectrumMatrix)
        assert problem.matrix.shape == (20, 20)
        assert problem.spectrum == spectrum
        assert problem.seed == DEFAULT_SEED
        np.testing.assert_allclose(
            np.sort(np.linalg.eigvalsh(problem.matrix))[::-1],
            problem.eigenvalues.real,
            rtol=1e-10,
        )

    def test_sorted_by_magnitude(self) -> None:
        """Eigenvalues should be sorted by descending magnitude."""
        problem = create_test_matrix(10, 50.0)
        magnitudes = np.abs(problem.eigenvalues)
        assert np.all(np.diff(magnitudes) <= 0)
        assert problem.dominant_eigenvalue == 50.0
        assert problem.smallest_eigenvalue == 1.0

    def test_exactly_symmetric(self) -> None:
        """Generated matrices should be symmetric to the last bit."""
        A = create_test_matrix(30, 100.0).matrix
        np.testing.assert_array_equal(A, A.T)

    def test_exactly_hermitian(self) -> None:
        """Complex matrices should be Hermitian to the last bit."""
        A = create_test_matrix(30, 100.0, complex_field=True).matrix
        assert np.iscomplexobj(A)
        np.testing.assert_array_equal(A, A.conj().T)

    def test_slow_dominance_ratio(self) -> None:
        """Slow spectrum should have a dominance ratio of 1/1.1."""
        problem = create_test_matrix(20, 100.0, spectrum="slow")
        assert problem.dominance_ratio == pytest.approx(1 / 1.1)

    def test_reproducibility(self) -> None:
        """Same seed should produce identical matrix."""
        A1 = create_test_matrix(20, 100.0, seed=7).matrix
        A2 = create_test_matrix(20, 100.0, seed=7).matrix
        np.testing.assert_array_equal(A1, A2)

    def test_different_seeds_produce_different_matrices(self) -> None:
        """Different seeds should produce different matrices."""
        A1 = create_test_matrix(20, 100.0, seed=42).matrix
        A2 = create_test_matrix(20, 100.0, seed=43).matrix
        assert not np.allclose(A1, A2)

    def test_unknown_spectrum(self) -> None:
        """Unknown spectrum names should raise ValueError."""
        with pytest.raises(ValueError, match="Unknown spectrum"):
            create_test_matrix(10, 10.0, spectrum="cubic")
