"""
Tests for the SPD linear algebra kernels and the Timer.

Validates:
    - spd_factor solve / inverse / logdet against numpy
    - Failure classification: singular vs not positive definite
    - Timer sections
"""

import numpy as np
import pytest

from emgaussian.core.compute.linalg import SPDFactor, spd_factor, spd_inverse
from emgaussian.core.compute.timing import Timer
from emgaussian.core.exceptions import (
    NotPositiveDefiniteError,
    NumericalError,
    SingularMatrixError,
)


# ═══════════════════════════════════════════════════════════════════════
# spd_factor
# ═══════════════════════════════════════════════════════════════════════


class TestSPDFactor:

    def test_factor_reconstructs(self, rng, spd_matrix):
        A = spd_matrix(4)
        f = spd_factor(A, 'A')
        assert isinstance(f, SPDFactor)
        assert f.size == 4
        np.testing.assert_allclose(f.chol @ f.chol.T, A, atol=1e-10)

    def test_solve(self, rng, spd_matrix):
        A = spd_matrix(3)
        B = rng.standard_normal((3, 2))
        X = spd_factor(A, 'A').solve(B)
        np.testing.assert_allclose(A @ X, B, atol=1e-10)

    def test_inverse_symmetric(self, rng, spd_matrix):
        A = spd_matrix(5)
        inv = spd_inverse(A, 'A')
        np.testing.assert_allclose(inv, np.linalg.inv(A), atol=1e-12)
        np.testing.assert_array_equal(inv, inv.T)

    def test_logdet(self, rng, spd_matrix):
        A = spd_matrix(4)
        sign, expected = np.linalg.slogdet(A)
        assert sign == 1.0
        assert spd_factor(A, 'A').logdet() == pytest.approx(expected, rel=1e-10)

    def test_scalar_block(self):
        f = spd_factor(np.array([[4.0]]), 'K_mm')
        assert f.inverse()[0, 0] == pytest.approx(0.25)
        assert f.logdet() == pytest.approx(np.log(4.0))


class TestFailureClassification:

    def test_indefinite(self, indefinite_precision):
        with pytest.raises(NotPositiveDefiniteError) as exc_info:
            spd_factor(indefinite_precision, 'K')
        assert exc_info.value.matrix_name == 'K'
        assert exc_info.value.min_eigenvalue == pytest.approx(-1.0)

    def test_negative_definite(self):
        with pytest.raises(NotPositiveDefiniteError):
            spd_factor(-np.eye(2), 'K')

    def test_zero_matrix_singular(self):
        with pytest.raises(SingularMatrixError) as exc_info:
            spd_factor(np.zeros((3, 3)), 'S_new')
        assert exc_info.value.matrix_name == 'S_new'
        assert exc_info.value.expected_rank == 3

    def test_rank_deficient_singular(self):
        v = np.array([1.0, 2.0, 3.0])
        with pytest.raises(SingularMatrixError):
            spd_factor(np.outer(v, v), 'S')

    def test_name_in_message(self, indefinite_precision):
        with pytest.raises(NumericalError, match="K_mm"):
            spd_inverse(indefinite_precision, 'K_mm')


# ═══════════════════════════════════════════════════════════════════════
# Timer
# ═══════════════════════════════════════════════════════════════════════


class TestTimer:

    def test_sections_recorded(self):
        timer = Timer()
        timer.start()
        with timer.section('em_iterations'):
            pass
        timer.stop()
        result = timer.result()
        assert 'total_seconds' in result
        assert 'em_iterations' in result
        assert result['total_seconds'] >= 0.0
