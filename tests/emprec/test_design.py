"""
Tests for EMDesign and the starting-value methods.
"""

import warnings

import numpy as np
import pandas as pd
import pytest

from emgaussian.core.exceptions import (
    DegenerateRowWarning,
    DimensionError,
    ValidationError,
)
from emgaussian.emprec import EMDesign, datasets
from emgaussian.emprec._start import START_METHODS, starting_values


# ═══════════════════════════════════════════════════════════════════════
# EMDesign
# ═══════════════════════════════════════════════════════════════════════


class TestEMDesign:

    def test_apple_metadata(self):
        design = EMDesign.from_array(datasets.apple)
        assert design.n == 18
        assert design.p == 2
        assert design.n_missing == 6
        assert design.n_complete == 12
        assert design.n_degenerate == 0
        assert design.has_missing
        assert design.missing_rate == pytest.approx(6 / 36)
        assert design.columns is None

    def test_dataframe_columns_kept(self):
        df = pd.DataFrame({'size': [1.0, 2.0, 3.0], 'worms': [4.0, np.nan, 6.0]})
        design = EMDesign.from_array(df)
        assert design.columns == ('size', 'worms')
        assert design.n_missing == 1

    def test_infinite_values_missing(self):
        design = EMDesign.from_array([[1.0, np.inf], [2.0, 3.0], [-np.inf, 1.0]])
        assert design.n_missing == 2
        np.testing.assert_array_equal(
            design.observed_mask, [[True, False], [True, True], [False, True]]
        )

    def test_data_read_only_copy(self):
        raw = np.array([[1.0, 2.0], [3.0, np.nan]])
        design = EMDesign.from_array(raw)
        assert not design.data.flags.writeable
        raw[0, 0] = 99.0
        assert design.data[0, 0] == 1.0

    def test_complete_data(self, rng):
        design = EMDesign.from_array(rng.standard_normal((10, 3)))
        assert not design.has_missing
        assert design.missing_rate == 0.0

    def test_fully_missing_column(self):
        data = np.array([[1.0, np.nan], [2.0, np.nan], [3.0, np.nan]])
        with pytest.raises(ValidationError, match="column 1 is completely missing"):
            EMDesign.from_array(data)

    def test_degenerate_row_warns(self):
        data = np.array([[1.0, 2.0], [np.nan, np.nan], [3.0, 1.0]])
        with pytest.warns(DegenerateRowWarning, match="1 rows with all values missing"):
            design = EMDesign.from_array(data)
        assert design.n_degenerate == 1

    def test_no_warning_without_degenerate_rows(self):
        with warnings.catch_warnings():
            warnings.simplefilter('error', DegenerateRowWarning)
            EMDesign.from_array(datasets.apple)

    def test_too_few_rows(self):
        with pytest.raises(ValidationError, match="at least 2 samples"):
            EMDesign.from_array([[1.0, 2.0]])

    def test_not_2d(self):
        with pytest.raises(DimensionError):
            EMDesign.from_array([1.0, 2.0, 3.0])

    def test_non_numeric(self):
        with pytest.raises(ValidationError):
            EMDesign.from_array([["a", "b"], ["c", "d"]])

    def test_repr(self):
        assert "n=18, p=2" in repr(EMDesign.from_array(datasets.apple))


# ═══════════════════════════════════════════════════════════════════════
# Starting values
# ═══════════════════════════════════════════════════════════════════════


class TestStartingValues:

    def test_methods(self):
        assert START_METHODS == ('diag', 'pairwise', 'listwise', 'full')

    def test_diag(self, missing_data):
        mu, K = starting_values(missing_data, 'diag')
        np.testing.assert_allclose(mu, np.nanmean(missing_data, axis=0))
        np.testing.assert_allclose(K, np.diag(1.0 / np.nanvar(missing_data, axis=0)))

    def test_diag_treats_inf_as_missing(self):
        data = np.array([[1.0, 2.0], [3.0, np.inf], [5.0, 4.0]])
        mu, K = starting_values(data, 'diag')
        np.testing.assert_allclose(mu, [3.0, 3.0])
        assert K[1, 1] == pytest.approx(1.0)

    def test_diag_zero_variance(self):
        data = np.array([[1.0, 2.0], [1.0, 3.0], [1.0, np.nan]])
        with pytest.raises(ValidationError, match="zero variance"):
            starting_values(data, 'diag')

    def test_pairwise(self, missing_data):
        mu, K = starting_values(missing_data, 'pairwise')
        frame = pd.DataFrame(missing_data)
        np.testing.assert_allclose(mu, frame.mean().to_numpy())
        np.testing.assert_allclose(np.linalg.inv(K), frame.cov().to_numpy(), rtol=1e-10)

    def test_pairwise_never_jointly_observed(self):
        data = np.array([
            [1.0, np.nan],
            [2.0, np.nan],
            [np.nan, 3.0],
            [np.nan, 5.0],
        ])
        with pytest.raises(ValidationError, match="never observed together"):
            starting_values(data, 'pairwise')

    def test_listwise(self, missing_data):
        mu, K = starting_values(missing_data, 'listwise')
        complete = missing_data[np.all(np.isfinite(missing_data), axis=1)]
        np.testing.assert_allclose(mu, complete.mean(axis=0))
        np.testing.assert_allclose(np.linalg.inv(K), np.cov(complete, rowvar=False), rtol=1e-10)

    def test_listwise_too_few_complete_rows(self):
        data = np.array([[1.0, 2.0], [np.nan, 3.0], [4.0, np.nan], [2.0, 1.0]])
        with pytest.raises(ValidationError, match="complete rows"):
            starting_values(data, 'listwise')

    def test_unknown(self, missing_data):
        with pytest.raises(ValueError, match="Unknown start"):
            starting_values(missing_data, 'random')
