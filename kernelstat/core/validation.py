# kernelstat/core/validation.py

"""
Validation utilities for the KernelStat package.

Every estimator in the package accepts a univariate sample as a list, NumPy
array or pandas Series. The helpers here coerce such input to a contiguous 1-D
``float64`` array and reject data the estimators cannot work with, so that the
estimators themselves never see NaNs, infinities or multi-column input.
"""

from typing import Optional, Sequence, Union

import numpy as np
import pandas as pd

from kernelstat.core.exceptions import (
    InsufficientDataError, ParameterError,
    raise_data_error, raise_dimension_error
)
from kernelstat.core.types import LagSpec, TimeSeriesData


def validate_sample(
    data: TimeSeriesData,
    min_observations: int = 2,
    data_name: str = "data"
) -> np.ndarray:
    """Validate and coerce a univariate sample.

    Args:
        data: Sample as a list, NumPy array, pandas Series or single-column DataFrame
        min_observations: Minimum number of observations required
        data_name: Name of the data for error messages

    Returns:
        np.ndarray: The sample as a contiguous 1-D float64 array

    Raises:
        TypeError: If data is None or not numeric
        DimensionError: If data has more than one non-trivial dimension
        DataError: If data contains NaN or infinite values
        InsufficientDataError: If data has fewer than ``min_observations`` values
    """
    if data is None:
        raise TypeError(f"{data_name} cannot be None")

    if isinstance(data, pd.DataFrame):
        if data.shape[1] != 1:
            raise_dimension_error(
                f"{data_name} must be univariate",
                array_name=data_name,
                expected_shape="(n,) or (n, 1)",
                actual_shape=data.shape
            )
        values = data.iloc[:, 0].to_numpy()
    elif isinstance(data, pd.Series):
        values = data.to_numpy()
    else:
        values = np.asarray(data)

    if values.ndim == 2 and 1 in values.shape:
        values = values.ravel()
    if values.ndim != 1:
        raise_dimension_error(
            f"{data_name} must be a one-dimensional sample",
            array_name=data_name,
            expected_shape="(n,)",
            actual_shape=values.shape
        )

    try:
        values = np.ascontiguousarray(values, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise TypeError(f"{data_name} must contain numeric values") from e

    if np.isnan(values).any():
        raise_data_error(
            f"{data_name} contains NaN values",
            data_name=data_name,
            issue="contains NaN values",
            index=int(np.flatnonzero(np.isnan(values))[0])
        )
    if np.isinf(values).any():
        raise_data_error(
            f"{data_name} contains infinite values",
            data_name=data_name,
            issue="contains infinite values",
            index=int(np.flatnonzero(np.isinf(values))[0])
        )

    if len(values) < min_observations:
        raise InsufficientDataError(
            f"Input data must have at least {min_observations} observations, "
            f"got {len(values)}",
            n_obs=len(values),
            min_obs=min_observations,
            data_name=data_name
        )

    return values


def validate_lags(lags: LagSpec, n_obs: int, lags_name: str = "lags") -> np.ndarray:
    """Validate a set of lags against a sample length.

    Args:
        lags: Lags as a range, sequence or integer array
        n_obs: Number of observations in the sample
        lags_name: Name of the lags for error messages

    Returns:
        np.ndarray: The lags as a 1-D int64 array (possibly empty)

    Raises:
        ParameterError: If a lag is not an integer or lies outside ``[0, n_obs - 1]``
    """
    lag_array = np.asarray(lags)
    if lag_array.size == 0:
        return np.empty(0, dtype=np.int64)

    lag_array = lag_array.ravel()
    if not np.issubdtype(lag_array.dtype, np.integer):
        if not np.all(np.equal(np.mod(lag_array, 1), 0)):
            raise ParameterError(
                f"{lags_name} must be integers",
                param_name=lags_name,
                param_value=lag_array
            )
    lag_array = lag_array.astype(np.int64)

    if lag_array.min() < 0 or lag_array.max() > n_obs - 1:
        raise ParameterError(
            f"{lags_name} must lie in [0, {n_obs - 1}] for a sample of {n_obs} observations",
            param_name=lags_name,
            param_value=(int(lag_array.min()), int(lag_array.max())),
            constraint=f"0 <= lag <= {n_obs - 1}"
        )

    return lag_array
