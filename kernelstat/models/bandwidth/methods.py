# kernelstat/models/bandwidth/methods.py
"""
Bandwidth (lag truncation) estimation methods.

Each method is an immutable, validated parameter container. The estimation
routine in :mod:`kernelstat.models.bandwidth.estimation` dispatches on the type
of the method it is given.

Classes:
    BandwidthMethod: Base class of the method variants
    BandwidthMax: Use every available lag
    BandwidthWhiteNoise: First lag inside the white-noise 95% bound
    BandwidthBartlett: First lag inside Bartlett's adaptive 95% bound
    BandwidthP2003: Empirical rule of Politis (2003), requiring a run of K small
        autocorrelations
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, Type

from kernelstat.core.parameters import ParameterBase, validate_integer, validate_positive

# Set up module-level logger
logger = logging.getLogger("kernelstat.models.bandwidth.methods")


class BandwidthMethod(ParameterBase):
    """Base class for bandwidth estimation methods."""

    _summary_label = "bandwidth method"

    def __post_init__(self) -> None:
        self.validate()


@dataclass(frozen=True)
class BandwidthMax(BandwidthMethod):
    """Degenerate method that sets the bandwidth to ``n - 1``.

    No autocorrelations are computed, so the covariances returned alongside the
    bandwidth are empty.
    """

    name = "max"


@dataclass(frozen=True)
class BandwidthWhiteNoise(BandwidthMethod):
    """Bandwidth from the white-noise confidence bound ``1.96 / sqrt(n)``.

    The decision lag is the first lag whose absolute autocorrelation falls inside
    the bound; the bandwidth is ``ceil(2 * adjustment_term * decision_lag)``.

    Attributes:
        adjustment_term: Strictly positive multiplier on the estimated bandwidth
    """
    adjustment_term: float = 1.0

    name = "whiteNoise"

    def validate(self) -> None:
        validate_positive(self.adjustment_term, "adjustment_term")


@dataclass(frozen=True)
class BandwidthBartlett(BandwidthMethod):
    """Bandwidth from Bartlett's confidence bound for an MA(m) null.

    At lag ``m + 1`` the bound is ``1.96 * sqrt((1 + 2 sum_{j<=m} rho_j^2) / n)``,
    so it widens as earlier autocorrelations are rejected.

    Attributes:
        adjustment_term: Strictly positive multiplier on the estimated bandwidth
    """
    adjustment_term: float = 1.0

    name = "bartlett"

    def validate(self) -> None:
        validate_positive(self.adjustment_term, "adjustment_term")


@dataclass(frozen=True)
class BandwidthP2003(BandwidthMethod):
    """Empirical rule of Politis (2003), "Adaptive bandwidth choice".

    The decision lag is the start of the first run of ``K`` consecutive
    autocorrelations below ``c * sqrt(log10(n) / n)``.

    Attributes:
        adjustment_term: Strictly positive multiplier on the estimated bandwidth
        c: Strictly positive scale of the threshold (2.0 is roughly a 95% bound)
        K: Length of the run of small autocorrelations, at least 1
    """
    adjustment_term: float = 1.0
    c: float = 2.0
    K: int = 5

    name = "P2003"

    def validate(self) -> None:
        validate_positive(self.adjustment_term, "adjustment_term")
        validate_positive(self.c, "c")
        validate_integer(self.K, "K", min_value=1)

    @classmethod
    def from_num_obs(cls, num_obs: int, adjustment_term: float = 1.0,
                     c: float = 2.0) -> 'BandwidthP2003':
        """
        Build the method with ``K`` derived from the sample size.

        ``K = max(5, ceil(sqrt(log10(num_obs))))``, the choice suggested by Politis.

        Args:
            num_obs: Number of observations in the sample
            adjustment_term: Multiplier on the estimated bandwidth
            c: Scale of the threshold

        Returns:
            BandwidthP2003: The configured method

        Raises:
            ParameterError: If ``num_obs`` is not a positive integer

        Examples:
            >>> from kernelstat.models.bandwidth.methods import BandwidthP2003
            >>> BandwidthP2003.from_num_obs(100000).K
            5
            >>> BandwidthP2003.from_num_obs(10 ** 50).K
            8
        """
        num_obs = validate_integer(num_obs, "num_obs", min_value=1)
        k = max(5, math.ceil(math.sqrt(math.log10(num_obs))))
        return cls(adjustment_term=adjustment_term, c=c, K=k)


# Dictionary mapping lower-case method names to method types
BANDWIDTH_METHODS: Dict[str, Type[BandwidthMethod]] = {
    method.name.lower(): method
    for method in (BandwidthMax, BandwidthWhiteNoise, BandwidthBartlett, BandwidthP2003)
}


def get_bandwidth_method(name: str, **params) -> BandwidthMethod:
    """
    Construct a bandwidth method from its name.

    Args:
        name: Method name, case-insensitive (``"max"``, ``"whiteNoise"``,
            ``"bartlett"`` or ``"P2003"``)
        **params: Parameters forwarded to the method constructor

    Returns:
        BandwidthMethod: The constructed method

    Raises:
        ValueError: If the name is not recognized
        ParameterError: If the parameters are invalid
    """
    method_type = BANDWIDTH_METHODS.get(name.lower())
    if method_type is None:
        raise ValueError(
            f"Unrecognized bandwidth method: {name}. "
            f"Supported methods are {[m.name for m in BANDWIDTH_METHODS.values()]}."
        )
    return method_type(**params)
