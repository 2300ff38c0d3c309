"""
Kernel functions used to weight autocovariances and taper bootstrap blocks.
"""

import logging

logger = logging.getLogger("kernelstat.models.kernels")

from .functions import (
    Domain,
    KernelFunction,
    KernelUniform,
    KernelTriangular,
    KernelEpanechnikov,
    KernelQuartic,
    KernelGaussian,
    KernelPR1993FlatTop,
    KernelP2003FlatTop,
    KernelPP2002Trap,
    KernelPP2002Smooth,
    KernelPR1994SB,
    KERNEL_FUNCTIONS,
    evaluate,
    active_domain,
    param_domain,
    get_kernel,
)
from .plots import plot_kernel

__all__ = [
    'Domain',
    'KernelFunction',
    'KernelUniform',
    'KernelTriangular',
    'KernelEpanechnikov',
    'KernelQuartic',
    'KernelGaussian',
    'KernelPR1993FlatTop',
    'KernelP2003FlatTop',
    'KernelPP2002Trap',
    'KernelPP2002Smooth',
    'KernelPR1994SB',
    'KERNEL_FUNCTIONS',
    'evaluate',
    'active_domain',
    'param_domain',
    'get_kernel',
    'plot_kernel',
]
