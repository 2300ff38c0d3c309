# kernelstat/models/kernels/plots.py
"""
Plotting helpers for kernel functions.
"""

import logging
from typing import Any, Optional, Sequence, Tuple

import numpy as np

from kernelstat.models.kernels.functions import KernelFunction, evaluate

logger = logging.getLogger("kernelstat.models.kernels.plots")


def _plot_range(kernel: KernelFunction) -> Tuple[float, float]:
    lower, upper = kernel.active_domain()
    # Unbounded supports are drawn over +/- 4, which covers the Gaussian mass
    lower = -4.0 if not np.isfinite(lower) else lower
    upper = 4.0 if not np.isfinite(upper) else upper
    margin = 0.1 * (upper - lower)
    return lower - margin, upper + margin


def plot_kernel(kernel: KernelFunction,
                x: Optional[Sequence[float]] = None,
                n_points: int = 401,
                figsize: Tuple[int, int] = (10, 6),
                ax: Any = None) -> Any:
    """
    Plot a kernel function over (slightly more than) its active domain.

    Args:
        kernel: Kernel function to plot
        x: Points at which to evaluate the kernel. Defaults to an even grid of
            ``n_points`` covering the active domain plus a 10% margin each side.
        n_points: Number of grid points when ``x`` is not given
        figsize: Figure size as (width, height) in inches, used when ``ax`` is None
        ax: Existing matplotlib Axes to draw on

    Returns:
        matplotlib.figure.Figure: The figure containing the plot

    Raises:
        ImportError: If matplotlib is not available

    Examples:
        >>> from kernelstat.models.kernels import KernelPP2002Trap, plot_kernel
        >>> fig = plot_kernel(KernelPP2002Trap(p=0.3))
    """
    try:
        import matplotlib.pyplot as plt
    except ImportError:
        raise ImportError("Matplotlib is required for plotting kernel functions")

    if x is None:
        lower, upper = _plot_range(kernel)
        x = np.linspace(lower, upper, n_points)
    x = np.asarray(x, dtype=np.float64)

    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure

    ax.plot(x, evaluate(x, kernel), label=kernel.name)
    params = ", ".join(f"{k} = {v:g}" for k, v in kernel.to_dict().items())
    title = f"{kernel.name} Kernel" + (f" ({params})" if params else "")
    ax.set_title(title)
    ax.set_xlabel("x")
    ax.set_ylabel("Weight")
    ax.grid(True, alpha=0.3)

    logger.debug(f"Plotted kernel {kernel.name} at {x.size} points")
    return fig
