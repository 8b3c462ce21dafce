import sys
import time

from astropy import units
import cupy as cp
import numpy as np

from fbode._dimensionalization import dim_timestep, undim_timestep
from fbode._host import HOST_VARIANTS
from fbode._kernels import (
    compact_diagonal_kernel,
    compact_skew_kernel,
    general_diagonal_kernel,
    general_skew_kernel,
)
from fbode._layout import Layout, StructuralCase, classify_layout
from fbode._methods import Method, euler_step, resolve_method, rk4_step, step_function
from fbode.constants import BLOCK_SIZE, COUPLING_PAIRED
from fbode.errors import (
    LengthMismatchError,
    MalformedMatrixError,
    SolverError,
    UnknownMethodError,
)


__all__ = [
    "Layout",
    "LengthMismatchError",
    "MalformedMatrixError",
    "Method",
    "SolverConfig",
    "SolverError",
    "StructuralCase",
    "UnknownMethodError",
    "classify_layout",
    "euler_step",
    "integrate",
    "rk4_step",
    "solve",
]


KERNELS = {
    StructuralCase.COMPACT_DIAGONAL: compact_diagonal_kernel,
    StructuralCase.GENERAL_DIAGONAL: general_diagonal_kernel,
    StructuralCase.COMPACT_SKEW: compact_skew_kernel,
    StructuralCase.GENERAL_SKEW: general_skew_kernel,
}


class SolverConfig:
    """Configuration for one integration run."""

    def __init__(
        self,
        dt,
        steps,
        method="Euler",
        coupling=COUPLING_PAIRED,
        block_size=BLOCK_SIZE,
        time_unit=units.s,
    ):
        """Initialize a `SolverConfig` instance.

        Parameters
        ----------
        dt: float or scalar with time units
          Timestep size. Bare numbers are taken to be in `time_unit`.
        steps: int
          Number of timesteps to take (zero leaves the state untouched)
        method: str or `fbode.Method`
          Integration method, "Euler" or "RK4"
        coupling: str
          How a full (W x W) coefficient matrix is read: "paired" couples
          element i with element i + W/2, "diagonal" uses only the
          diagonal. Ignored for 1x1 and 2x2 matrices.
        block_size: int
          Threads per block when running on the GPU
        time_unit: astropy unit
          Unit of time the coefficient matrix rates are expressed in

        Examples
        --------
        Take 100 RK4 steps of 1 ms.

        >>> config = fbode.SolverConfig(
              dt=1 * units.ms, steps=100, method="RK4"
            )
        """
        if isinstance(steps, bool) or not isinstance(steps, (int, np.integer)):
            raise ValueError(f"steps must be an integer, got {steps!r}")
        if steps < 0:
            raise ValueError(f"steps must be non-negative, got {steps}")
        if block_size <= 0:
            raise ValueError(f"block_size must be positive, got {block_size}")

        self.method = resolve_method(method)
        self.time_unit = time_unit
        self.dt = dim_timestep(dt, time_unit)
        self.steps = int(steps)
        self.coupling = coupling
        self.block_size = int(block_size)

    def __repr__(self):
        return (
            f"SolverConfig(dt={undim_timestep(self.dt, self.time_unit)}, steps={self.steps}, "
            f"method={self.method.label!r}, coupling={self.coupling!r})"
        )


def solve(F, x0, g, dt, steps, name, coupling=COUPLING_PAIRED, verbose=0):
    """Integrate dx/dt = F x g forward by a fixed number of timesteps.

    Parameters
    ----------
    F : array of shape (1, 1), (2, 2) or (W, W)
       Coefficient matrix. Its size selects how elements are coupled.
    x0 : array of shape (W,)
       Initial state, advanced in place
    g : array of shape (W,)
       Scale input of every state element
    dt : float or scalar with time units
       Timestep size
    steps : int
       Number of timesteps
    name : str
       Integration method, "Euler" or "RK4"
    coupling : str
       "paired" or "diagonal", see `SolverConfig`
    verbose : int
      Set to zero to supress print statements

    Arrays must be all NumPy arrays (integrated on the host) or all CuPy
    arrays (integrated on the GPU).

    Returns
    -------
    `x0`, holding the state after `steps` timesteps.

    Examples
    --------
    >>> x = np.ones(4)
    >>> fbode.solve(np.array([[2.0]]), x, np.ones(4), 0.1, 1, "Euler")
    array([1.2, 1.2, 1.2, 1.2])
    """
    config = SolverConfig(dt, steps, method=name, coupling=coupling)

    return integrate(config, F, x0, g, verbose=verbose)


def integrate(config, F, x0, g, verbose=0):
    """Integrate the state `x0` in place according to a `SolverConfig`.

    See `solve()` for the meaning of the arrays. Every check happens
    before `x0` is touched.
    """
    xp = _check_inputs(F, x0, g)
    layout = classify_layout(F.shape, x0.size, config.coupling, config.block_size)

    if verbose > 0:
        print(
            f"Integrating {layout.width} elements with {config.method.label} "
            f"({layout.case.value}, {layout.work_size} units of work, {config.steps} steps)"
        )
        sys.stdout.flush()

    start_time = time.time()

    if config.steps > 0 and layout.work_size > 0:
        if xp is cp:
            _run_device(config, layout, F, x0, g, verbose)
        else:
            _run_host(config, layout, F, x0, g)

    if verbose > 0:
        print(f"Integration took {time.time() - start_time:.3f} seconds")

    return x0


def _run_device(config, layout, F, x0, g, verbose):
    """Launch the kernel of the selected structural case and wait for it."""
    # Kernels compute in double precision
    F_ = cp.ascontiguousarray(F, dtype=cp.float64)
    g_ = cp.ascontiguousarray(g, dtype=cp.float64)
    x_ = x0 if x0.dtype == cp.float64 else x0.astype(cp.float64)

    if verbose > 0:
        print(f"Launching {layout.grid_size} blocks of {layout.block_size} threads")

    KERNELS[layout.case][layout.grid_size, layout.block_size](
        F_,
        x_,
        g_,
        config.dt,
        config.steps,
        int(config.method),
        layout.work_size,
    )
    cp.cuda.get_current_stream().synchronize()

    if x_ is not x0:
        x0[...] = x_


def _run_host(config, layout, F, x0, g):
    """Run the selected structural case with NumPy on the host."""
    F_ = np.asarray(F, dtype=np.float64)
    g_ = np.asarray(g, dtype=np.float64)
    x_ = x0 if x0.dtype == np.float64 else x0.astype(np.float64)

    HOST_VARIANTS[layout.case](
        F_, x_, g_, config.dt, config.steps, step_function(config.method)
    )

    if x_ is not x0:
        x0[...] = x_


def _check_inputs(F, x0, g):
    """Check the arrays can be integrated together.

    Returns
    -------
    the array module (numpy or cupy) holding all three arrays
    """
    modules = {cp.get_array_module(arr) for arr in (F, x0, g)}

    if len(modules) != 1:
        raise ValueError("F, x0 and g must all be NumPy arrays or all be CuPy arrays")

    xp = modules.pop()

    for label, arr in (("F", F), ("x0", x0), ("g", g)):
        if not isinstance(arr, xp.ndarray):
            raise TypeError(f"{label} must be an array, got {type(arr).__name__}")
        if not arr.flags.c_contiguous:
            raise ValueError(f"{label} must be contiguous")
        if arr.dtype.kind not in "iuf":
            raise TypeError(f"{label} must hold real numbers, got dtype {arr.dtype}")

    if xp is cp and len({arr.device.id for arr in (F, x0, g)}) != 1:
        raise ValueError("F, x0 and g must reside on the same GPU")

    if x0.dtype.kind != "f":
        raise TypeError(f"x0 must be a floating point array to be updated in place, got {x0.dtype}")
    if F.ndim != 2:
        raise MalformedMatrixError(f"F must be two dimensional, got shape {F.shape}")
    if x0.ndim != 1 or g.ndim != 1:
        raise ValueError(f"x0 and g must be one dimensional, got shapes {x0.shape} and {g.shape}")
    if x0.size != g.size:
        raise LengthMismatchError(
            f"x0 and g must have the same length, got {x0.size} and {g.size}"
        )

    return xp
