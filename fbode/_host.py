"""Host execution of the structural variants with NumPy.

Each function mirrors one kernel in `fbode._kernels`: the units of work
become lanes of NumPy vector operations, and steps run one after another.
All functions advance `x` in place.
"""
import numpy as np

from fbode._layout import StructuralCase


def compact_diagonal(F, x, g, dt, steps, step_fn):
    """Uncoupled elements sharing the single coefficient F[0, 0]."""
    _diagonal(F[0, 0], x, g, dt, steps, step_fn)


def general_diagonal(F, x, g, dt, steps, step_fn):
    """Uncoupled elements, each with its own diagonal coefficient."""
    _diagonal(np.diagonal(F).copy(), x, g, dt, steps, step_fn)


def compact_skew(F, x, g, dt, steps, step_fn):
    """Pairs (i, i + W/2) coupled through the four entries of a 2x2 matrix."""
    _paired(F[0, 0], F[0, 1], F[1, 0], F[1, 1], x, g, dt, steps, step_fn)


def general_skew(F, x, g, dt, steps, step_fn):
    """Pairs (i, i + W/2) coupled through their own entries of a full matrix."""
    half = x.size // 2
    a = np.arange(half)
    b = a + half

    _paired(F[a, a], F[a, b], F[b, a], F[b, b], x, g, dt, steps, step_fn)


def _diagonal(coeff, x, g, dt, steps, step_fn):
    value = x.copy()

    for _ in range(steps):
        value += step_fn(coeff, value, g, dt)

    x[:] = value


def _paired(p, q, r, s, x, g, dt, steps, step_fn):
    half = x.size // 2
    g_a = g[:half]
    g_b = g[half:]
    x_a = x[:half].copy()
    x_b = x[half:].copy()

    for _ in range(steps):
        # First half of every pair is updated before the second reads it
        x_a = x_a + step_fn(p, x_a, g_a, dt) + step_fn(q, x_a, x_b, dt)
        x_b = x_b + step_fn(r, x_b, x_a, dt) + step_fn(s, x_b, g_b, dt)

    x[:half] = x_a
    x[half:] = x_b


HOST_VARIANTS = {
    StructuralCase.COMPACT_DIAGONAL: compact_diagonal,
    StructuralCase.GENERAL_DIAGONAL: general_diagonal,
    StructuralCase.COMPACT_SKEW: compact_skew,
    StructuralCase.GENERAL_SKEW: general_skew,
}
