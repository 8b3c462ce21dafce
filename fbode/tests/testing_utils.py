"""Utilities to support testing fbode functionality."""
import cupy as cp
import numpy as np
import pytest


def gpu_available():
    """Whether a CUDA device can be used for the kernel tests."""
    try:
        return cp.cuda.runtime.getDeviceCount() > 0
    except cp.cuda.runtime.CUDARuntimeError:
        return False


requires_gpu = pytest.mark.skipif(not gpu_available(), reason="no CUDA device available")


def unrolled_diagonal_euler(coeffs, x0, g, dt, steps):
    """Apply x <- x + c * g * dt `steps` times, one element at a time."""
    out = []

    for c, x, g_i in zip(coeffs, x0, g):
        for _ in range(steps):
            x = x + c * g_i * dt
        out.append(x)

    return np.array(out)
