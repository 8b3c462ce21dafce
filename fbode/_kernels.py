from cupyx import jit

from fbode._methods import euler_step, rk4_step
from fbode.constants import RK4_ID

# Device builds of the host step functions
euler_step_device = jit.rawkernel(device=True)(euler_step)
rk4_step_device = jit.rawkernel(device=True)(rk4_step)


@jit.rawkernel(device=True)
def increment_device(method, coeff, value, scale, dt):
    """[CUPY DEVICE FUNCTION] Increment of one step of the method
    identified by `method`.
    """
    inc = euler_step_device(coeff, value, scale, dt)

    if method == RK4_ID:
        inc = rk4_step_device(coeff, value, scale, dt)

    return inc


@jit.rawkernel()
def compact_diagonal_kernel(F, x, g, dt, steps, method, width):
    """[CUPY KERNEL] Uncoupled elements sharing the single coefficient
    F[0, 0].

    Advances x[idx] in place.
    """
    idx = jit.blockDim.x * jit.blockIdx.x + jit.threadIdx.x

    if idx < width:
        coeff = F[0, 0]
        scale = g[idx]
        value = x[idx]

        for i_step in range(steps):
            value = value + increment_device(method, coeff, value, scale, dt)

        x[idx] = value


@jit.rawkernel()
def general_diagonal_kernel(F, x, g, dt, steps, method, width):
    """[CUPY KERNEL] Uncoupled elements, each with its own diagonal
    coefficient F[idx, idx].

    Advances x[idx] in place.
    """
    idx = jit.blockDim.x * jit.blockIdx.x + jit.threadIdx.x

    if idx < width:
        coeff = F[idx, idx]
        scale = g[idx]
        value = x[idx]

        for i_step in range(steps):
            value = value + increment_device(method, coeff, value, scale, dt)

        x[idx] = value


@jit.rawkernel()
def compact_skew_kernel(F, x, g, dt, steps, method, half):
    """[CUPY KERNEL] Pairs (idx, idx + half) coupled through the four
    shared coefficients of a 2x2 matrix.

    The first element of the pair is updated before the second one
    reads it. Advances x[idx] and x[idx + half] in place.
    """
    idx = jit.blockDim.x * jit.blockIdx.x + jit.threadIdx.x

    if idx < half:
        jdx = idx + half

        p = F[0, 0]
        q = F[0, 1]
        r = F[1, 0]
        s = F[1, 1]

        g_a = g[idx]
        g_b = g[jdx]
        x_a = x[idx]
        x_b = x[jdx]

        for i_step in range(steps):
            x_a = (
                x_a
                + increment_device(method, p, x_a, g_a, dt)  # self
                + increment_device(method, q, x_a, x_b, dt)  # partner
            )
            x_b = (
                x_b
                + increment_device(method, r, x_b, x_a, dt)  # partner
                + increment_device(method, s, x_b, g_b, dt)  # self
            )

        x[idx] = x_a
        x[jdx] = x_b


@jit.rawkernel()
def general_skew_kernel(F, x, g, dt, steps, method, half):
    """[CUPY KERNEL] Pairs (idx, idx + half) coupled through their own
    entries of a full matrix.

    The first element of the pair is updated before the second one
    reads it. Advances x[idx] and x[idx + half] in place.
    """
    idx = jit.blockDim.x * jit.blockIdx.x + jit.threadIdx.x

    if idx < half:
        jdx = idx + half

        p = F[idx, idx]
        q = F[idx, jdx]
        r = F[jdx, idx]
        s = F[jdx, jdx]

        g_a = g[idx]
        g_b = g[jdx]
        x_a = x[idx]
        x_b = x[jdx]

        for i_step in range(steps):
            x_a = (
                x_a
                + increment_device(method, p, x_a, g_a, dt)  # self
                + increment_device(method, q, x_a, x_b, dt)  # partner
            )
            x_b = (
                x_b
                + increment_device(method, r, x_b, x_a, dt)  # partner
                + increment_device(method, s, x_b, g_b, dt)  # self
            )

        x[idx] = x_a
        x[jdx] = x_b
