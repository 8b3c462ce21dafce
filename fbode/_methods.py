"""Integration methods and their lookup by name."""
import enum

from fbode.constants import EULER_ID, RK4_ID
from fbode.errors import UnknownMethodError


class Method(enum.IntEnum):
    """Integration methods understood by the solver.

    The integer value of each member is the identifier handed to the
    GPU kernels.
    """

    EULER = EULER_ID
    RK4 = RK4_ID

    @property
    def label(self):
        """Name used to request this method in `fbode.solve()`."""
        return _LABELS[self]


_LABELS = {
    Method.EULER: "Euler",
    Method.RK4: "RK4",
}


def resolve_method(name):
    """Look up an integration method by name.

    Parameters
    ----------
    name: str or Method
      One of "Euler" or "RK4", or a `Method` member

    Returns
    -------
    the matching `Method`

    Raises
    ------
    UnknownMethodError
      The name does not match a known method
    """
    if isinstance(name, Method):
        return name

    for method, label in _LABELS.items():
        if name == label:
            return method

    known = ", ".join(repr(label) for label in _LABELS.values())
    raise UnknownMethodError(f"unknown integration method {name!r} (expected one of {known})")


def euler_step(coeff, value, scale, dt):
    """Increment of one explicit Euler step.

    The increment does not depend on `value`: the right hand side is
    driven by the scale input alone.
    """
    return coeff * scale * dt


def rk4_step(coeff, value, scale, dt):
    """Increment of one fourth order Runge-Kutta step.

    Same right hand side as `euler_step()`, evaluated at four stages with
    the intermediate corrections applied to the scale input.
    """
    half_dt = dt / 2

    f1 = coeff * scale * dt
    c2 = dt * f1 / 2
    f2 = coeff * (scale + c2) * half_dt
    c3 = dt * f2 / 2
    f3 = coeff * (scale + c3) * half_dt
    c4 = dt * f3
    f4 = coeff * (scale + c4) * dt

    return (f1 + 2 * f2 + 2 * f3 + f4) / 6


def step_function(method):
    """Get the host step function implementing a `Method`."""
    if method == Method.EULER:
        return euler_step
    if method == Method.RK4:
        return rk4_step

    raise UnknownMethodError(f"unknown integration method {method!r}")
