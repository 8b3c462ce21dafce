"""Tests for the fbode._methods module."""
import pytest

from fbode._methods import Method, euler_step, resolve_method, rk4_step, step_function
from fbode.errors import UnknownMethodError


def test_euler_step_ignores_current_value():
    """Test the Euler increment depends only on coefficient, scale and dt."""
    assert euler_step(2.0, 1.0, 3.0, 0.1) == pytest.approx(0.6)
    assert euler_step(2.0, 1e6, 3.0, 0.1) == euler_step(2.0, -5.0, 3.0, 0.1)


def test_rk4_step_stages():
    """Test RK4 against stage values computed by hand."""
    c, s, dt = 2.0, 1.0, 0.1

    f1 = 0.2
    f2 = 2.0 * (1.0 + 0.01) * 0.05  # 0.101
    f3 = 2.0 * (1.0 + 0.00505) * 0.05  # 0.100505
    f4 = 2.0 * (1.0 + 0.0100505) * 0.1  # 0.2020101
    expected = (f1 + 2 * f2 + 2 * f3 + f4) / 6

    assert rk4_step(c, 7.0, s, dt) == pytest.approx(expected, rel=1e-12)
    assert rk4_step(c, 7.0, s, dt) == pytest.approx(0.8050201 / 6, rel=1e-12)


def test_rk4_step_differs_from_euler():
    """Test the RK4 stage corrections change the increment."""
    assert rk4_step(2.0, 0.0, 1.0, 0.1) != euler_step(2.0, 0.0, 1.0, 0.1)


def test_zero_coefficient_gives_zero_increment():
    """Test both methods return zero increment for a zero coefficient."""
    assert euler_step(0.0, 1.0, 4.0, 0.5) == 0.0
    assert rk4_step(0.0, 1.0, 4.0, 0.5) == 0.0


def test_resolve_method_by_name():
    """Test that method names resolve to the matching Method."""
    assert resolve_method("Euler") is Method.EULER
    assert resolve_method("RK4") is Method.RK4
    assert resolve_method(Method.RK4) is Method.RK4
    assert Method.RK4.label == "RK4"


@pytest.mark.parametrize("name", ["Heun", "euler", "rk4", "", None])
def test_resolve_method_unknown(name):
    """Test that unknown method names raise instead of falling back."""
    with pytest.raises(UnknownMethodError, match="unknown integration method"):
        resolve_method(name)


def test_step_function():
    """Test the host step functions selected for each method."""
    assert step_function(Method.EULER) is euler_step
    assert step_function(Method.RK4) is rk4_step
