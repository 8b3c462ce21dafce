"""Functions relating to dimensionalization."""
from astropy import units


def dim_timestep(val, time_unit=units.s):
    """Dimensionalize a timestep.

    Args
      val: value with units of time, or a bare number already
        expressed in `time_unit`
      time_unit: unit the coefficient matrix rates are expressed in
    Returns
      value in no units
    """
    if isinstance(val, units.Quantity):
        return float(val.to(time_unit).value)

    return float(val)


def undim_timestep(val, time_unit=units.s):
    """Redimensionalize a timestep.

    Args
      val: value in `time_unit`
      time_unit: unit the coefficient matrix rates are expressed in
    Returns
      value with units
    """
    return val * time_unit
