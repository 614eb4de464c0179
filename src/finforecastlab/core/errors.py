"""
Error classes for FinForecastLab.

This module defines the base exception raised when forecasting inputs or
simulation settings are invalid.
"""


class ConfigError(Exception):
    """
    Configuration error during scenario or simulation setup.

    This exception is raised when a forecasting request cannot be computed
    because its parameters are structurally invalid. It is raised at
    construction time so that bad inputs never reach a simulation loop.

    **Common Causes:**
    - Non-positive ``projected_months`` on a scenario
    - Negative ``variability`` or negative monthly amounts
    - Confidence levels outside ``[0, 1]`` or zero Monte Carlo iterations
    - Month windows smaller than one month
    - Unknown transaction types

    **Example Usage:**
        ```python
        from finforecastlab.core.errors import ConfigError
        from finforecastlab.core.scenario import Scenario

        try:
            Scenario(name="broken", monthly_income=1000, monthly_expenses=800,
                     projected_months=0)
        except ConfigError as e:
            print(f"Configuration error: {e}")
        ```

    **When to Use:**
    - In ``__post_init__`` validation of configuration dataclasses
    - When validating month windows and iteration counts
    """

    pass
