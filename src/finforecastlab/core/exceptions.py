"""
Custom exceptions for FinForecastLab.

This module provides specialized exception classes carrying enough context
for a caller to correct and resubmit a forecasting request.
"""

from __future__ import annotations

from .errors import ConfigError


class ScenarioValidationError(ConfigError):
    """
    Raised when a scenario fails validation during construction.

    Attributes:
        scenario_name: The name of the scenario that failed validation
        fields: Names of the scenario fields that caused the failure
    """

    def __init__(
        self,
        scenario_name: str,
        message: str,
        fields: list[str] | None = None,
    ):
        self.scenario_name = scenario_name
        self.fields = fields or []
        super().__init__(self._fmt(message))

    def _fmt(self, msg: str) -> str:
        """Format the error message with additional context."""
        suffix = ""
        if self.fields:
            suffix = f" | fields: [{', '.join(self.fields)}]"
        return f"[Scenario {self.scenario_name}] {msg}{suffix}"
