"""Environmental conditions: rate model, data sources and refresh loop."""

from firefront.environment.model import (
    calculate_directional_factor,
    calculate_spread_parameters,
    calculate_spread_rate,
)
from firefront.environment.refresher import EnvironmentRefresher
from firefront.environment.source import (
    EnvironmentSource,
    OpenDataEnvironmentSource,
    SourceConfig,
    StaticEnvironmentSource,
)

__all__ = [
    "calculate_directional_factor",
    "calculate_spread_parameters",
    "calculate_spread_rate",
    "EnvironmentRefresher",
    "EnvironmentSource",
    "OpenDataEnvironmentSource",
    "SourceConfig",
    "StaticEnvironmentSource",
]
