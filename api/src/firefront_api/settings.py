"""Service settings read from the environment."""

from __future__ import annotations

import os

from pydantic import BaseModel, Field

from firefront.environment.source import SourceConfig
from firefront.types import AnimationConfig

ENV_PREFIX = "FIREFRONT_"


class ServiceSettings(BaseModel):
    """Runtime configuration for the API.

    Without a weather API key no environment source is created and
    sessions only change parameters through manual environment input.
    """

    weather_api_key: str = ""
    cors_proxy: str = ""
    total_sim_minutes: float = Field(default=30.0, gt=0)
    step_minutes: float = Field(default=1.0, gt=0)
    poll_interval: float = Field(default=1.0, gt=0)
    default_run_seconds: float = Field(default=10.0, ge=0)
    zoom: float | None = Field(default=None, ge=0, le=22)
    http_timeout: float = Field(default=10.0, gt=0)

    @classmethod
    def from_env(cls) -> ServiceSettings:
        values = {}
        for name in cls.model_fields:
            raw = os.environ.get(ENV_PREFIX + name.upper())
            if raw is not None and raw != "":
                values[name] = raw
        return cls(**values)

    def animation_config(self, **overrides) -> AnimationConfig:
        params = {
            "total_sim_minutes": self.total_sim_minutes,
            "step_minutes": self.step_minutes,
            "poll_interval_s": self.poll_interval,
            "default_run_seconds": self.default_run_seconds,
        }
        params.update({k: v for k, v in overrides.items() if v is not None})
        return AnimationConfig(**params)

    def source_config(self) -> SourceConfig:
        return SourceConfig(
            weather_api_key=self.weather_api_key,
            cors_proxy=self.cors_proxy,
            timeout_s=self.http_timeout,
        )
