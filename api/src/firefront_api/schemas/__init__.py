"""Pydantic schemas for the API."""

from firefront_api.schemas.session import (
    EnvironmentParams,
    FrameSchema,
    FrontSchema,
    IgnitionParams,
    ParametersSchema,
    SessionCreate,
    SessionResponse,
    StartRequest,
)

__all__ = [
    "EnvironmentParams",
    "FrameSchema",
    "FrontSchema",
    "IgnitionParams",
    "ParametersSchema",
    "SessionCreate",
    "SessionResponse",
    "StartRequest",
]
