"""Fire-front geometry, scenarios and time-stepped animation."""

from firefront.spread.animator import RecordingRenderer, Renderer, SpreadAnimator
from firefront.spread.boundary import generate_boundary
from firefront.spread.session import FireSession

__all__ = [
    "FireSession",
    "generate_boundary",
    "RecordingRenderer",
    "Renderer",
    "SpreadAnimator",
]
