"""Fire session: the state shared by the animator and the refresher.

A session owns the ignition point and the current spread parameters.
Parameters are only ever replaced as a whole, from the most recently
*started* environmental fetch that has completed, so a slow earlier
fetch cannot overwrite a newer one.
"""

from __future__ import annotations

import logging

from firefront.environment.model import calculate_spread_parameters
from firefront.errors import IgnitionAlreadySetError, MissingIgnitionError
from firefront.geodesy import Projector
from firefront.spread.scenarios import build_fronts
from firefront.types import (
    AnimationConfig,
    EnvironmentalSample,
    GeoPoint,
    SpreadFrame,
    SpreadParameters,
)

logger = logging.getLogger(__name__)


class FireSession:
    """Ignition point, spread parameters and projection for one fire.

    Attributes:
        config: Model and scheduler tunables
        projector: Map projection (None = meters are screen units)
        parameters: Current spread parameters (rate, wind, elongation)
        sample: Last environmental sample applied, if any
    """

    def __init__(
        self,
        config: AnimationConfig | None = None,
        projector: Projector | None = None,
    ):
        self.config = config or AnimationConfig()
        self.projector = projector
        self.parameters = SpreadParameters()
        self.sample: EnvironmentalSample | None = None
        self._ignition: GeoPoint | None = None
        self._fetch_seq = 0
        self._applied_seq = 0

    @property
    def ignition(self) -> GeoPoint | None:
        return self._ignition

    def set_ignition(self, point: GeoPoint) -> None:
        """Set the ignition point. It stays fixed until ``clear()``."""
        if self._ignition is not None:
            raise IgnitionAlreadySetError(
                f"Ignition already set at ({self._ignition.lat:.4f}, {self._ignition.lng:.4f})"
            )
        self._ignition = point
        logger.info("Ignition set at (%.4f, %.4f)", point.lat, point.lng)

    def require_ignition(self) -> GeoPoint:
        if self._ignition is None:
            raise MissingIgnitionError()
        return self._ignition

    def begin_fetch(self) -> int:
        """Reserve a sequence number for a fetch about to start."""
        self._fetch_seq += 1
        return self._fetch_seq

    def apply_sample(self, sample: EnvironmentalSample, seq: int | None = None) -> bool:
        """Replace the spread parameters with those derived from ``sample``.

        Args:
            sample: Completed environmental sample
            seq: Sequence number from ``begin_fetch``; None for manual input

        Returns:
            False when the sample is older than one already applied.
        """
        if seq is None:
            seq = self.begin_fetch()
        if seq <= self._applied_seq:
            logger.debug("Dropping stale sample #%d (applied #%d)", seq, self._applied_seq)
            return False

        parameters = calculate_spread_parameters(sample)
        if not parameters.rate > 0.0:
            logger.warning("Ignoring sample with non-positive rate %.4f", parameters.rate)
            return False

        self._applied_seq = seq
        self.sample = sample
        self.parameters = parameters
        logger.debug(
            "Effective spread rate %.3f m/step (wind %.0f°, factor %.3f)",
            parameters.rate,
            parameters.wind_direction,
            parameters.directional_factor,
        )
        return True

    def compute_frame(self, time_index: int) -> SpreadFrame:
        """Compute all scenario fronts at ``time_index`` from current parameters."""
        parameters = self.parameters
        fronts = build_fronts(
            time_index,
            parameters,
            self.config,
            ignition=self._ignition,
            projector=self.projector,
        )
        return SpreadFrame(
            time_index=time_index,
            simulated_minutes=time_index * self.config.step_minutes,
            parameters=parameters,
            fronts=fronts,
        )

    def clear(self) -> None:
        """Forget the ignition point. Parameters are kept for the next fire."""
        if self._ignition is not None:
            logger.info("Ignition cleared")
        self._ignition = None
