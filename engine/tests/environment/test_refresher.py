"""Tests for the periodic environment refresher."""

import asyncio

import pytest

from firefront.environment.refresher import EnvironmentRefresher
from firefront.environment.source import StaticEnvironmentSource
from firefront.errors import EnvironmentFetchError
from firefront.spread.session import FireSession
from firefront.types import SpreadParameters


class GatedSource:
    """Each fetch blocks until its gate is opened by the test."""

    def __init__(self, samples):
        self.samples = samples
        self.gates = []

    async def fetch(self, point):
        gate = asyncio.Event()
        sample = self.samples[min(len(self.gates), len(self.samples) - 1)]
        self.gates.append(gate)
        await gate.wait()
        return sample


class FailingSource:
    def __init__(self, exc):
        self.exc = exc
        self.calls = 0

    async def fetch(self, point):
        self.calls += 1
        raise self.exc


class TestRefreshOnce:
    """Test single environmental refreshes."""

    async def test_applies_sample(self, session, windy_sample):
        refresher = EnvironmentRefresher(session, StaticEnvironmentSource(windy_sample))
        assert await refresher.refresh_once() is True
        assert session.sample == windy_sample
        assert session.parameters.wind_direction == 45.0
        assert session.parameters.rate > 1.0

    async def test_without_ignition(self, short_config, windy_sample):
        session = FireSession(short_config)
        refresher = EnvironmentRefresher(session, StaticEnvironmentSource(windy_sample))
        assert await refresher.refresh_once() is False
        assert session.sample is None

    async def test_failure_keeps_previous_parameters(self, session, windy_sample):
        session.apply_sample(windy_sample)
        before = session.parameters
        refresher = EnvironmentRefresher(
            session, FailingSource(EnvironmentFetchError("timeout"))
        )
        assert await refresher.refresh_once() is False
        assert session.parameters == before

    async def test_failure_with_defaults(self, session):
        refresher = EnvironmentRefresher(
            session, FailingSource(EnvironmentFetchError("no data"))
        )
        await refresher.refresh_once()
        assert session.parameters == SpreadParameters()

    async def test_last_fetch_wins(self, session, neutral_sample, windy_sample):
        """A slow earlier fetch cannot overwrite a newer result."""
        source = GatedSource([neutral_sample, windy_sample])
        refresher = EnvironmentRefresher(session, source)

        older = asyncio.create_task(refresher.refresh_once())
        await asyncio.sleep(0)
        newer = asyncio.create_task(refresher.refresh_once())
        await asyncio.sleep(0)
        assert len(source.gates) == 2

        source.gates[1].set()
        assert await newer is True
        source.gates[0].set()
        assert await older is False
        assert session.sample == windy_sample

    async def test_result_after_clear_discarded(self, session, windy_sample):
        source = GatedSource([windy_sample])
        refresher = EnvironmentRefresher(session, source)
        task = asyncio.create_task(refresher.refresh_once())
        await asyncio.sleep(0)
        session.clear()
        source.gates[0].set()
        assert await task is False
        assert session.sample is None


class TestPollLoop:
    """Test the cooperative poll loop."""

    async def test_polls_repeatedly(self, session, windy_sample):
        refresher = EnvironmentRefresher(
            session, StaticEnvironmentSource(windy_sample), interval_s=0.005
        )
        refresher.start()
        await asyncio.sleep(0.05)
        assert refresher.running
        assert refresher.iterations > 1
        assert session.sample == windy_sample
        refresher.stop()

    async def test_skips_while_in_flight(self, session, windy_sample):
        """Overlapping fetches are never started."""
        source = GatedSource([windy_sample])
        refresher = EnvironmentRefresher(session, source, interval_s=0.005)
        refresher.start()
        await asyncio.sleep(0.05)
        assert refresher.iterations > 1
        assert len(source.gates) == 1
        refresher.stop()

    async def test_stop_abandons_in_flight(self, session, windy_sample):
        source = GatedSource([windy_sample])
        refresher = EnvironmentRefresher(session, source, interval_s=0.005)
        refresher.start()
        await asyncio.sleep(0.02)
        refresher.stop()
        source.gates[0].set()
        await asyncio.sleep(0.02)
        assert session.sample is None
        assert not refresher.running

    async def test_stop_idempotent(self, session, windy_sample):
        refresher = EnvironmentRefresher(session, StaticEnvironmentSource(windy_sample))
        refresher.stop()
        refresher.start()
        refresher.stop()
        refresher.stop()
        assert not refresher.running

    async def test_unexpected_errors_do_not_stop_loop(self, session):
        source = FailingSource(RuntimeError("boom"))
        refresher = EnvironmentRefresher(session, source, interval_s=0.005)
        refresher.start()
        await asyncio.sleep(0.05)
        assert refresher.running
        assert source.calls > 1
        refresher.stop()

    async def test_start_twice_keeps_one_loop(self, session, windy_sample):
        refresher = EnvironmentRefresher(
            session, StaticEnvironmentSource(windy_sample), interval_s=0.005
        )
        refresher.start()
        first = refresher._task
        refresher.start()
        assert refresher._task is first
        refresher.stop()

    def test_interval_defaults_to_config(self, session, windy_sample):
        refresher = EnvironmentRefresher(session, StaticEnvironmentSource(windy_sample))
        assert refresher.interval_s == pytest.approx(session.config.poll_interval_s)
