"""Tests for the connection status monitor."""

import pytest
from unittest.mock import AsyncMock, MagicMock

from healthtracker.config import RemoteConfig
from healthtracker.sync import ConnectionMonitor, ConnectionStatus, RemoteClient


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


def make_remote(configured=True, healthy=True) -> RemoteClient:
    remote = RemoteClient(RemoteConfig(url="https://sheet.test/exec" if configured else ""))
    remote.health_check = AsyncMock(return_value=healthy)
    return remote


class TestConnectionMonitor:
    """Tests for ConnectionMonitor state transitions."""

    def test_starts_unknown_and_hidden(self, clock):
        monitor = ConnectionMonitor(make_remote(), clock=clock)

        assert monitor.status == ConnectionStatus.UNKNOWN
        assert monitor.visible is False

    @pytest.mark.asyncio
    async def test_online_transition(self, clock):
        listener = MagicMock()
        monitor = ConnectionMonitor(make_remote(healthy=True), listener=listener, clock=clock)

        status = await monitor.check()

        assert status == ConnectionStatus.ONLINE
        statuses = [call.args[0] for call in listener.call_args_list]
        assert statuses == [ConnectionStatus.CHECKING, ConnectionStatus.ONLINE]
        assert "Connected" in monitor.message

    @pytest.mark.asyncio
    async def test_offline_when_health_check_fails(self, clock):
        listener = MagicMock()
        monitor = ConnectionMonitor(make_remote(healthy=False), listener=listener, clock=clock)

        status = await monitor.check()

        assert status == ConnectionStatus.OFFLINE
        statuses = [call.args[0] for call in listener.call_args_list]
        assert statuses == [ConnectionStatus.CHECKING, ConnectionStatus.OFFLINE]
        assert monitor.visible is True

    @pytest.mark.asyncio
    async def test_unconfigured_goes_offline_without_request(self, clock):
        remote = make_remote(configured=False)
        listener = MagicMock()
        monitor = ConnectionMonitor(remote, listener=listener, clock=clock)

        status = await monitor.check()

        assert status == ConnectionStatus.OFFLINE
        remote.health_check.assert_not_called()
        listener.assert_called_once()
        assert "not configured" in monitor.message

    @pytest.mark.asyncio
    async def test_online_hides_after_display_period(self, clock):
        monitor = ConnectionMonitor(make_remote(), online_display_seconds=5, clock=clock)

        await monitor.check()
        assert monitor.visible is True

        clock.now += 4.9
        assert monitor.visible is True

        clock.now += 0.2
        assert monitor.visible is False
        assert monitor.status == ConnectionStatus.ONLINE

    @pytest.mark.asyncio
    async def test_recheck_can_go_offline(self, clock):
        remote = make_remote(healthy=True)
        monitor = ConnectionMonitor(remote, clock=clock)

        assert await monitor.check() == ConnectionStatus.ONLINE

        remote.health_check.return_value = False
        assert await monitor.check() == ConnectionStatus.OFFLINE
