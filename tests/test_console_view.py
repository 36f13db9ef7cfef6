"""
ConsoleStateView — the dev/CLI presentation collaborator.
"""

import asyncio

import pytest

from src.adapters.simulator_booking import SimulatorBookingGateway, sample_ship_info
from src.adapters.simulator_store import InMemoryKeyValueStore
from src.console_view import ConsoleStateView, format_expiry, render_ship_info
from src.factory import create_manager
from src.freshness_manager import ManagerState


def test_format_expiry_non_numeric_passthrough():
    assert format_expiry("soon") == "soon"


def test_format_expiry_unix_seconds():
    rendered = format_expiry("1722409261")
    assert rendered.startswith("2024-07-")


def test_render_lists_segments():
    text = render_ship_info(sample_ship_info())
    assert "SHIP: ABCDEF" in text
    assert "#1  AAA (AAA DisplayName) → BBB (BBB DisplayName)" in text
    assert "#2  BBB (BBB DisplayName) → CCC (CCC DisplayName)" in text


def test_view_prints_error(capsys):
    view = ConsoleStateView()
    view(ManagerState(error=RuntimeError("remote down")))

    out = capsys.readouterr().out
    assert "[idle]" in out
    assert "error: remote down" in out


@pytest.mark.asyncio
async def test_view_follows_manager(capsys):
    manager = create_manager(gateway=SimulatorBookingGateway(), store=InMemoryKeyValueStore())
    view = ConsoleStateView()
    manager.subscribe(view)

    await manager.load()
    await asyncio.sleep(0)

    assert view.states[-1].snapshot is not None
    out = capsys.readouterr().out
    assert "[loading]" in out
    assert "SHIP: ABCDEF" in out
