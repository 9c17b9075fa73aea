"""Tests for load switching."""

from nut_power.commands import load_off, load_on

from conftest import FakeConnection


def test_load_off():
    """Test load off sends load.off once for the UPS."""
    conn = FakeConnection()

    load_off(conn, "myups")

    assert conn.commands == [("myups", "load.off")]
    assert conn.fetched == []


def test_load_on():
    """Test load on sends load.on once for the UPS."""
    conn = FakeConnection()

    load_on(conn, "myups")

    assert conn.commands == [("myups", "load.on")]
