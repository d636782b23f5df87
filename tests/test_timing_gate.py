from __future__ import annotations
import pytest

from u16fuzz.timing import TimingGate


class FakeClock:
    def __init__(self):
        self.t = 100.0

    def __call__(self):
        return self.t


def test_gate_opens_once_per_interval():
    clock = FakeClock()
    gate = TimingGate(200, clock=clock)
    assert not gate.ready()
    clock.t += 0.150
    assert not gate.ready()
    clock.t += 0.100
    assert gate.ready()
    # fenêtre repartie du dernier affichage
    assert not gate.ready()
    clock.t += 0.201
    assert gate.ready()


def test_gate_zero_interval_opens_when_time_moves():
    clock = FakeClock()
    gate = TimingGate(0, clock=clock)
    assert not gate.ready()
    clock.t += 0.001
    assert gate.ready()


def test_gate_rejects_negative_interval():
    with pytest.raises(ValueError):
        TimingGate(-1)
