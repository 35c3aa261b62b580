"""Arm/disarm contract of the countdown clock."""

import pytest

from assessment_engine.core.errors import AlreadyArmedError

from conftest import FakeClock


def test_arm_starts_timer_once():
    clock = FakeClock()
    clock.arm(60)

    assert clock.is_armed()
    assert clock.armed_for == 60
    with pytest.raises(AlreadyArmedError):
        clock.arm(60)
    assert clock.start_calls == 1


def test_arm_requires_positive_seconds():
    with pytest.raises(ValueError):
        FakeClock().arm(0)


def test_disarm_is_idempotent():
    clock = FakeClock()
    clock.disarm()
    clock.arm(5)
    clock.disarm()
    clock.disarm()

    assert not clock.is_armed()
    assert clock.stop_calls == 1


def test_ticks_only_delivered_while_armed():
    clock = FakeClock()
    ticks = []
    clock.set_tick_handler(lambda: ticks.append(1))

    clock.advance()
    clock.arm(5)
    clock.advance(2)
    clock.disarm()
    clock.advance()

    assert len(ticks) == 2


def test_clock_can_be_rearmed_after_disarm():
    clock = FakeClock()
    clock.arm(5)
    clock.disarm()
    clock.arm(10)

    assert clock.armed_for == 10
    assert clock.start_calls == 2
