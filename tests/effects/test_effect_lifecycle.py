"""
Run lifecycle shared by every effect: finalize once, fault handling,
callback isolation, stopping from other threads.
"""

import asyncio

import pytest

from effects.fade import FadeEffect
from effects.flash import FlashEffect
from effects.pulse import PulseEffect
from hardware.light.virtual_light import VirtualLight
from models.color import Color
from models.enums import RunOutcome
from models.errors import SchedulingFault
from models.light_state import LightState

RED = Color(255, 0, 0)
BLUE = Color(0, 0, 255)


@pytest.mark.asyncio
async def test_compute_fault_ends_run_as_faulted(light, on_complete, on_fault):
    fade = FadeEffect.build(
        light, from_color=RED, to_color=BLUE, duration_ms=40, steps=5,
        on_complete=on_complete, on_fault=on_fault,
    )
    original = fade.state_at

    def broken(step):
        if step == 2:
            raise ZeroDivisionError("bad ratio")
        return original(step)

    fade.state_at = broken
    fade.start()

    assert await fade.wait_closed(timeout=2.0)

    assert not fade.is_running()
    assert fade.outcome == RunOutcome.FAULTED
    assert len(light.writes) == 2

    fault = fade.last_error
    assert isinstance(fault, SchedulingFault)
    assert fault.code == "SCHEDULING_FAULT"
    assert isinstance(fault.__cause__, ZeroDivisionError)
    on_fault.assert_called_once_with(fault)
    on_complete.assert_called_once_with()


@pytest.mark.asyncio
async def test_fault_callbacks_fire_in_order(light):
    calls = []
    fade = FadeEffect.build(
        light, from_color=RED, to_color=BLUE, duration_ms=20, steps=2,
        on_complete=lambda: calls.append("complete"),
        on_fault=lambda err: calls.append("fault"),
    )
    fade.state_at = lambda step: 1 / 0
    fade.start()
    await fade.wait_closed(timeout=1.0)

    assert calls == ["fault", "complete"]


@pytest.mark.asyncio
async def test_on_fault_not_called_for_clean_runs(light, on_fault):
    fade = FadeEffect.build(light, from_color=RED, to_color=BLUE, duration_ms=20, steps=2, on_fault=on_fault)
    fade.start()
    await fade.wait_closed(timeout=1.0)

    on_fault.assert_not_called()
    assert fade.last_error is None


@pytest.mark.asyncio
async def test_failing_completion_callback_is_contained(light):
    def explode():
        raise ValueError("callback bug")

    fade = FadeEffect.build(light, from_color=RED, to_color=BLUE, duration_ms=20, steps=2, on_complete=explode)
    fade.start()

    assert await fade.wait_closed(timeout=1.0)
    assert fade.outcome == RunOutcome.COMPLETED

    # controller remains usable
    fade.start()
    fade.stop()
    assert fade.run_id == 2
    await fade.wait_closed(timeout=1.0)


@pytest.mark.asyncio
async def test_completion_fires_once_despite_repeated_stops(light, on_complete):
    pulse = PulseEffect.build(light, pulse_duration_ms=100, continuous=True, on_complete=on_complete)
    pulse.start()
    await asyncio.sleep(0.03)

    pulse.stop()
    pulse.stop()
    await pulse.wait_closed(timeout=1.0)
    pulse.stop()

    on_complete.assert_called_once_with()


@pytest.mark.asyncio
async def test_stop_from_another_thread(light, on_complete):
    pulse = PulseEffect.build(light, pulse_duration_ms=200, continuous=True, on_complete=on_complete)
    pulse.start()
    await asyncio.sleep(0.05)

    await asyncio.to_thread(pulse.stop)

    assert not pulse.is_running()
    assert await pulse.wait_closed(timeout=1.0)
    written = len(light.writes)
    await asyncio.sleep(0.05)
    assert len(light.writes) == written
    on_complete.assert_called_once_with()


@pytest.mark.asyncio
async def test_callback_sees_run_already_ended(light):
    seen = []
    flash = FlashEffect.build(
        light, flash_duration_ms=10, flash_count=1,
        on_complete=lambda: seen.append(flash.is_running()),
    )
    flash.start()
    await flash.wait_closed(timeout=1.0)

    assert seen == [False]


@pytest.mark.asyncio
async def test_write_fault_during_restore_is_contained(on_complete):
    light = VirtualLight(on=False, fail_on=lambda state, n: state == LightState(on=False))
    pulse = PulseEffect.build(light, pulse_duration_ms=100, pulse_count=1, on_complete=on_complete)
    pulse.start()

    await pulse.wait_closed(timeout=2.0)

    assert pulse.outcome == RunOutcome.COMPLETED
    assert light.is_on()
    on_complete.assert_called_once_with()
