import asyncio

import pytest

from effects.flash import FlashEffect
from models.color import Color
from models.enums import RunOutcome
from models.light_state import LightState

RED = Color(255, 0, 0)
GREEN = Color(0, 255, 0)


@pytest.mark.asyncio
async def test_flash_alternates_and_settles_on_second_color(light):
    flash = FlashEffect.build(light, color1=RED, color2=GREEN, flash_duration_ms=20, flash_count=3)
    flash.start()

    assert await flash.wait_closed(timeout=2.0)

    colors = [w.color for w in light.writes]
    assert colors[:6] == [RED, GREEN] * 3
    assert light.writes[-1] == LightState(on=True, color=GREEN)
    assert len(light.writes) == 7
    assert flash.completed_cycles() == 3
    assert flash.outcome == RunOutcome.COMPLETED


@pytest.mark.asyncio
async def test_stopped_flash_settles_on_second_color(light):
    flash = FlashEffect.build(light, color1=RED, color2=GREEN, flash_duration_ms=20, continuous=True)
    flash.start()
    await asyncio.sleep(0.05)

    flash.stop()

    assert light.color == GREEN
    assert light.writes[-1] == LightState(on=True, color=GREEN)
    assert await flash.wait_closed(timeout=1.0)


@pytest.mark.asyncio
async def test_flash_with_preserve_restores_snapshot(capturing_light):
    flash = FlashEffect.build(
        capturing_light, color1="#ff0000", color2="#00ff00",
        flash_duration_ms=10, flash_count=1, preserve_state=True,
    )
    flash.start()
    await flash.wait_closed(timeout=2.0)

    assert capturing_light.color == Color(10, 20, 30)
    assert capturing_light.brightness == 42


def test_flash_defaults():
    config = FlashEffect.CONFIG_TYPE()

    assert config.color1 == Color(0, 0, 0)
    assert config.color2 == Color(255, 255, 255)
    assert config.flash_duration_ms == 500
    assert config.flash_count == 5
    assert config.continuous is False
