import asyncio

import pytest

from effects.engine import EffectEngine
from effects.flash import FlashEffect
from effects.pulse import PulseEffect
from lifecycle.task_registry import TaskCategory, TaskRegistry
from managers.config_manager import ConfigManager
from models.enums import EffectID
from models.errors import EffectConfigError


def test_registry_covers_every_effect():
    assert set(EffectEngine.EFFECTS) == set(EffectID)


def test_create_by_name_without_config(light):
    engine = EffectEngine()

    effect = engine.create("pulse", light, pulse_count=2)

    assert isinstance(effect, PulseEffect)
    assert effect.config.pulse_count == 2
    assert not effect.is_running()


def test_preset_without_config_manager_is_an_error(light):
    with pytest.raises(EffectConfigError):
        EffectEngine().create(EffectID.FLASH, light, preset="alert")


def test_unknown_effect_name(light):
    with pytest.raises(ValueError):
        EffectEngine().create("rainbow", light)


def test_create_from_preset(light):
    config = ConfigManager()
    config.load()
    engine = EffectEngine(config)

    effect = engine.create(EffectID.FLASH, light, preset="alert")

    assert isinstance(effect, FlashEffect)
    assert effect.config.flash_count == 10


@pytest.mark.asyncio
async def test_stop_all(light, light_off):
    engine = EffectEngine()
    pulse = engine.start(EffectID.PULSE, light, pulse_duration_ms=100, continuous=True)
    flash = engine.start(EffectID.FLASH, light_off, flash_duration_ms=20, continuous=True)
    await asyncio.sleep(0.05)

    assert set(engine.active()) == {pulse, flash}
    assert len(TaskRegistry.instance().active(TaskCategory.EFFECT)) == 2

    await engine.stop_all()

    assert engine.active() == []
    assert not pulse.is_running()
    assert not flash.is_running()
    assert TaskRegistry.instance().list_all() == []


@pytest.mark.asyncio
async def test_stop_all_stops_effects_created_before_starting(light, light_off):
    engine = EffectEngine()
    pulse = engine.create(EffectID.PULSE, light, pulse_duration_ms=100, continuous=True)
    flash = engine.create(EffectID.FLASH, light_off, flash_duration_ms=20, continuous=True)

    assert engine.effects == [pulse, flash]

    pulse.start()
    flash.start()
    await asyncio.sleep(0.03)
    await engine.stop_all()

    assert not pulse.is_running()
    assert not flash.is_running()
    assert TaskRegistry.instance().list_all() == []
