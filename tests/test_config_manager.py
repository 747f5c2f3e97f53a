import textwrap

import pytest

from managers.config_manager import ConfigManager
from models.color import Color
from models.enums import EffectID
from models.errors import EffectConfigError
from utils.logger import get_logger, LogLevel

EFFECTS_YAML = """
effects:
  pulse:
    defaults:
      min_brightness: 20
      pulse_count: 3
    presets:
      gentle:
        max_brightness: 60
      broken:
        min_brightness: 0
  fade:
    defaults:
      duration_ms: 2000
    presets:
      sunset:
        from_color: "#ff8c00"
        to_color: [80, 20, 0]
      slow:
        steps: 200
  flash:
    presets:
      alert:
        color2: {hue: 0}
        flash_count: 10
  sparkle:
    defaults: {}
"""

DEFAULTS_YAML = """
effects:
  heartbeat:
    defaults:
      beat_duration_ms: 300
"""


@pytest.fixture
def config_files(tmp_path):
    main = tmp_path / "effects.yaml"
    fallback = tmp_path / "factory_defaults.yaml"
    main.write_text(textwrap.dedent(EFFECTS_YAML), encoding="utf-8")
    fallback.write_text(textwrap.dedent(DEFAULTS_YAML), encoding="utf-8")
    return main, fallback


@pytest.fixture
def config(config_files):
    main, fallback = config_files
    manager = ConfigManager(config_path=main, defaults_path=fallback)
    manager.load()
    return manager


def test_defaults_apply_to_built_config(config):
    pulse = config.build_config(EffectID.PULSE)

    assert pulse.min_brightness == 20
    assert pulse.pulse_count == 3
    assert pulse.max_brightness == 100


def test_preset_then_overrides(config):
    pulse = config.build_config("pulse", preset="gentle", pulse_count=7)

    assert pulse.min_brightness == 20
    assert pulse.max_brightness == 60
    assert pulse.pulse_count == 7


def test_invalid_preset_is_skipped(config):
    assert config.list_presets(EffectID.PULSE) == ["gentle"]

    with pytest.raises(EffectConfigError) as err:
        config.build_config(EffectID.PULSE, preset="broken")

    assert err.value.details["available"] == ["gentle"]


def test_partial_presets_need_call_site_values(config):
    assert set(config.list_presets(EffectID.FADE)) == {"sunset", "slow"}

    sunset = config.build_config(EffectID.FADE, preset="sunset")
    assert sunset.from_color == Color(255, 140, 0)
    assert sunset.duration_ms == 2000

    with pytest.raises(EffectConfigError):
        config.build_config(EffectID.FADE, preset="slow")

    slow = config.build_config(EffectID.FADE, preset="slow", from_color="#000000", to_color="#ffffff")
    assert slow.steps == 200


def test_color_mappings_in_presets(config):
    alert = config.build_config(EffectID.FLASH, preset="alert")

    assert alert.color2 == Color.from_hue(0)
    assert alert.flash_count == 10


def test_unknown_effects_are_ignored(config):
    assert set(config.defaults) == {EffectID.PULSE, EffectID.FADE, EffectID.FLASH}


def test_effect_without_section_uses_model_defaults(config):
    sunrise = config.build_config(EffectID.SUNRISE)
    assert sunrise.steps == 100


def test_falls_back_to_factory_defaults(tmp_path, config_files):
    _, fallback = config_files
    manager = ConfigManager(config_path=tmp_path / "missing.yaml", defaults_path=fallback)

    manager.load()

    assert manager.get_defaults(EffectID.HEARTBEAT) == {"beat_duration_ms": 300}
    assert manager.build_config(EffectID.HEARTBEAT).beat_duration_ms == 300


def test_invalid_defaults_are_dropped(tmp_path):
    path = tmp_path / "effects.yaml"
    path.write_text("effects:\n  pulse:\n    defaults:\n      pulse_count: 0\n", encoding="utf-8")
    manager = ConfigManager(config_path=path, defaults_path=path)

    manager.load()

    assert manager.get_defaults(EffectID.PULSE) == {}


def test_logging_section_configures_logger(tmp_path):
    path = tmp_path / "effects.yaml"
    path.write_text("logging:\n  level: debug\n  colors: false\n", encoding="utf-8")

    ConfigManager(config_path=path, defaults_path=path).load()

    logger = get_logger()
    assert logger.min_level == LogLevel.DEBUG
    assert logger.use_colors is False


def test_shipped_config_loads():
    manager = ConfigManager()
    manager.load()

    assert "gentle" in manager.list_presets(EffectID.PULSE)
    assert "alert" in manager.list_presets(EffectID.FLASH)
    assert manager.build_config(EffectID.SUNRISE, preset="quick").duration_ms == 60000


def test_preset_with_bad_hue_is_skipped(tmp_path):
    path = tmp_path / "effects.yaml"
    path.write_text(textwrap.dedent("""
        effects:
          flash:
            presets:
              bad:
                color2: {hue: null}
              worse:
                color2: {hue: [0]}
              red:
                color2: {hue: 0}
    """), encoding="utf-8")
    manager = ConfigManager(config_path=path, defaults_path=path)

    manager.load()

    assert manager.list_presets(EffectID.FLASH) == ["red"]
