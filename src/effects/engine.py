"""
Effect Engine

Registry of effect controllers and factory for building them from
configuration presets. Keeps track of the controllers it created so they
can all be stopped at shutdown.
"""

import asyncio
from typing import Dict, List, Optional, Type

from effects.base import BaseEffect
from effects.fade import FadeEffect
from effects.flash import FlashEffect
from effects.heartbeat import HeartbeatEffect
from effects.pulse import PulseEffect
from effects.sequencer import SHUTDOWN_GRACE_S
from effects.sunrise import SunriseEffect
from hardware.light.light_interface import ILight
from lifecycle.task_registry import TaskRegistry
from managers.config_manager import ConfigManager
from models.enums import EffectID
from models.errors import EffectConfigError
from utils.enum_helper import EnumHelper
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.EFFECT)


class EffectEngine:
    """
    Creates and tracks effect controllers

    Example:
        engine = EffectEngine(config_manager)
        pulse = engine.start(EffectID.PULSE, light, preset="notify")
        ...
        await engine.stop_all()
    """

    EFFECTS: Dict[EffectID, Type[BaseEffect]] = {
        EffectID.FADE: FadeEffect,
        EffectID.SUNRISE: SunriseEffect,
        EffectID.PULSE: PulseEffect,
        EffectID.HEARTBEAT: HeartbeatEffect,
        EffectID.FLASH: FlashEffect,
    }

    def __init__(self, config_manager: Optional[ConfigManager] = None):
        self.config_manager = config_manager
        self.effects: List[BaseEffect] = []

    def create(self, effect_id, light: ILight, preset: Optional[str] = None, **overrides) -> BaseEffect:
        """
        Build a controller (not started)

        Args:
            effect_id: EffectID or its name ("pulse")
            light: Light to drive
            preset: Named preset from the config manager
            **overrides: Config fields, applied last

        Raises:
            EffectConfigError: invalid parameters or unknown preset
            ValueError: unknown effect id
        """
        effect_id = EnumHelper.to_enum(EffectID, effect_id)
        effect_class = self.EFFECTS[effect_id]

        if self.config_manager is not None:
            config = self.config_manager.build_config(effect_id, preset, **overrides)
        elif preset is not None:
            raise EffectConfigError(effect_id.name, f"Preset '{preset}' requested but no config is loaded")
        else:
            config = effect_class.CONFIG_TYPE.build(**overrides)

        effect = effect_class(light, config)
        # forget controllers whose runs are over; unstarted ones stay tracked
        self.effects = [e for e in self.effects if e.is_running() or e.outcome is None]
        self.effects.append(effect)
        log.debug(f"Created {effect_id.name} effect", preset=preset or "-")
        return effect

    def start(self, effect_id, light: ILight, preset: Optional[str] = None, **overrides) -> BaseEffect:
        """Create a controller and start it on the running loop"""
        effect = self.create(effect_id, light, preset, **overrides)
        effect.start()
        return effect

    def active(self) -> List[BaseEffect]:
        return [e for e in self.effects if e.is_running()]

    async def stop_all(self, timeout: Optional[float] = SHUTDOWN_GRACE_S + 1.0) -> None:
        """Stop every running effect and wait for their scheduling tasks to exit"""
        effects = list(self.effects)
        running = [e for e in effects if e.is_running()]
        if running:
            log.info(f"Stopping {len(running)} effects")
        for effect in running:
            effect.stop()

        results = await asyncio.gather(*(e.wait_closed(timeout) for e in effects))
        for effect, closed in zip(effects, results):
            if not closed:
                log.warn(f"{effect.name} task still running after stop", timeout=timeout)

        self.effects.clear()
        TaskRegistry.instance().prune_finished()
