"""
Config Manager

Loads effects.yaml: logging settings, per-effect default parameters and
named presets. Falls back to factory_defaults.yaml when the main file is
missing or broken. Builds validated effect configurations by layering
defaults -> preset -> call-site overrides.
"""

import yaml
from pathlib import Path
from typing import Dict, List, Optional, Type
from models.effect_config import EffectConfig, config_type_for
from models.enums import EffectID
from models.errors import EffectConfigError
from utils.enum_helper import EnumHelper
from utils.logger import get_logger, configure_logger, LogLevel, LogCategory

log = get_logger().for_category(LogCategory.CONFIG)


class ConfigManager:
    """
    Effect configuration manager

    File layout:
        logging:
          level: INFO
          colors: true
        effects:
          pulse:
            defaults: {min_brightness: 10, max_brightness: 100}
            presets:
              gentle: {min_brightness: 30, pulse_duration_ms: 4000}

    Example:
        config = ConfigManager()
        config.load()
        pulse_cfg = config.build_config(EffectID.PULSE, preset="gentle", pulse_count=3)
    """

    def __init__(self, config_path="config/effects.yaml", defaults_path="config/factory_defaults.yaml"):
        """
        Args:
            config_path: Main config file (relative paths resolve against src/)
            defaults_path: Factory defaults fallback
        """
        self.config_path = Path(config_path)
        self.factory_defaults_path = Path(defaults_path)
        self.data: dict = {}

        self.defaults: Dict[EffectID, dict] = {}
        self.presets: Dict[EffectID, Dict[str, dict]] = {}

    def load(self) -> dict:
        """
        Load YAML configuration

        Process:
        1. Load main effects.yaml
        2. Fallback to factory_defaults.yaml on failure
        3. Apply logging settings
        4. Parse and validate per-effect defaults and presets

        Returns:
            Loaded config data dict
        """
        src_dir = Path(__file__).parent.parent
        try:
            self.data = self._read(src_dir / self.config_path)
            log.info("Loaded effects config", path=str(self.config_path))
        except Exception as ex:
            log.error("Failed to load effects config", error=str(ex), error_type=type(ex).__name__)
            log.warn("Falling back to factory defaults")
            self.data = self._read(src_dir / self.factory_defaults_path)

        self._apply_logging(self.data.get("logging") or {})
        self._parse_effects(self.data.get("effects") or {})
        return self.data

    @staticmethod
    def _read(path: Path) -> dict:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"{path.name}: top level must be a mapping")
        return data

    def _apply_logging(self, section: dict):
        if not section:
            return
        try:
            level = EnumHelper.to_enum(LogLevel, section.get("level", "INFO"))
        except ValueError as ex:
            log.warn("Invalid log level, keeping INFO", error=str(ex))
            level = LogLevel.INFO
        configure_logger(min_level=level, use_colors=bool(section.get("colors", True)))

    def _parse_effects(self, effects_map: dict):
        self.defaults.clear()
        self.presets.clear()

        for effect_key, effect_data in effects_map.items():
            try:
                effect_id = EnumHelper.to_enum(EffectID, effect_key)
            except ValueError:
                log.warn(f"Unknown effect '{effect_key}' in config, skipping")
                continue

            effect_data = effect_data or {}
            config_type = config_type_for(effect_id)

            # Partial parameter sets are fine (fade colors usually come from the caller)
            defaults = dict(effect_data.get("defaults") or {})
            error = self._check(config_type, defaults)
            if error is not None:
                log.error(f"Invalid defaults for {effect_id.name}, using built-in defaults", error=error.message)
                defaults = {}
            self.defaults[effect_id] = defaults

            presets: Dict[str, dict] = {}
            for name, params in (effect_data.get("presets") or {}).items():
                params = dict(params or {})
                error = self._check(config_type, {**defaults, **params})
                if error is not None:
                    log.warn(f"Skipping invalid preset '{name}' for {effect_id.name}", error=error.message)
                    continue
                presets[str(name)] = params
            self.presets[effect_id] = presets

            log.debug(f"{effect_id.name}: {len(defaults)} defaults, {len(presets)} presets")

        log.info(
            f"Effect config ready for {len(self.defaults)} effects",
            presets=sum(len(p) for p in self.presets.values()),
        )

    @staticmethod
    def _check(config_type: Type[EffectConfig], params: dict) -> Optional[EffectConfigError]:
        """Validation error for params, ignoring required fields not given yet"""
        try:
            config_type.build(**params)
        except EffectConfigError as ex:
            return None if ex.only_missing else ex
        return None

    # ===== Access =====

    def get_defaults(self, effect_id) -> dict:
        return dict(self.defaults.get(EnumHelper.to_enum(EffectID, effect_id), {}))

    def list_presets(self, effect_id) -> List[str]:
        return list(self.presets.get(EnumHelper.to_enum(EffectID, effect_id), {}).keys())

    def get_preset(self, effect_id, name: str) -> dict:
        """
        Raw preset parameters (without defaults)

        Raises:
            EffectConfigError: unknown preset
        """
        effect_id = EnumHelper.to_enum(EffectID, effect_id)
        presets = self.presets.get(effect_id, {})
        if name not in presets:
            raise EffectConfigError(
                effect_id.name,
                f"Unknown preset '{name}'",
                {"preset": name, "available": list(presets.keys())}
            )
        return dict(presets[name])

    def build_config(self, effect_id, preset: Optional[str] = None, **overrides) -> EffectConfig:
        """
        Build a validated config: defaults, then preset, then overrides

        Raises:
            EffectConfigError: unknown preset or invalid resulting parameters
        """
        effect_id = EnumHelper.to_enum(EffectID, effect_id)
        params = self.get_defaults(effect_id)
        if preset is not None:
            params.update(self.get_preset(effect_id, preset))
        params.update(overrides)
        return config_type_for(effect_id).build(**params)
