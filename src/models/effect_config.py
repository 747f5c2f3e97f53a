"""
Effect configuration models

Immutable, validated parameter sets, one per effect type. Every range and
cross-field rule is checked at construction; a configuration that exists is
a configuration that can run.

Build through the classmethod so callers get EffectConfigError instead of
pydantic's ValidationError:

    config = PulseConfig.build(min_brightness=20, pulse_count=3)
    config = FadeConfig.build(from_color="#ff0000", to_color=(0, 0, 255), duration_ms=500, steps=5)
"""

from typing import Annotated, Callable, ClassVar, Dict, Optional, Type

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
    PlainValidator,
    ValidationError,
    model_validator,
)

from models.color import Color
from models.enums import EffectID
from models.errors import EffectConfigError

# Shortest allowed gap between two device writes
MIN_STEP_DELAY_MS = 10

# Pulse cycle: 5 sub-steps up, 5 sub-steps down
PULSE_SUB_STEPS = 10

CompletionCallback = Callable[[], None]
FaultCallback = Callable[[BaseException], None]

ColorField = Annotated[
    Color,
    PlainValidator(Color.parse),
    PlainSerializer(lambda c: c.to_hex(), return_type=str),
]
Brightness = Annotated[int, Field(ge=1, le=100)]
DurationMs = Annotated[int, Field(gt=0)]


def _check_step_delay(delay_ms: float, what: str) -> None:
    if delay_ms < MIN_STEP_DELAY_MS:
        raise ValueError(
            f"{what} too short: {delay_ms:.2f}ms per step "
            f"(minimum {MIN_STEP_DELAY_MS}ms per step required)"
        )


class EffectConfig(BaseModel):
    """
    Fields shared by every effect

    Attributes:
        preserve_state: Capture the light's state before the first step and
            restore it when the run ends
        on_complete: Called once per run, after cleanup, however the run ended
        on_fault: Called before on_complete when a scheduling fault aborted
            the run, with the fault as argument
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    effect_id: ClassVar[EffectID]

    preserve_state: bool = False
    on_complete: Optional[CompletionCallback] = Field(default=None, exclude=True, repr=False)
    on_fault: Optional[FaultCallback] = Field(default=None, exclude=True, repr=False)

    @classmethod
    def build(cls, **fields) -> "EffectConfig":
        """Validate fields and return a frozen config, or raise EffectConfigError"""
        try:
            return cls(**fields)
        except ValidationError as exc:
            raise EffectConfigError.from_validation(cls.effect_id.name, exc) from exc

    def describe(self) -> dict:
        """JSON-friendly view for logs (callbacks excluded)"""
        return self.model_dump(mode="json")


class BrightnessRangeConfig(EffectConfig):
    """Shared min/max brightness bounds for brightness-modulating effects"""
    min_brightness: Brightness = 10
    max_brightness: Brightness = 100

    @model_validator(mode="after")
    def check_brightness_order(self):
        if self.min_brightness >= self.max_brightness:
            raise ValueError("min_brightness must be less than max_brightness")
        return self


class FadeConfig(EffectConfig):
    """
    Linear color fade

    The first step (applied synchronously by start()) is from_color, the
    last is exactly to_color; steps are evenly spaced over duration_ms.
    """
    effect_id: ClassVar[EffectID] = EffectID.FADE

    from_color: ColorField
    to_color: ColorField
    duration_ms: DurationMs = 10_000
    steps: int = Field(default=50, ge=2)

    @property
    def step_delay_ms(self) -> float:
        return self.duration_ms / (self.steps - 1)

    @model_validator(mode="after")
    def check_timing(self):
        _check_step_delay(self.step_delay_ms, "Duration")
        return self


class SunriseConfig(EffectConfig):
    """Sunrise simulation: fixed warm color ramp plus a linear brightness ramp"""
    effect_id: ClassVar[EffectID] = EffectID.SUNRISE

    duration_ms: DurationMs = 20 * 60 * 1000
    start_brightness: Brightness = 1
    end_brightness: Brightness = 100
    steps: int = Field(default=100, ge=10)

    @property
    def step_delay_ms(self) -> float:
        return self.duration_ms / (self.steps - 1)

    @model_validator(mode="after")
    def check_ramp(self):
        if self.start_brightness >= self.end_brightness:
            raise ValueError("start_brightness must be less than end_brightness")
        _check_step_delay(self.step_delay_ms, "Duration")
        return self


class PulseConfig(BrightnessRangeConfig):
    """Triangle-wave brightness pulse, PULSE_SUB_STEPS writes per pulse"""
    effect_id: ClassVar[EffectID] = EffectID.PULSE

    pulse_duration_ms: DurationMs = 2000
    pulse_count: int = Field(default=5, ge=1)
    continuous: bool = False
    preserve_state: bool = True

    @property
    def step_delay_ms(self) -> float:
        return self.pulse_duration_ms / PULSE_SUB_STEPS

    @model_validator(mode="after")
    def check_timing(self):
        _check_step_delay(self.step_delay_ms, "pulse_duration_ms")
        return self


class HeartbeatConfig(BrightnessRangeConfig):
    """
    Two quick beats, a short pause between them, a longer pause per cycle

    Unbounded by default; set continuous=False to stop after beat_count
    cycles.
    """
    effect_id: ClassVar[EffectID] = EffectID.HEARTBEAT

    beat_duration_ms: DurationMs = 200
    pause_between_beats_ms: DurationMs = 150
    pause_between_cycles_ms: DurationMs = 600
    beat_count: int = Field(default=5, ge=1)
    continuous: bool = True

    @model_validator(mode="after")
    def check_timing(self):
        _check_step_delay(self.beat_duration_ms, "beat_duration_ms")
        _check_step_delay(self.pause_between_beats_ms, "pause_between_beats_ms")
        _check_step_delay(self.pause_between_cycles_ms, "pause_between_cycles_ms")
        return self


class FlashConfig(EffectConfig):
    """Alternate between two colors; one flash_count = color1 then color2"""
    effect_id: ClassVar[EffectID] = EffectID.FLASH

    color1: ColorField = Color.black()
    color2: ColorField = Color.white()
    flash_duration_ms: DurationMs = 500
    flash_count: int = Field(default=5, ge=1)
    continuous: bool = False

    @model_validator(mode="after")
    def check_timing(self):
        _check_step_delay(self.flash_duration_ms, "flash_duration_ms")
        return self


CONFIG_TYPES: Dict[EffectID, Type[EffectConfig]] = {
    EffectID.FADE: FadeConfig,
    EffectID.SUNRISE: SunriseConfig,
    EffectID.PULSE: PulseConfig,
    EffectID.HEARTBEAT: HeartbeatConfig,
    EffectID.FLASH: FlashConfig,
}


def config_type_for(effect_id: EffectID) -> Type[EffectConfig]:
    return CONFIG_TYPES[effect_id]
