"""Runtime configuration and tuned movement constants for MC Navigator."""

from __future__ import annotations

from dataclasses import dataclass, fields

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Excavation watchdog
DIG_POLL_INTERVAL_SECONDS = 0.5
DIG_START_GRACE_SECONDS = 3.0
DIG_IDLE_COMPLETION_SECONDS = 2.0
DEFAULT_DIG_TIMEOUT_SECONDS = 3.0

# Centering
ALIGNMENT_THRESHOLD = 0.1
CENTERED_BAND = 0.2
STRAFE_PULSE_SECONDS = 0.05
STRAFE_MAX_ATTEMPTS = 3
LOOK_SETTLE_SECONDS = 0.05

# Walking and jumping
WALK_PULSE_SECONDS = 0.2
JUMP_FORWARD_LEAD_SECONDS = 0.1
JUMP_HOLD_SECONDS = 0.1
JUMP_CARRY_SECONDS = 0.2
JUMP_SETTLE_SECONDS = 0.05
MIN_JUMP_PROGRESS = 0.3

# Pillaring and digging down
PILLAR_JUMP_DELAY_SECONDS = 0.1
PILLAR_AIRBORNE_WAIT_SECONDS = 0.2
PILLAR_LANDING_WAIT_SECONDS = 0.3
PILLAR_TRIGGER_RISE = 0.5
DIG_DOWN_FALL_WAIT_SECONDS = 0.2

# Driving loop
ARRIVAL_DISTANCE = 1.5
ARRIVAL_VERTICAL_TOLERANCE = 0.0
CLOSE_HORIZONTAL_DISTANCE = 1.0
MIN_STEP_PROGRESS = 0.3
DEFAULT_MAX_ITERATIONS = 10


@dataclass(slots=True)
class MovementTuning:
    """Timing and threshold knobs shared by the movement engine."""

    dig_poll_interval: float = DIG_POLL_INTERVAL_SECONDS
    dig_start_grace: float = DIG_START_GRACE_SECONDS
    dig_idle_completion: float = DIG_IDLE_COMPLETION_SECONDS
    default_dig_timeout: float = DEFAULT_DIG_TIMEOUT_SECONDS
    alignment_threshold: float = ALIGNMENT_THRESHOLD
    centered_band: float = CENTERED_BAND
    strafe_pulse: float = STRAFE_PULSE_SECONDS
    strafe_max_attempts: int = STRAFE_MAX_ATTEMPTS
    look_settle: float = LOOK_SETTLE_SECONDS
    walk_pulse: float = WALK_PULSE_SECONDS
    jump_forward_lead: float = JUMP_FORWARD_LEAD_SECONDS
    jump_hold: float = JUMP_HOLD_SECONDS
    jump_carry: float = JUMP_CARRY_SECONDS
    jump_settle: float = JUMP_SETTLE_SECONDS
    min_jump_progress: float = MIN_JUMP_PROGRESS
    pillar_jump_delay: float = PILLAR_JUMP_DELAY_SECONDS
    pillar_airborne_wait: float = PILLAR_AIRBORNE_WAIT_SECONDS
    pillar_landing_wait: float = PILLAR_LANDING_WAIT_SECONDS
    pillar_trigger_rise: float = PILLAR_TRIGGER_RISE
    dig_down_fall_wait: float = DIG_DOWN_FALL_WAIT_SECONDS
    arrival_distance: float = ARRIVAL_DISTANCE
    arrival_vertical_tolerance: float = ARRIVAL_VERTICAL_TOLERANCE
    close_horizontal_distance: float = CLOSE_HORIZONTAL_DISTANCE
    min_step_progress: float = MIN_STEP_PROGRESS


class Settings(BaseSettings):
    """Environment-driven runtime settings."""

    model_config = SettingsConfigDict(env_prefix="MC_NAVIGATOR_", env_file=".env", extra="ignore")

    app_name: str = "mc-navigator"
    log_level: str = "INFO"
    telemetry_enabled: bool = True
    max_iterations: int = Field(default=DEFAULT_MAX_ITERATIONS, ge=1)

    dig_poll_interval: float = Field(default=DIG_POLL_INTERVAL_SECONDS, gt=0)
    dig_start_grace: float = Field(default=DIG_START_GRACE_SECONDS, gt=0)
    dig_idle_completion: float = Field(default=DIG_IDLE_COMPLETION_SECONDS, gt=0)
    default_dig_timeout: float = Field(
        default=DEFAULT_DIG_TIMEOUT_SECONDS,
        gt=0,
        description="Per-block dig timeout used when the caller does not pass one.",
    )
    alignment_threshold: float = ALIGNMENT_THRESHOLD
    centered_band: float = CENTERED_BAND
    strafe_pulse: float = STRAFE_PULSE_SECONDS
    strafe_max_attempts: int = Field(default=STRAFE_MAX_ATTEMPTS, ge=1)
    look_settle: float = LOOK_SETTLE_SECONDS

    walk_pulse: float = WALK_PULSE_SECONDS
    jump_forward_lead: float = JUMP_FORWARD_LEAD_SECONDS
    jump_hold: float = JUMP_HOLD_SECONDS
    jump_carry: float = JUMP_CARRY_SECONDS
    jump_settle: float = JUMP_SETTLE_SECONDS
    min_jump_progress: float = MIN_JUMP_PROGRESS

    pillar_jump_delay: float = PILLAR_JUMP_DELAY_SECONDS
    pillar_airborne_wait: float = PILLAR_AIRBORNE_WAIT_SECONDS
    pillar_landing_wait: float = PILLAR_LANDING_WAIT_SECONDS
    pillar_trigger_rise: float = PILLAR_TRIGGER_RISE
    dig_down_fall_wait: float = DIG_DOWN_FALL_WAIT_SECONDS

    arrival_distance: float = ARRIVAL_DISTANCE
    arrival_vertical_tolerance: float = Field(default=ARRIVAL_VERTICAL_TOLERANCE, ge=0)
    close_horizontal_distance: float = CLOSE_HORIZONTAL_DISTANCE
    min_step_progress: float = MIN_STEP_PROGRESS

    def tuning(self) -> MovementTuning:
        """Build the tuning bundle consumed by the engine."""
        return MovementTuning(**{item.name: getattr(self, item.name) for item in fields(MovementTuning)})


settings = Settings()
