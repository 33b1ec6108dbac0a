from __future__ import annotations

import pytest

from mc_navigator.config import MovementTuning


@pytest.fixture
def fast_tuning() -> MovementTuning:
    """Tuning with millisecond pulses and a short watchdog so tests stay quick."""
    return MovementTuning(
        dig_poll_interval=0.01,
        dig_start_grace=0.05,
        dig_idle_completion=0.04,
        default_dig_timeout=1.0,
        strafe_pulse=0.001,
        look_settle=0.0,
        walk_pulse=0.001,
        jump_forward_lead=0.001,
        jump_hold=0.001,
        jump_carry=0.001,
        jump_settle=0.0,
        pillar_jump_delay=0.001,
        pillar_airborne_wait=0.001,
        pillar_landing_wait=0.001,
        dig_down_fall_wait=0.001,
    )
