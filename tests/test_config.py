from __future__ import annotations

from dataclasses import fields

import pytest
from pydantic import ValidationError

from mc_navigator.config import MovementTuning, Settings


def test_every_tuning_value_comes_from_settings() -> None:
    tuning = Settings().tuning()

    assert tuning == MovementTuning()
    for item in fields(MovementTuning):
        assert item.name in Settings.model_fields


def test_environment_overrides_reach_the_tuning(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MC_NAVIGATOR_JUMP_HOLD", "0.25")
    monkeypatch.setenv("MC_NAVIGATOR_DIG_DOWN_FALL_WAIT", "0.4")
    monkeypatch.setenv("MC_NAVIGATOR_CLOSE_HORIZONTAL_DISTANCE", "2")
    monkeypatch.setenv("MC_NAVIGATOR_ARRIVAL_VERTICAL_TOLERANCE", "0.5")

    tuning = Settings().tuning()

    assert tuning.jump_hold == 0.25
    assert tuning.dig_down_fall_wait == 0.4
    assert tuning.close_horizontal_distance == 2.0
    assert tuning.arrival_vertical_tolerance == 0.5


def test_invalid_values_are_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MC_NAVIGATOR_STRAFE_MAX_ATTEMPTS", "0")

    with pytest.raises(ValidationError):
        Settings()
