"""Exception types raised inside the movement engine."""

from __future__ import annotations

from typing import Any

from mc_navigator.models import FailureKind


class NavigationError(RuntimeError):
    """Domain failure raised by a component and turned into a value by its caller."""

    kind: FailureKind = FailureKind.NOT_APPLICABLE

    def __init__(self, message: str, *, kind: FailureKind | None = None, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        if kind is not None:
            self.kind = kind
        self.details = details or {}


class NotAxisAlignedError(NavigationError):
    kind = FailureKind.NOT_AXIS_ALIGNED


class CenteringFailedError(NavigationError):
    kind = FailureKind.CENTERING_FAILED


class ToolResolutionError(NavigationError):
    """Raised when no usable tool can be chosen for a block."""


class InventoryDesyncError(RuntimeError):
    """Raised when inventory contents contradict what the engine just observed."""


class StepInProgressError(RuntimeError):
    """Raised when a step is requested while another one is still running."""
