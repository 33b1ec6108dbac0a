"""World adapters (protocol boundary and the in-memory simulation)."""

from .simulated import DigAbortedError, SimulatedBot
from .world import Actuator, Bot, ControlState, WorldSensor

__all__ = [
    "Actuator",
    "Bot",
    "ControlState",
    "DigAbortedError",
    "SimulatedBot",
    "WorldSensor",
]
