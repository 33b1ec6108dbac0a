"""Step-by-step movement engine for agents in a voxel world."""

__version__ = "0.1.0"
