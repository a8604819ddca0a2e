"""Supporting systems: RNG, dice math, spatial index."""

from heistcity.systems.rng import DeterministicRNG, DiceRoller, RollProvider, scripted_rolls

__all__ = ["DeterministicRNG", "DiceRoller", "RollProvider", "scripted_rolls"]
