"""Immutable result records returned by resolution functions.

Resolution never mutates a character; callers apply ``target_wounds_after``
and ``target_state_after`` themselves.
"""

from __future__ import annotations

from dataclasses import dataclass

from heistcity.core.enums import AttackType, CharacterState


@dataclass(frozen=True, slots=True)
class DiceRollResult:
    """A single 2d6 roll."""

    die1: int
    die2: int

    @property
    def total(self) -> int:
        return self.die1 + self.die2

    @classmethod
    def from_total(cls, total: int) -> DiceRollResult:
        """Canonical dice pair for a given 2..12 total (used by scripted rolls)."""
        if not 2 <= total <= 12:
            raise ValueError(f"2d6 total out of range: {total}")
        die1 = min(6, total - 1)
        return cls(die1, total - die1)

    def to_dict(self) -> dict[str, int]:
        return {"die1": self.die1, "die2": self.die2, "total": self.total}


@dataclass(frozen=True, slots=True)
class AttackResult:
    hit: bool
    roll: DiceRollResult
    target_number: int
    damage: int
    weapon_id: str
    attack_type: AttackType
    attacker_state: CharacterState


@dataclass(frozen=True, slots=True)
class DefenseResult:
    saved: bool
    roll: DiceRollResult
    target_number: int
    damage_reduced: int
    final_damage: int


@dataclass(frozen=True, slots=True)
class DamageOutcome:
    """Wounds and state after damage, plus whether this hit downed the target."""

    wounds_after: int
    state_after: CharacterState
    state_changed: bool
    vp_awarded: bool


@dataclass(frozen=True, slots=True)
class CombatResult:
    attack: AttackResult
    defense: DefenseResult | None
    target_wounds_after: int
    target_state_after: CharacterState
    target_downed: bool


@dataclass(frozen=True, slots=True)
class SkillCheckResult:
    success: bool
    roll: DiceRollResult
    target_number: int

    @property
    def margin(self) -> int:
        return self.roll.total - self.target_number


@dataclass(frozen=True, slots=True)
class OpposedRollResult:
    winner_id: str
    attacker_margin: int
    defender_margin: int
