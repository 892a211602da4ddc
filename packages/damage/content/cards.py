"""
Card effect data as seen by the damage engine.

Cards carry an ordered list of effects. The engine only reads the
Damage-typed amounts; every other effect kind is ignored here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Tuple

__all__ = [
    "CardEffectType",
    "CardEffect",
    "CardDefinition",
    "parse_effect_type",
]


class CardEffectType(Enum):
    """Mechanical effect kinds a card can declare."""
    # Core
    DAMAGE = "Damage"
    HEAL = "Heal"
    DRAW_CARD = "DrawCard"
    RESTORE_ENERGY = "RestoreEnergy"
    BUFF_STATS = "BuffStats"
    DEBUFF_STATS = "DebuffStats"

    # Status
    APPLY_BREAK = "ApplyBreak"
    APPLY_WEAK = "ApplyWeak"
    APPLY_DAMAGE_OVER_TIME = "ApplyDamageOverTime"
    APPLY_HEAL_OVER_TIME = "ApplyHealOverTime"
    RAISE_CRITICAL_CHANCE = "RaiseCriticalChance"
    APPLY_THORNS = "ApplyThorns"
    APPLY_SHIELD = "ApplyShield"
    APPLY_ELEMENTAL_STATUS = "ApplyElementalStatus"
    APPLY_STUN = "ApplyStun"
    APPLY_LIMIT_BREAK = "ApplyLimitBreak"
    APPLY_STRENGTH = "ApplyStrength"

    # Card manipulation
    DISCARD_RANDOM_CARDS = "DiscardRandomCards"

    # Stance
    ENTER_STANCE = "EnterStance"
    EXIT_STANCE = "ExitStance"


@dataclass(frozen=True)
class CardEffect:
    effect_type: CardEffectType
    amount: int = 0


@dataclass(frozen=True)
class CardDefinition:
    """
    A playable card.

    Attributes:
        name: Display name
        effects: Ordered effects; order does not matter for damage
    """
    name: str
    effects: Tuple[CardEffect, ...] = field(default_factory=tuple)

    def __post_init__(self):
        # Accept any iterable of effects but store a tuple
        if not isinstance(self.effects, tuple):
            object.__setattr__(self, "effects", tuple(self.effects))

    def damage_total(self) -> int:
        """Sum of all Damage-typed amounts."""
        return sum(e.amount for e in self.effects if e.effect_type == CardEffectType.DAMAGE)

    @classmethod
    def build(cls, name: str, effects: Iterable[Tuple[CardEffectType, int]]) -> CardDefinition:
        """Shorthand: CardDefinition.build("Strike", [(CardEffectType.DAMAGE, 6)])."""
        return cls(name, tuple(CardEffect(t, a) for t, a in effects))


def parse_effect_type(text: str) -> CardEffectType:
    """
    Parse an effect type by enum name or value, case-insensitive.

    "DAMAGE", "damage" and "Damage" all give CardEffectType.DAMAGE.
    """
    key = text.strip()
    for effect_type in CardEffectType:
        if key.upper() == effect_type.name or key.lower() == effect_type.value.lower():
            return effect_type
    raise ValueError(f"Unknown card effect type: {text!r}")
