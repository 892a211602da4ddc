"""
Status effect names the damage engine understands.

Effect names are plain strings so any effect system can feed snapshots.
Only the names below change damage; every other effect is carried in a
snapshot untouched and can still be queried by name.
"""

from __future__ import annotations

from dataclasses import dataclass

__all__ = [
    "ARMOR",
    "CRITICAL_UP",
    "STRENGTH",
    "CURSE",
    "WEAK",
    "BREAK",
    "StatusEffect",
]


# Target: subtracts potency from incoming damage, never below 1
ARMOR = "Armor"
# Source: +potency percentage points of crit chance
CRITICAL_UP = "CriticalUp"
# Source: +potency flat outgoing damage
STRENGTH = "Strength"
# Source: -potency flat outgoing damage
CURSE = "Curse"
# Source: outgoing damage scaled by the configured weak modifier
WEAK = "Weak"
# Target: incoming damage scaled by the configured break modifier
BREAK = "Break"


@dataclass(frozen=True)
class StatusEffect:
    """
    One active status effect on a combatant.

    Attributes:
        name: Effect name (e.g., "Armor", "Weak")
        potency: Stack amount / strength of the effect
        duration: Remaining turns; informational only for damage
    """
    name: str
    potency: int = 1
    duration: int = 1

    def describe(self) -> str:
        return f"{self.name}({self.potency})"

