"""
Status snapshots - the read-only view of a combatant the engine works from.

A StatusAggregator turns a combatant handle into a StatusSnapshot once per
computation. The snapshot is an immutable value: the engine never holds on
to it past the call and never mutates combatant state.

Combatants with no status information resolve to the neutral snapshot
(no Strength, no modification, multipliers 1.0, no named effects).
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Hashable, Iterable, Mapping, Optional, Protocol, Sequence

from ..config import CombatConfig
from ..content.statuses import BREAK, CURSE, STRENGTH, WEAK, StatusEffect

__all__ = [
    "StatusSnapshot",
    "StatusAggregator",
    "MissingStatusError",
    "EffectTableAggregator",
    "snapshot_from_effects",
]


class MissingStatusError(LookupError):
    """Raised by an aggregator when a combatant has no status information."""


@dataclass(frozen=True)
class StatusSnapshot:
    """
    Status-derived quantities for one combatant at one instant.

    Attributes:
        strength_stacks: Flat offensive bonus (>= 0)
        damage_modification: Signed flat adjustment (Curse-type effects are negative)
        damage_dealt_multiplier: Scales outgoing damage (Weak)
        damage_taken_multiplier: Scales incoming damage (Break)
        effects: Named effect potencies (Armor, CriticalUp, ...)
    """

    strength_stacks: int = 0
    damage_modification: int = 0
    damage_dealt_multiplier: float = 1.0
    damage_taken_multiplier: float = 1.0
    effects: Mapping[str, int] = field(default_factory=dict)

    def __post_init__(self):
        if self.strength_stacks < 0:
            raise ValueError(f"strength_stacks cannot be negative, got {self.strength_stacks}")
        for name in ("damage_dealt_multiplier", "damage_taken_multiplier"):
            if not math.isfinite(getattr(self, name)):
                raise ValueError(f"{name} must be finite, got {getattr(self, name)}")
        # Copy so later changes to the caller's dict never leak in
        object.__setattr__(self, "effects", MappingProxyType(dict(self.effects)))

    @classmethod
    def neutral(cls) -> StatusSnapshot:
        return cls()

    @property
    def is_neutral(self) -> bool:
        return (
            self.strength_stacks == 0
            and self.damage_modification == 0
            and self.damage_dealt_multiplier == 1.0
            and self.damage_taken_multiplier == 1.0
            and not self.effects
        )

    def has_effect(self, name: str) -> bool:
        return name in self.effects

    def effect_potency(self, name: str) -> int:
        """Potency of a named effect, 0 when absent."""
        return self.effects.get(name, 0)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "strength_stacks": self.strength_stacks,
            "damage_modification": self.damage_modification,
            "damage_dealt_multiplier": self.damage_dealt_multiplier,
            "damage_taken_multiplier": self.damage_taken_multiplier,
            "effects": dict(self.effects),
        }


class StatusAggregator(Protocol):
    """
    Resolves a combatant into a snapshot.

    Must be side-effect free and safe to call any number of times.
    Returns None (or raises MissingStatusError) when the combatant has no
    status information.
    """

    def snapshot(self, combatant: Any) -> Optional[StatusSnapshot]:
        ...


# =============================================================================
# Named-effect adapter
# =============================================================================


def snapshot_from_effects(
    effects: Iterable[StatusEffect],
    config: Optional[CombatConfig] = None,
) -> StatusSnapshot:
    """
    Derive a snapshot from a list of named status effects.

    - Strength potency adds to strength_stacks (total floored at 0)
    - Curse potency subtracts from damage_modification
    - Weak present: damage_dealt_multiplier *= weak_status_modifier
    - Break present: damage_taken_multiplier *= break_status_modifier

    Weak and Break apply once however many entries exist. Every effect is
    also recorded by name, duplicate names summing their potency.
    """
    config = config or CombatConfig()

    potencies: Dict[str, int] = {}
    for effect in effects:
        potencies[effect.name] = potencies.get(effect.name, 0) + effect.potency

    dealt = config.weak_status_modifier if WEAK in potencies else 1.0
    taken = config.break_status_modifier if BREAK in potencies else 1.0

    return StatusSnapshot(
        strength_stacks=max(0, potencies.get(STRENGTH, 0)),
        damage_modification=-potencies.get(CURSE, 0),
        damage_dealt_multiplier=dealt,
        damage_taken_multiplier=taken,
        effects=potencies,
    )


class EffectTableAggregator:
    """
    StatusAggregator over a caller-owned table of active effects.

    The table maps combatant handles to their effect lists. It is only ever
    read; combatants missing from the table have no status data.

    Usage:
        table = {"player": [StatusEffect("Strength", 3)], "slime": []}
        aggregator = EffectTableAggregator(table, config)
        aggregator.snapshot("player").strength_stacks  # 3
    """

    def __init__(
        self,
        table: Mapping[Hashable, Sequence[StatusEffect]],
        config: Optional[CombatConfig] = None,
    ):
        self.table = table
        self.config = config or CombatConfig()

    def snapshot(self, combatant: Hashable) -> Optional[StatusSnapshot]:
        effects = self.table.get(combatant)
        if effects is None:
            return None
        return snapshot_from_effects(effects, self.config)
