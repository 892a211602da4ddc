"""
Critical hit resolution.

crit chance = base_critical_chance + CriticalUp potency / 100

The chance is not clamped: values above 1.0 always crit and
values of 0 never do. The roll is one draw from the injected RandomSource;
deciding whether a draw crits is a pure function.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..config import CombatConfig
from ..content.statuses import CRITICAL_UP
from ..state.rng import RandomSource
from ..state.status import StatusSnapshot

__all__ = [
    "CritOutcome",
    "CriticalHitResolver",
    "critical_chance",
    "is_critical",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CritOutcome:
    """
    Result of the crit stage.

    chance and draw are None when crits are disabled (no draw is taken).
    """
    amount: float
    chance: Optional[float] = None
    draw: Optional[float] = None
    critical: bool = False

    @property
    def rolled(self) -> bool:
        return self.draw is not None


def critical_chance(source: StatusSnapshot, config: CombatConfig) -> float:
    """Crit chance for a source; CriticalUp potency is in percentage points."""
    chance = config.base_critical_chance
    if source.has_effect(CRITICAL_UP):
        chance += source.effect_potency(CRITICAL_UP) / 100.0
    return chance


def is_critical(chance: float, draw: float) -> bool:
    return draw < chance


class CriticalHitResolver:
    """Applies the critical hit stage to a working damage value."""

    def resolve(
        self,
        amount: float,
        source: StatusSnapshot,
        config: CombatConfig,
        rng: RandomSource,
    ) -> CritOutcome:
        """
        Roll for a critical hit.

        Args:
            amount: Working damage after the armor stage
            source: Attacker snapshot (CriticalUp)
            config: Config read at the start of this computation
            rng: Source for the single draw

        Returns:
            CritOutcome with the (possibly multiplied) amount
        """
        if not config.critical_hits_enabled:
            return CritOutcome(amount=amount)

        chance = critical_chance(source, config)
        draw = rng.next_uniform()

        if is_critical(chance, draw):
            crit_amount = amount * config.critical_hit_modifier
            logger.debug(f"Critical hit! Damage increased from {amount} to {crit_amount}")
            return CritOutcome(amount=crit_amount, chance=chance, draw=draw, critical=True)

        return CritOutcome(amount=amount, chance=chance, draw=draw)
