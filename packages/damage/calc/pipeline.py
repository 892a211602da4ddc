"""
Modifier Pipeline - the ordered stages that turn base damage into final damage.

Design principles:
1. Pure stages - no side effects, no state (the crit draw is the only exception)
2. Working value stays a float until the very end
3. Exactly one rounding point

Stage order (load-bearing, do not reorder):
1. Flat source adjustment: base + damage_modification + strength
2. Clamp at 0 (Curse can never invert later multipliers)
3. Source multiplier (Weak) - scales Strength too
4. Target multiplier (Break)
5. Armor: max(1, damage - armor), only if the target has Armor
6. Critical hit
7. Round half away from zero
"""

from __future__ import annotations

import logging
import math
import sys
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from ..config import CombatConfig
from ..content.statuses import ARMOR
from ..state.rng import RandomSource
from .critical import CriticalHitResolver

__all__ = [
    "DamageBreakdown",
    "ModifierPipeline",
    "apply_flat_adjustment",
    "clamp_non_negative",
    "apply_dealt_multiplier",
    "apply_taken_multiplier",
    "apply_armor",
    "round_half_away_from_zero",
    "saturate",
    "ARMOR_MIN_DAMAGE",
    "DAMAGE_CEILING",
]

logger = logging.getLogger(__name__)

# Armored targets still take this much from a landed hit
ARMOR_MIN_DAMAGE = 1.0

# Float overflow in the multiplier stages saturates here
DAMAGE_CEILING = float(sys.maxsize)


@dataclass(frozen=True)
class DamageBreakdown:
    """
    Every intermediate value of one pipeline run.

    crit_chance / crit_draw are None when crits were disabled.
    """
    base: int
    flat_adjusted: float
    clamped: float
    after_dealt: float
    after_taken: float
    after_armor: float
    crit_chance: Optional[float]
    crit_draw: Optional[float]
    critical: bool
    pre_round: float
    final: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# =============================================================================
# STAGES
# =============================================================================

def apply_flat_adjustment(base: float, damage_modification: int, strength_stacks: int) -> float:
    """Stage 1: add Curse-type modification and Strength in one step."""
    return float(base) + damage_modification + strength_stacks


def clamp_non_negative(damage: float) -> float:
    """Stage 2: floor at 0."""
    return max(damage, 0.0)


def apply_dealt_multiplier(damage: float, multiplier: float) -> float:
    """Stage 3: outgoing multiplier."""
    return damage * multiplier


def apply_taken_multiplier(damage: float, multiplier: float) -> float:
    """Stage 4: incoming multiplier."""
    return damage * multiplier


def apply_armor(damage: float, armor: int) -> float:
    """Stage 5: subtract armor, never below 1."""
    return max(ARMOR_MIN_DAMAGE, damage - armor)


def round_half_away_from_zero(value: float) -> int:
    """
    Round to the nearest integer, ties away from zero.

    Python's round() uses banker's rounding (22.5 -> 22); damage uses
    22.5 -> 23.
    """
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def saturate(damage: float) -> float:
    """Map overflowed values into the range rounding can handle (NaN -> 0)."""
    if math.isnan(damage):
        return 0.0
    return min(damage, DAMAGE_CEILING)


# =============================================================================
# PIPELINE
# =============================================================================

class ModifierPipeline:
    """
    Runs stages 1-7 for one (source, target, base) triple.

    Stateless; a single instance can be shared across threads.
    """

    def __init__(self, crit_resolver: Optional[CriticalHitResolver] = None):
        self.crit_resolver = crit_resolver or CriticalHitResolver()

    def run(
        self,
        base_damage: int,
        source,
        target,
        config: CombatConfig,
        rng: RandomSource,
    ) -> DamageBreakdown:
        """
        Calculate final damage from positive base damage.

        Args:
            base_damage: Positive base amount
            source: Attacker StatusSnapshot
            target: Defender StatusSnapshot
            config: Config read at the start of this computation
            rng: Random source for the crit draw

        Returns:
            DamageBreakdown with every stage value and the final integer
        """
        # 1. Flat adjustment (Curse + Strength)
        flat = apply_flat_adjustment(base_damage, source.damage_modification, source.strength_stacks)

        # 2. Clamp
        clamped = clamp_non_negative(flat)
        if clamped != flat:
            logger.debug(f"Damage clamped from {flat} to 0 (curse effects too strong)")

        # 3. Source multiplier - after the clamp
        dealt = apply_dealt_multiplier(clamped, source.damage_dealt_multiplier)

        # 4. Target multiplier
        taken = apply_taken_multiplier(dealt, target.damage_taken_multiplier)

        # 5. Armor
        armored = taken
        if target.has_effect(ARMOR):
            armored = apply_armor(taken, target.effect_potency(ARMOR))

        # 6. Critical hit
        crit = self.crit_resolver.resolve(armored, source, config, rng)

        # 7. Round once, minimum 0
        final = max(0, round_half_away_from_zero(saturate(crit.amount)))

        logger.debug(
            f"Pipeline: base={base_damage} flat={flat} clamped={clamped} dealt={dealt} "
            f"taken={taken} armor={armored} crit={crit.critical} final={final}"
        )

        return DamageBreakdown(
            base=base_damage,
            flat_adjusted=flat,
            clamped=clamped,
            after_dealt=dealt,
            after_taken=taken,
            after_armor=armored,
            crit_chance=crit.chance,
            crit_draw=crit.draw,
            critical=crit.critical,
            pre_round=crit.amount,
            final=final,
        )
