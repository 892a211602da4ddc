"""
Calculation stages for damage resolution.

Contains:
- Modifier pipeline (ordered stages, one rounding point)
- Critical hit resolver (chance + single draw)
"""

from .critical import CritOutcome, CriticalHitResolver, critical_chance, is_critical
from .pipeline import (
    ARMOR_MIN_DAMAGE,
    DAMAGE_CEILING,
    DamageBreakdown,
    ModifierPipeline,
    apply_armor,
    apply_dealt_multiplier,
    apply_flat_adjustment,
    apply_taken_multiplier,
    clamp_non_negative,
    round_half_away_from_zero,
    saturate,
)

__all__ = [
    # Pipeline
    "ModifierPipeline",
    "DamageBreakdown",
    "apply_flat_adjustment",
    "clamp_non_negative",
    "apply_dealt_multiplier",
    "apply_taken_multiplier",
    "apply_armor",
    "round_half_away_from_zero",
    "ARMOR_MIN_DAMAGE",
    "DAMAGE_CEILING",
    "saturate",
    # Critical hits
    "CriticalHitResolver",
    "CritOutcome",
    "critical_chance",
    "is_critical",
]
