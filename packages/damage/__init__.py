"""
Card Damage Engine

Resolves the final damage of a card hit from a source combatant, a target
combatant and a base amount, applying status modifiers in a fixed order and
an optional critical hit.

Core subsystems:
- state: status snapshots, StatusAggregator contract, random sources
- content: card effects, status effect names
- calc: modifier pipeline, critical hit resolver
- engine: public entry points and diagnostics
- verification: named combat-math scenarios

Usage:
    from packages.damage import (
        DamageResolutionEngine, EffectTableAggregator, StatusEffect,
        CardDefinition, CardEffectType, CombatConfig, Random,
    )

    config = CombatConfig()
    table = {"player": [StatusEffect("Strength", 3)], "slime": [StatusEffect("Armor", 2)]}
    engine = DamageResolutionEngine(EffectTableAggregator(table, config), config, rng=Random(42))

    strike = CardDefinition.build("Strike", [(CardEffectType.DAMAGE, 6)])
    damage = engine.compute_from_card("player", "slime", strike)
"""

__version__ = "0.1.0"

# Configuration
from .config import CombatConfig, ConfigError, LiveCombatConfig

# Content
from .content.cards import CardDefinition, CardEffect, CardEffectType
from .content.statuses import ARMOR, BREAK, CRITICAL_UP, CURSE, STRENGTH, WEAK, StatusEffect

# State
from .state.rng import FixedSequence, LockedRandom, Random, RandomSource, seed_to_long
from .state.status import (
    EffectTableAggregator,
    MissingStatusError,
    StatusAggregator,
    StatusSnapshot,
    snapshot_from_effects,
)

# Calculation
from .calc.critical import CriticalHitResolver
from .calc.pipeline import DamageBreakdown, ModifierPipeline, round_half_away_from_zero

# Engine
from .engine import DamageDiagnostic, DamageResolutionEngine, DamageResult

__all__ = [
    "__version__",
    # Config
    "CombatConfig",
    "LiveCombatConfig",
    "ConfigError",
    # Content
    "CardDefinition",
    "CardEffect",
    "CardEffectType",
    "StatusEffect",
    "ARMOR",
    "BREAK",
    "CRITICAL_UP",
    "CURSE",
    "STRENGTH",
    "WEAK",
    # State
    "RandomSource",
    "Random",
    "LockedRandom",
    "FixedSequence",
    "seed_to_long",
    "StatusSnapshot",
    "StatusAggregator",
    "MissingStatusError",
    "EffectTableAggregator",
    "snapshot_from_effects",
    # Calc
    "ModifierPipeline",
    "DamageBreakdown",
    "CriticalHitResolver",
    "round_half_away_from_zero",
    # Engine
    "DamageResolutionEngine",
    "DamageResult",
    "DamageDiagnostic",
]
