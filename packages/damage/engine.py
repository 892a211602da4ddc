"""
Damage Resolution Engine - public entry points for card damage.

Two entry points, both total functions (never raise for well-typed input):
- compute_from_card(source, target, card): sums the card's Damage effects
- compute_from_amount(source, target, base_damage): pre-computed base

Anomalies degrade to 0 plus a diagnostic instead of an exception:
- INVALID_PARTICIPANTS: source or target is None
- NO_DAMAGE_EFFECTS: the card contributes no positive Damage amount
- MISSING_STATUS_DATA: a combatant has no status info (neutral defaults used)

The resolve_* variants return a DamageResult carrying those diagnostics and
the full stage breakdown; compute_* return the integer only.

Usage:
    engine = DamageResolutionEngine(aggregator, config=CombatConfig(), rng=Random(42))
    damage = engine.compute_from_card(player, enemy, strike)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from .calc.pipeline import DamageBreakdown, ModifierPipeline
from .config import CombatConfig, ConfigSource, resolve_config
from .content.cards import CardDefinition
from .state.rng import RandomSource, default_random_source
from .state.status import MissingStatusError, StatusAggregator, StatusSnapshot

__all__ = [
    "DamageDiagnostic",
    "DamageResult",
    "DamageResolutionEngine",
]

logger = logging.getLogger(__name__)


class DamageDiagnostic(Enum):
    """Non-fatal conditions reported alongside a damage value."""
    INVALID_PARTICIPANTS = "InvalidParticipants"
    NO_DAMAGE_EFFECTS = "NoDamageEffects"
    MISSING_STATUS_DATA = "MissingStatusData"


@dataclass(frozen=True)
class DamageResult:
    """
    Final damage plus how it was reached.

    breakdown is None whenever the pipeline did not run (invalid input,
    no damage effects, non-positive base).
    """
    amount: int
    diagnostics: Tuple[DamageDiagnostic, ...] = ()
    breakdown: Optional[DamageBreakdown] = None

    @property
    def ok(self) -> bool:
        """True when nothing forced or defaulted the result."""
        return not self.diagnostics

    def has(self, diagnostic: DamageDiagnostic) -> bool:
        return diagnostic in self.diagnostics

    def to_dict(self) -> Dict[str, Any]:
        return {
            "amount": self.amount,
            "diagnostics": [d.value for d in self.diagnostics],
            "breakdown": self.breakdown.to_dict() if self.breakdown else None,
        }


@dataclass
class _Snapshots:
    source: StatusSnapshot
    target: StatusSnapshot
    diagnostics: Tuple[DamageDiagnostic, ...] = field(default_factory=tuple)


class DamageResolutionEngine:
    """
    Computes final damage from a source, a target and base damage.

    Holds no per-call state: the config is read once at the start of each
    computation, each combatant is snapshotted once, and the only side
    effect is one crit draw (only when crits are enabled).
    """

    def __init__(
        self,
        aggregator: StatusAggregator,
        config: Optional[ConfigSource] = None,
        rng: Optional[RandomSource] = None,
        pipeline: Optional[ModifierPipeline] = None,
    ):
        """
        Args:
            aggregator: Resolves combatants to status snapshots
            config: CombatConfig, or a LiveCombatConfig for live tuning
            rng: Shared random source; defaults to an OS-seeded locked source
            pipeline: Stage runner (default ModifierPipeline())
        """
        self.aggregator = aggregator
        self.config = config if config is not None else CombatConfig()
        self.rng = rng if rng is not None else default_random_source()
        self.pipeline = pipeline or ModifierPipeline()

    # -------------------------------------------------------------------------
    # Integer entry points
    # -------------------------------------------------------------------------

    def compute_from_card(
        self,
        source: Any,
        target: Any,
        card: Optional[CardDefinition],
        rng: Optional[RandomSource] = None,
    ) -> int:
        return self.resolve_from_card(source, target, card, rng=rng).amount

    def compute_from_amount(
        self,
        source: Any,
        target: Any,
        base_damage: int,
        rng: Optional[RandomSource] = None,
    ) -> int:
        return self.resolve_from_amount(source, target, base_damage, rng=rng).amount

    # -------------------------------------------------------------------------
    # Detailed entry points
    # -------------------------------------------------------------------------

    def resolve_from_card(
        self,
        source: Any,
        target: Any,
        card: Optional[CardDefinition],
        rng: Optional[RandomSource] = None,
    ) -> DamageResult:
        """
        Resolve damage for a card's Damage effects.

        Args:
            source: Entity playing the card
            target: Entity being targeted
            card: Card being played (may be None)
            rng: Per-call random source override

        Returns:
            DamageResult; amount 0 with NO_DAMAGE_EFFECTS when the card has no
            positive Damage total
        """
        base_damage = card.damage_total() if card is not None else 0

        if base_damage <= 0:
            card_name = card.name if card is not None else "<none>"
            logger.warning(f"Card {card_name} has no damage effects")
            return DamageResult(amount=0, diagnostics=(DamageDiagnostic.NO_DAMAGE_EFFECTS,))

        return self.resolve_from_amount(source, target, base_damage, rng=rng)

    def resolve_from_amount(
        self,
        source: Any,
        target: Any,
        base_damage: int,
        rng: Optional[RandomSource] = None,
    ) -> DamageResult:
        """
        Resolve damage for a pre-computed base amount.

        Use this for individual effects that were already processed
        (scaled, conditional, etc.).

        Args:
            source: Entity dealing damage
            target: Entity being targeted
            base_damage: Base amount; <= 0 returns 0 with no modifiers
            rng: Per-call random source override

        Returns:
            DamageResult with the final non-negative amount
        """
        if source is None or target is None:
            logger.error("Cannot calculate damage with null source or target")
            return DamageResult(amount=0, diagnostics=(DamageDiagnostic.INVALID_PARTICIPANTS,))

        if base_damage <= 0:
            return DamageResult(amount=0)

        config = resolve_config(self.config)
        snapshots = self._snapshot(source, target)

        breakdown = self.pipeline.run(
            base_damage,
            snapshots.source,
            snapshots.target,
            config,
            rng if rng is not None else self.rng,
        )
        return DamageResult(
            amount=breakdown.final,
            diagnostics=snapshots.diagnostics,
            breakdown=breakdown,
        )

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _snapshot(self, source: Any, target: Any) -> _Snapshots:
        source_snapshot = self._snapshot_one(source)
        target_snapshot = self._snapshot_one(target)

        diagnostics = ()
        if source_snapshot is None or target_snapshot is None:
            diagnostics = (DamageDiagnostic.MISSING_STATUS_DATA,)

        return _Snapshots(
            source=source_snapshot if source_snapshot is not None else StatusSnapshot.neutral(),
            target=target_snapshot if target_snapshot is not None else StatusSnapshot.neutral(),
            diagnostics=diagnostics,
        )

    def _snapshot_one(self, combatant: Any) -> Optional[StatusSnapshot]:
        try:
            snapshot = self.aggregator.snapshot(combatant)
        except MissingStatusError as e:
            logger.info(f"No status data for {combatant!r} ({e}); using neutral defaults")
            return None
        if snapshot is None:
            logger.info(f"No status data for {combatant!r}; using neutral defaults")
        return snapshot
