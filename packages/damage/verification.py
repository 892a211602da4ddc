"""
Combat math verification - named damage scenarios with known answers.

Each scenario sets up source and target effects, runs a base amount through
a fresh engine and compares against the expected final damage. Used to
catch balance regressions when stages or tuning values change.

The catalogue assumes crits disabled, Weak at 0.75x and Break at 1.5x
(SCENARIO_CONFIG), and half-away-from-zero rounding.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .config import CombatConfig
from .content.statuses import ARMOR, BREAK, CURSE, STRENGTH, WEAK, StatusEffect
from .engine import DamageResolutionEngine
from .state.rng import FixedSequence
from .state.status import EffectTableAggregator

__all__ = [
    "DamageScenario",
    "ScenarioResult",
    "ScenarioSummary",
    "SCENARIO_CONFIG",
    "INDIVIDUAL_EFFECTS",
    "COMMON_COMBINATIONS",
    "EDGE_CASES",
    "COMPLEX_COMBINATIONS",
    "BOUNDARY_CONDITIONS",
    "ROUNDING_BEHAVIOR",
    "EFFECT_STACKING",
    "STANDARD_SCENARIOS",
    "EXTENDED_SCENARIOS",
    "run_scenario",
    "run_scenarios",
    "summarize",
]

logger = logging.getLogger(__name__)

SCENARIO_CONFIG = CombatConfig(critical_hits_enabled=False, break_status_modifier=1.5)

_SOURCE = "source"
_TARGET = "target"


# =============================================================================
# Scenario Types
# =============================================================================


@dataclass(frozen=True)
class DamageScenario:
    """A damage setup and the damage it must produce."""

    name: str
    base_damage: int
    expected_damage: int
    source_effects: Tuple[StatusEffect, ...] = ()
    target_effects: Tuple[StatusEffect, ...] = ()


@dataclass
class ScenarioResult:
    """Outcome of one scenario run."""

    test_name: str
    base_damage: int
    expected_damage: int
    actual_damage: int
    passed: bool
    source_effects: str = ""
    target_effects: str = ""
    failure_reason: str = ""
    timestamp: float = 0.0

    def __post_init__(self):
        if self.timestamp == 0.0:
            self.timestamp = time.time()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "test_name": self.test_name,
            "base_damage": self.base_damage,
            "expected_damage": self.expected_damage,
            "actual_damage": self.actual_damage,
            "passed": self.passed,
            "source_effects": self.source_effects,
            "target_effects": self.target_effects,
            "failure_reason": self.failure_reason,
            "timestamp": self.timestamp,
        }


@dataclass
class ScenarioSummary:
    total: int
    passed: int
    failures: List[ScenarioResult] = field(default_factory=list)

    @property
    def failed(self) -> int:
        return self.total - self.passed

    @property
    def all_passed(self) -> bool:
        return self.failed == 0


def _s(name: str, base: int, expected: int, source=(), target=()) -> DamageScenario:
    return DamageScenario(
        name=name,
        base_damage=base,
        expected_damage=expected,
        source_effects=tuple(StatusEffect(n, p) for n, p in source),
        target_effects=tuple(StatusEffect(n, p) for n, p in target),
    )


# =============================================================================
# Scenario Catalogue
# =============================================================================

INDIVIDUAL_EFFECTS: Tuple[DamageScenario, ...] = (
    _s("Weak Source", 10, 8, source=[(WEAK, 1)]),  # 7.5 -> 8
    _s("Break Target", 10, 15, target=[(BREAK, 1)]),
    _s("Strength +5", 10, 15, source=[(STRENGTH, 5)]),
    _s("Curse -3", 10, 7, source=[(CURSE, 3)]),
    _s("Armor 4", 10, 6, target=[(ARMOR, 4)]),
)

COMMON_COMBINATIONS: Tuple[DamageScenario, ...] = (
    _s("Weak + Break", 10, 11, source=[(WEAK, 1)], target=[(BREAK, 1)]),  # 11.25
    _s("Strength + Break", 10, 23, source=[(STRENGTH, 5)], target=[(BREAK, 1)]),  # 22.5
    _s("Curse + Weak", 10, 5, source=[(CURSE, 3), (WEAK, 1)]),  # 5.25
    _s("Armor + Break", 10, 11, target=[(ARMOR, 4), (BREAK, 1)]),
)

EDGE_CASES: Tuple[DamageScenario, ...] = (
    _s("Zero Damage", 0, 0),
    _s("High Armor vs Low Damage", 5, 1, target=[(ARMOR, 10)]),
    _s("High Strength Stacks", 5, 20, source=[(STRENGTH, 15)]),
    _s("Extreme Curse (5 damage - 10 curse = 0)", 5, 0, source=[(CURSE, 10)]),
)

COMPLEX_COMBINATIONS: Tuple[DamageScenario, ...] = (
    # (20 - 4 + 8) * 0.75 = 18
    _s("Strength + Curse + Weak", 20, 18, source=[(STRENGTH, 8), (CURSE, 4), (WEAK, 1)]),
    # (20 + 6) * 0.75 * 1.5 - 3 = 26.25
    _s(
        "All Effects Combined", 20, 26,
        source=[(STRENGTH, 6), (WEAK, 1)],
        target=[(ARMOR, 3), (BREAK, 1)],
    ),
    _s("Massive Strength vs Massive Armor", 10, 20, source=[(STRENGTH, 50)], target=[(ARMOR, 40)]),
)

BOUNDARY_CONDITIONS: Tuple[DamageScenario, ...] = (
    _s("Damage Equals Armor", 8, 1, target=[(ARMOR, 8)]),
    _s("Curse Equals Damage", 12, 0, source=[(CURSE, 12)]),
    # (1 + 100) * 1.5 = 151.5
    _s("Maximum Damage Boost", 1, 152, source=[(STRENGTH, 100)], target=[(BREAK, 1)]),
    _s("Minimum Damage (All Debuffs)", 1, 0, source=[(CURSE, 100), (WEAK, 1)]),
)

ROUNDING_BEHAVIOR: Tuple[DamageScenario, ...] = (
    _s("Rounding: 15.75 -> 16", 21, 16, source=[(WEAK, 1)]),
    _s("Rounding: 14.25 -> 14", 19, 14, source=[(WEAK, 1)]),
    _s("Rounding: 22.5 -> 23", 15, 23, target=[(BREAK, 1)]),
    _s("Rounding: 25.5 -> 26", 17, 26, target=[(BREAK, 1)]),
)

EFFECT_STACKING: Tuple[DamageScenario, ...] = (
    _s("Strength +1", 10, 11, source=[(STRENGTH, 1)]),
    _s("Strength +25", 10, 35, source=[(STRENGTH, 25)]),
    _s("Curse -1", 10, 9, source=[(CURSE, 1)]),
    _s("Curse -9", 10, 1, source=[(CURSE, 9)]),
    _s("Armor 1", 10, 9, target=[(ARMOR, 1)]),
    _s("Armor 9", 10, 1, target=[(ARMOR, 9)]),
)

STANDARD_SCENARIOS: Tuple[DamageScenario, ...] = (
    INDIVIDUAL_EFFECTS + COMMON_COMBINATIONS + EDGE_CASES
)

EXTENDED_SCENARIOS: Tuple[DamageScenario, ...] = (
    STANDARD_SCENARIOS
    + COMPLEX_COMBINATIONS
    + BOUNDARY_CONDITIONS
    + ROUNDING_BEHAVIOR
    + EFFECT_STACKING
)


# =============================================================================
# Runner
# =============================================================================


def _describe(effects: Iterable[StatusEffect]) -> str:
    return ", ".join(e.describe() for e in effects)


def run_scenario(scenario: DamageScenario, config: Optional[CombatConfig] = None) -> ScenarioResult:
    """
    Run one scenario through a fresh engine.

    The engine gets a fixed draw of 0.99 so a config with crits enabled
    still behaves predictably at ordinary crit chances.
    """
    config = config or SCENARIO_CONFIG
    table = {
        _SOURCE: list(scenario.source_effects),
        _TARGET: list(scenario.target_effects),
    }
    engine = DamageResolutionEngine(
        EffectTableAggregator(table, config),
        config=config,
        rng=FixedSequence([0.99]),
    )
    actual = engine.compute_from_amount(_SOURCE, _TARGET, scenario.base_damage)
    passed = actual == scenario.expected_damage

    result = ScenarioResult(
        test_name=scenario.name,
        base_damage=scenario.base_damage,
        expected_damage=scenario.expected_damage,
        actual_damage=actual,
        passed=passed,
        source_effects=_describe(scenario.source_effects),
        target_effects=_describe(scenario.target_effects),
        failure_reason="" if passed else f"Expected {scenario.expected_damage}, got {actual}",
    )

    status = "PASS" if passed else "FAIL"
    logger.debug(
        f"[COMBAT MATH] {scenario.name}: {status} - Base:{scenario.base_damage}, "
        f"Expected:{scenario.expected_damage}, Actual:{actual}"
    )
    return result


def run_scenarios(
    scenarios: Iterable[DamageScenario] = STANDARD_SCENARIOS,
    config: Optional[CombatConfig] = None,
) -> List[ScenarioResult]:
    return [run_scenario(s, config) for s in scenarios]


def summarize(results: List[ScenarioResult]) -> ScenarioSummary:
    """Count passes and log a summary with every failure."""
    passed = sum(1 for r in results if r.passed)
    summary = ScenarioSummary(
        total=len(results),
        passed=passed,
        failures=[r for r in results if not r.passed],
    )

    logger.info(f"[COMBAT MATH SUMMARY] {summary.passed}/{summary.total} tests passed, {summary.failed} failed")
    for failure in summary.failures:
        logger.warning(f"  - {failure.test_name}: {failure.failure_reason}")

    return summary
