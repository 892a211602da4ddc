"""
Shared pytest fixtures for the damage engine test suite.

This module provides reusable fixtures for:
- Combat configs (crits on / off)
- Random sources with known seeds or fixed draws
- Status snapshots and a dict-backed aggregator
"""

import os
import sys

import pytest

# Ensure project root is in path
_project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, _project_root)

from packages.damage.config import CombatConfig
from packages.damage.engine import DamageResolutionEngine
from packages.damage.state.rng import FixedSequence, Random
from packages.damage.state.status import StatusSnapshot


class SnapshotTable:
    """StatusAggregator returning prepared snapshots; unknown combatants have none."""

    def __init__(self, snapshots=None):
        self.snapshots = dict(snapshots or {})
        self.calls = []

    def snapshot(self, combatant):
        self.calls.append(combatant)
        return self.snapshots.get(combatant)


# =============================================================================
# Config Fixtures
# =============================================================================


@pytest.fixture
def no_crit_config():
    """Crits disabled - pipeline output is fully deterministic."""
    return CombatConfig(critical_hits_enabled=False)


@pytest.fixture
def crit_config():
    """Crits enabled with 10% base chance and a 2x modifier."""
    return CombatConfig(critical_hits_enabled=True, base_critical_chance=0.10, critical_hit_modifier=2.0)


# =============================================================================
# RNG Fixtures
# =============================================================================


@pytest.fixture
def rng_seed_42():
    """RNG initialized with seed 42 for deterministic tests."""
    return Random(42)


@pytest.fixture
def always_crit_draw():
    """Every draw is 0.0 - below any positive crit chance."""
    return FixedSequence([0.0])


@pytest.fixture
def never_crit_draw():
    """Every draw is just under 1.0 - above any crit chance below 1."""
    return FixedSequence([0.999])


# =============================================================================
# Snapshot Fixtures
# =============================================================================


@pytest.fixture
def neutral():
    return StatusSnapshot.neutral()


@pytest.fixture
def strong_source():
    """Source with +5 Strength."""
    return StatusSnapshot(strength_stacks=5)


@pytest.fixture
def armored_target():
    """Target with Armor 4."""
    return StatusSnapshot(effects={"Armor": 4})


@pytest.fixture
def make_engine():
    """Factory: engine over a dict of prepared snapshots."""

    def _make(snapshots, config=None, rng=None):
        table = SnapshotTable(snapshots)
        engine = DamageResolutionEngine(
            table,
            config=config if config is not None else CombatConfig(critical_hits_enabled=False),
            rng=rng if rng is not None else FixedSequence([0.999]),
        )
        return engine

    return _make
