"""
Status Snapshot Tests

Snapshot immutability, named-effect queries and the named-effect adapter.
"""

import pytest

from packages.damage.config import CombatConfig
from packages.damage.content.statuses import StatusEffect
from packages.damage.state.status import (
    EffectTableAggregator,
    StatusSnapshot,
    snapshot_from_effects,
)


class TestStatusSnapshot:
    """StatusSnapshot value semantics."""

    def test_neutral_defaults(self):
        snap = StatusSnapshot.neutral()
        assert snap.strength_stacks == 0
        assert snap.damage_modification == 0
        assert snap.damage_dealt_multiplier == 1.0
        assert snap.damage_taken_multiplier == 1.0
        assert not snap.has_effect("Armor")
        assert snap.is_neutral

    def test_effect_queries(self):
        snap = StatusSnapshot(effects={"Armor": 4, "CriticalUp": 10})
        assert snap.has_effect("Armor")
        assert snap.effect_potency("Armor") == 4
        assert snap.effect_potency("CriticalUp") == 10

    def test_missing_effect_potency_is_zero(self):
        assert StatusSnapshot().effect_potency("Armor") == 0

    def test_frozen(self):
        snap = StatusSnapshot(strength_stacks=2)
        with pytest.raises(AttributeError):
            snap.strength_stacks = 5

    def test_effects_read_only(self):
        snap = StatusSnapshot(effects={"Armor": 4})
        with pytest.raises(TypeError):
            snap.effects["Armor"] = 10

    def test_effects_copied_from_caller(self):
        """Mutating the source dict after capture does not change the snapshot."""
        live = {"Armor": 4}
        snap = StatusSnapshot(effects=live)
        live["Armor"] = 99
        live["Break"] = 1
        assert snap.effect_potency("Armor") == 4
        assert not snap.has_effect("Break")

    def test_negative_strength_rejected(self):
        with pytest.raises(ValueError):
            StatusSnapshot(strength_stacks=-1)

    @pytest.mark.parametrize("name", ["damage_dealt_multiplier", "damage_taken_multiplier"])
    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_multiplier_rejected(self, name, value):
        with pytest.raises(ValueError, match="finite"):
            StatusSnapshot(**{name: value})

    def test_to_dict(self):
        data = StatusSnapshot(strength_stacks=3, effects={"Armor": 2}).to_dict()
        assert data["strength_stacks"] == 3
        assert data["effects"] == {"Armor": 2}


class TestSnapshotFromEffects:
    """Named effects -> snapshot quantities."""

    def test_empty(self):
        assert snapshot_from_effects([]).is_neutral

    def test_strength(self):
        snap = snapshot_from_effects([StatusEffect("Strength", 5)])
        assert snap.strength_stacks == 5

    def test_strength_stacks_sum(self):
        snap = snapshot_from_effects([StatusEffect("Strength", 2), StatusEffect("Strength", 3)])
        assert snap.strength_stacks == 5
        assert snap.effect_potency("Strength") == 5

    def test_negative_strength_floored(self):
        snap = snapshot_from_effects([StatusEffect("Strength", -4)])
        assert snap.strength_stacks == 0

    def test_curse_is_negative_modification(self):
        snap = snapshot_from_effects([StatusEffect("Curse", 3)])
        assert snap.damage_modification == -3

    def test_weak_uses_config_modifier(self):
        config = CombatConfig(weak_status_modifier=0.6)
        snap = snapshot_from_effects([StatusEffect("Weak", 2)], config)
        assert snap.damage_dealt_multiplier == 0.6

    def test_break_uses_config_modifier(self):
        config = CombatConfig(break_status_modifier=1.5)
        snap = snapshot_from_effects([StatusEffect("Break", 1)], config)
        assert snap.damage_taken_multiplier == 1.5

    def test_weak_applies_once(self):
        snap = snapshot_from_effects([StatusEffect("Weak", 1), StatusEffect("Weak", 1)])
        assert snap.damage_dealt_multiplier == 0.75

    def test_default_modifiers(self):
        snap = snapshot_from_effects([StatusEffect("Weak"), StatusEffect("Break")])
        assert snap.damage_dealt_multiplier == 0.75
        assert snap.damage_taken_multiplier == 1.25

    def test_armor_and_unknown_effects_recorded(self):
        snap = snapshot_from_effects([StatusEffect("Armor", 4), StatusEffect("Thorns", 3)])
        assert snap.effect_potency("Armor") == 4
        assert snap.has_effect("Thorns")
        assert snap.damage_dealt_multiplier == 1.0


class TestEffectTableAggregator:
    """Read-only aggregator over a caller-owned table."""

    def test_known_combatant(self):
        aggregator = EffectTableAggregator({"player": [StatusEffect("Strength", 3)]})
        assert aggregator.snapshot("player").strength_stacks == 3

    def test_known_combatant_without_effects_is_neutral(self):
        aggregator = EffectTableAggregator({"slime": []})
        snap = aggregator.snapshot("slime")
        assert snap is not None
        assert snap.is_neutral

    def test_unknown_combatant_has_no_data(self):
        aggregator = EffectTableAggregator({})
        assert aggregator.snapshot("ghost") is None

    def test_does_not_mutate_table(self):
        effects = [StatusEffect("Curse", 2)]
        table = {"player": effects}
        EffectTableAggregator(table).snapshot("player")
        assert table == {"player": [StatusEffect("Curse", 2)]}

    def test_repeatable(self):
        aggregator = EffectTableAggregator({"p": [StatusEffect("Armor", 1)]})
        assert aggregator.snapshot("p") == aggregator.snapshot("p")
