"""
Modifier Pipeline Tests

Tests each stage in isolation and the order of operations across stages.
"""

import pytest

from packages.damage.calc.pipeline import (
    DAMAGE_CEILING,
    ModifierPipeline,
    apply_armor,
    apply_dealt_multiplier,
    apply_flat_adjustment,
    apply_taken_multiplier,
    clamp_non_negative,
    round_half_away_from_zero,
    saturate,
)
from packages.damage.config import CombatConfig
from packages.damage.state.rng import FixedSequence
from packages.damage.state.status import StatusSnapshot


NO_CRITS = CombatConfig(critical_hits_enabled=False)


def run(base, source=None, target=None, config=NO_CRITS, rng=None):
    return ModifierPipeline().run(
        base,
        source or StatusSnapshot(),
        target or StatusSnapshot(),
        config,
        rng or FixedSequence([0.999]),
    )


class TestStages:
    """Individual stage functions."""

    def test_flat_adjustment_adds_both(self):
        assert apply_flat_adjustment(10, -3, 5) == 12.0

    def test_flat_adjustment_returns_float(self):
        assert isinstance(apply_flat_adjustment(10, 0, 0), float)

    def test_clamp(self):
        assert clamp_non_negative(-5.0) == 0.0
        assert clamp_non_negative(0.0) == 0.0
        assert clamp_non_negative(3.5) == 3.5

    def test_multipliers(self):
        assert apply_dealt_multiplier(10.0, 0.75) == 7.5
        assert apply_taken_multiplier(10.0, 1.5) == 15.0

    def test_armor_subtracts(self):
        assert apply_armor(10.0, 4) == 6.0

    def test_armor_floor_is_one(self):
        assert apply_armor(3.0, 10) == 1.0
        assert apply_armor(8.0, 8) == 1.0


class TestRounding:
    """Half-away-from-zero rounding."""

    def test_ties_round_up(self):
        assert round_half_away_from_zero(0.5) == 1
        assert round_half_away_from_zero(17.5) == 18
        assert round_half_away_from_zero(22.5) == 23

    def test_not_bankers(self):
        """Python's round(22.5) is 22; damage rounding is not."""
        assert round(22.5) == 22
        assert round_half_away_from_zero(22.5) == 23

    def test_below_and_above_half(self):
        assert round_half_away_from_zero(14.25) == 14
        assert round_half_away_from_zero(15.75) == 16

    def test_negative_ties_away_from_zero(self):
        assert round_half_away_from_zero(-2.5) == -3

    def test_returns_int(self):
        assert isinstance(round_half_away_from_zero(3.0), int)


class TestSaturation:
    """Float overflow never reaches the rounding step."""

    def test_saturate_passes_ordinary_values(self):
        assert saturate(17.5) == 17.5

    def test_saturate_caps_infinity(self):
        assert saturate(float("inf")) == DAMAGE_CEILING

    def test_saturate_nan_is_zero(self):
        assert saturate(float("nan")) == 0.0

    def test_overflowing_multipliers_give_ceiling(self):
        """10 * 1e308 * 10 overflows to inf."""
        source = StatusSnapshot(damage_dealt_multiplier=1e308)
        target = StatusSnapshot(damage_taken_multiplier=10.0)
        b = run(10, source=source, target=target)
        assert b.after_taken == float("inf")
        assert b.final == int(DAMAGE_CEILING)
        assert isinstance(b.final, int)

    def test_overflow_times_zero_gives_zero(self):
        """inf * 0 is NaN, which resolves to 0."""
        source = StatusSnapshot(damage_dealt_multiplier=1e308)
        target = StatusSnapshot(damage_taken_multiplier=0.0)
        assert run(10, source=source, target=target).final == 0


class TestOrderOfOperations:
    """Stage order is load-bearing."""

    def test_strength_before_multiplier(self):
        """(10 + 5) * 2.0 = 30, Strength is scaled by the outgoing multiplier."""
        source = StatusSnapshot(strength_stacks=5, damage_dealt_multiplier=2.0)
        b = run(10, source=source)
        assert b.flat_adjusted == 15.0
        assert b.after_dealt == 30.0
        assert b.final == 30

    def test_clamp_before_multiplier(self):
        """5 - 10 = -5 -> 0 -> 0 * 3.0 = 0, never un-negated."""
        source = StatusSnapshot(damage_modification=-10, damage_dealt_multiplier=3.0)
        b = run(5, source=source)
        assert b.flat_adjusted == -5.0
        assert b.clamped == 0.0
        assert b.after_dealt == 0.0
        assert b.final == 0

    def test_clamped_zero_stays_zero(self):
        """Clamped zero stays zero through every later multiplier."""
        source = StatusSnapshot(damage_modification=-20)
        target = StatusSnapshot(damage_taken_multiplier=2.0)
        assert run(5, source=source, target=target).final == 0

    def test_strength_offsets_curse_in_same_step(self):
        """Curse and Strength combine before the clamp."""
        source = StatusSnapshot(strength_stacks=8, damage_modification=-4, damage_dealt_multiplier=0.75)
        b = run(20, source=source)
        assert b.flat_adjusted == 24.0
        assert b.after_dealt == 18.0

    def test_target_multiplier_after_source(self):
        source = StatusSnapshot(damage_dealt_multiplier=0.75)
        target = StatusSnapshot(damage_taken_multiplier=1.5)
        b = run(10, source=source, target=target)
        assert b.after_dealt == 7.5
        assert b.after_taken == 11.25
        assert b.final == 11

    def test_armor_after_multipliers(self):
        """Armor subtracts from the already-multiplied amount: 10 * 1.5 - 4 = 11."""
        target = StatusSnapshot(damage_taken_multiplier=1.5, effects={"Armor": 4})
        assert run(10, target=target).final == 11

    def test_armor_floor_after_steps_one_to_four(self):
        """Working value 3 after stages 1-4, Armor 10 -> 1."""
        source = StatusSnapshot(damage_modification=-7)
        target = StatusSnapshot(effects={"Armor": 10})
        b = run(10, source=source, target=target)
        assert b.after_taken == 3.0
        assert b.after_armor == 1.0
        assert b.final == 1

    def test_armor_floor_applies_even_from_zero(self):
        """A landed hit clamped to 0 still deals 1 into Armor."""
        source = StatusSnapshot(damage_modification=-10)
        target = StatusSnapshot(effects={"Armor": 2})
        assert run(5, source=source, target=target).final == 1

    def test_no_armor_is_noop(self):
        target = StatusSnapshot(effects={"Break": 1})
        b = run(10, target=target)
        assert b.after_armor == b.after_taken == 10.0

    def test_rounding_only_at_end(self):
        """3 * 0.75 * 1.5 = 3.375 stays a float until stage 7."""
        source = StatusSnapshot(damage_dealt_multiplier=0.75)
        target = StatusSnapshot(damage_taken_multiplier=1.5)
        b = run(3, source=source, target=target)
        assert b.after_dealt == 2.25
        assert b.after_taken == pytest.approx(3.375)
        assert b.final == 3

    def test_end_to_end_scenario(self):
        """Strength 3, Break 1.5x, Armor 2, base 10: 13 -> 19.5 -> 17.5 -> 18."""
        source = StatusSnapshot(strength_stacks=3)
        target = StatusSnapshot(damage_taken_multiplier=1.5, effects={"Armor": 2})
        b = run(10, source=source, target=target)
        assert b.flat_adjusted == 13.0
        assert b.clamped == 13.0
        assert b.after_dealt == 13.0
        assert b.after_taken == 19.5
        assert b.after_armor == 17.5
        assert b.critical is False
        assert b.final == 18


class TestPipelineCritStage:
    """Crit is applied after Armor and before rounding."""

    def test_crit_multiplies_post_armor(self, crit_config, always_crit_draw):
        target = StatusSnapshot(effects={"Armor": 2})
        b = run(10, target=target, config=crit_config, rng=always_crit_draw)
        assert b.after_armor == 8.0
        assert b.critical is True
        assert b.pre_round == 16.0
        assert b.final == 16

    def test_crit_applies_to_unrounded_value(self, always_crit_draw):
        """7 * 0.75 = 5.25 -> crit 7.875 -> 8."""
        config = CombatConfig(base_critical_chance=0.5, critical_hit_modifier=1.5)
        source = StatusSnapshot(damage_dealt_multiplier=0.75)
        b = run(7, source=source, config=config, rng=always_crit_draw)
        assert b.pre_round == pytest.approx(7.875)
        assert b.final == 8

    def test_crit_rounding_differs_from_early_rounding(self, always_crit_draw):
        """8 * 0.7 = 5.6 -> crit 8.4 -> 8; rounding before the crit would give 6 * 1.5 = 9."""
        config = CombatConfig(base_critical_chance=0.5, critical_hit_modifier=1.5)
        source = StatusSnapshot(damage_dealt_multiplier=0.7)
        b = run(8, source=source, config=config, rng=always_crit_draw)
        assert b.pre_round == pytest.approx(8.4)
        assert b.final == 8

    def test_disabled_records_no_draw(self):
        b = run(10)
        assert b.crit_chance is None
        assert b.crit_draw is None
        assert b.critical is False
