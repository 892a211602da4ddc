#!/usr/bin/env python3
"""
Card Damage Engine - Command Line Interface

CLI for computing single hits and running the combat-math scenario catalogue.

Usage:
    python cli.py compute --base 10 --source Strength:3 --target Armor:2 --no-crits
    python cli.py compute --card-effect Damage:6 --card-effect Heal:2 --seed ABC123
    python cli.py scenarios --extended
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from packages.damage.config import CombatConfig, ConfigError
from packages.damage.content.cards import CardDefinition, CardEffect, parse_effect_type
from packages.damage.content.statuses import StatusEffect
from packages.damage.engine import DamageResolutionEngine, DamageResult
from packages.damage.state.rng import Random, default_random_source, seed_to_long
from packages.damage.state.status import EffectTableAggregator
from packages.damage.verification import (
    EXTENDED_SCENARIOS,
    STANDARD_SCENARIOS,
    run_scenarios,
    summarize,
)

SOURCE = "source"
TARGET = "target"


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )


# =============================================================================
# ARGUMENT PARSING
# =============================================================================

def parse_named_amount(text: str):
    """Parse "Name:amount" (amount defaults to 1)."""
    name, _, amount = text.partition(":")
    name = name.strip()
    if not name:
        raise argparse.ArgumentTypeError(f"missing name in {text!r}")
    try:
        value = int(amount) if amount else 1
    except ValueError:
        raise argparse.ArgumentTypeError(f"amount must be an integer in {text!r}")
    return name, value


def parse_status(text: str) -> StatusEffect:
    name, potency = parse_named_amount(text)
    return StatusEffect(name, potency)


def parse_card_effect(text: str) -> CardEffect:
    name, amount = parse_named_amount(text)
    try:
        return CardEffect(parse_effect_type(name), amount)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def load_config(args) -> CombatConfig:
    if args.config:
        config = CombatConfig.from_json(args.config)
    elif args.env:
        config = CombatConfig.from_env()
    else:
        config = CombatConfig()
    if args.no_crits:
        config = config.with_changes(critical_hits_enabled=False)
    return config


# =============================================================================
# OUTPUT FORMATTING
# =============================================================================

def format_effects(effects: List[StatusEffect]) -> str:
    return ", ".join(e.describe() for e in effects) or "none"


def format_result(result: DamageResult) -> str:
    lines = [f"Final damage: {result.amount}"]
    if result.diagnostics:
        lines.append(f"Diagnostics: {', '.join(d.value for d in result.diagnostics)}")

    b = result.breakdown
    if b is None:
        return "\n".join(lines)

    lines.append("")
    lines.append(f"  1. Base + modification + strength: {b.base} -> {b.flat_adjusted:g}")
    lines.append(f"  2. Clamp at 0:                      {b.clamped:g}")
    lines.append(f"  3. Damage dealt multiplier:         {b.after_dealt:g}")
    lines.append(f"  4. Damage taken multiplier:         {b.after_taken:g}")
    lines.append(f"  5. Armor:                           {b.after_armor:g}")
    if b.crit_draw is None:
        lines.append("  6. Critical hit:                    disabled")
    else:
        verdict = "CRIT" if b.critical else "no crit"
        lines.append(
            f"  6. Critical hit:                    {verdict} "
            f"(draw {b.crit_draw:.4f} vs chance {b.crit_chance:.4f}) -> {b.pre_round:g}"
        )
    lines.append(f"  7. Round:                           {b.final}")
    return "\n".join(lines)


# =============================================================================
# COMMANDS
# =============================================================================

def cmd_compute(args) -> int:
    """Compute one hit."""
    try:
        config = load_config(args)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    rng = Random(seed_to_long(args.seed)) if args.seed else default_random_source()
    table = {SOURCE: args.source, TARGET: args.target}
    engine = DamageResolutionEngine(EffectTableAggregator(table, config), config=config, rng=rng)

    if args.card_effect:
        card = CardDefinition(args.card_name, tuple(args.card_effect))
        result = engine.resolve_from_card(SOURCE, TARGET, card)
    else:
        result = engine.resolve_from_amount(SOURCE, TARGET, args.base)

    if args.json:
        data = result.to_dict()
        data["source_effects"] = [e.describe() for e in args.source]
        data["target_effects"] = [e.describe() for e in args.target]
        data["config"] = config.to_dict()
        print(json.dumps(data, indent=2))
        return 0

    print(f"Source: {format_effects(args.source)}")
    print(f"Target: {format_effects(args.target)}")
    print()
    print(format_result(result))
    return 0


def cmd_scenarios(args) -> int:
    """Run the combat-math scenario catalogue."""
    scenarios = EXTENDED_SCENARIOS if args.extended else STANDARD_SCENARIOS
    results = run_scenarios(scenarios)
    summary = summarize(results)

    if args.json:
        print(json.dumps({
            "total": summary.total,
            "passed": summary.passed,
            "failed": summary.failed,
            "results": [r.to_dict() for r in results],
        }, indent=2))
    else:
        for r in results:
            status = "PASS" if r.passed else "FAIL"
            line = f"[{status}] {r.test_name}: base {r.base_damage} -> {r.actual_damage}"
            if not r.passed:
                line += f" ({r.failure_reason})"
            print(line)
        print(f"\n{summary.passed}/{summary.total} scenarios passed")

    return 0 if summary.all_passed else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Card Damage Engine - compute hits and verify combat math",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s compute --base 10 --source Strength:3 --target Break --target Armor:2 --no-crits
  %(prog)s compute --card-effect Damage:6 --card-effect Damage:4 --seed ABC123 --json
  %(prog)s scenarios --extended
        """
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Log every pipeline stage")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Compute command
    compute_parser = subparsers.add_parser("compute", help="Compute damage for one hit")
    compute_parser.add_argument("--base", "-b", type=int, default=0, help="Base damage amount")
    compute_parser.add_argument("--card-effect", "-c", type=parse_card_effect, action="append", default=[],
                                help="Card effect TYPE:AMOUNT (repeatable); overrides --base")
    compute_parser.add_argument("--card-name", default="Card", help="Card name for messages")
    compute_parser.add_argument("--source", type=parse_status, action="append", default=[],
                                help="Source status NAME:POTENCY (repeatable)")
    compute_parser.add_argument("--target", type=parse_status, action="append", default=[],
                                help="Target status NAME:POTENCY (repeatable)")
    compute_parser.add_argument("--seed", "-s", help="Seed for the crit roll (e.g., ABC123)")
    compute_parser.add_argument("--no-crits", action="store_true", help="Disable critical hits")
    compute_parser.add_argument("--config", help="JSON combat config file")
    compute_parser.add_argument("--env", action="store_true",
                                help="Read DAMAGE_* config from the environment / .env")
    compute_parser.add_argument("--json", "-j", action="store_true", help="Output in JSON format")

    # Scenarios command
    scenarios_parser = subparsers.add_parser("scenarios", help="Run combat-math scenarios")
    scenarios_parser.add_argument("--extended", "-e", action="store_true",
                                  help="Include complex, boundary, rounding and stacking scenarios")
    scenarios_parser.add_argument("--json", "-j", action="store_true", help="Output in JSON format")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    if not args.command:
        parser.print_help()
        return 1

    commands = {
        "compute": cmd_compute,
        "scenarios": cmd_scenarios,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
