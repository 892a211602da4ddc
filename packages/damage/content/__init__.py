"""
Content module - card effects and status effect names.
"""

from .cards import CardDefinition, CardEffect, CardEffectType, parse_effect_type
from .statuses import ARMOR, BREAK, CRITICAL_UP, CURSE, STRENGTH, WEAK, StatusEffect

__all__ = [
    "CardEffectType",
    "CardEffect",
    "CardDefinition",
    "parse_effect_type",
    "StatusEffect",
    "ARMOR",
    "BREAK",
    "CRITICAL_UP",
    "CURSE",
    "STRENGTH",
    "WEAK",
]
