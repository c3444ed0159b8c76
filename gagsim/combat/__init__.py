"""
Combat module of the gag simulator.

This module contains the round resolution rules: cog health, all-hit damage
resolution and the branch-enumerating KO probability engine.
"""

from .accuracy import (
    ComboTrace,
    calculate_combo_accuracy,
    evaluate_combo,
    explain_combo_accuracy,
)
from .damage import CogStatus, DamageResult, calculate_total_damage
from .health import cog_health, max_cog_level

__all__ = [
    # Import from accuracy.py
    "ComboTrace",
    "calculate_combo_accuracy",
    "evaluate_combo",
    "explain_combo_accuracy",
    # Import from damage.py
    "CogStatus",
    "DamageResult",
    "calculate_total_damage",
    # Import from health.py
    "cog_health",
    "max_cog_level",
]
