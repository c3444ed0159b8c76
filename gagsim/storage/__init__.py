"""
Storage module of the gag simulator.

This module persists the favorite combos of the player.
"""
