"""
Gag simulator package.

This package models the damage and accuracy of Toontown gags against a single
cog, and searches for the gag combinations that finish a cog in one round.
"""
