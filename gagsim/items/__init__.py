"""
Items module of the gag simulator.

This module contains the gag and gag track models loaded from the catalog.
"""
