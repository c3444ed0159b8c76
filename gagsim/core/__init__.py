"""
Core system module of the gag simulator.

This module contains the fundamental components: game constants, solver
defaults, the gag catalog repository, logging, error handling and display
utilities.
"""
