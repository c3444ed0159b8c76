"""
User interface module of the gag simulator.

This module provides the command-line interface: menus, prompts and tables.
"""
