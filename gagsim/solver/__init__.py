"""
Fill-to-kill solver of the gag simulator.

Given the gags already committed this round, lists the additions that
guarantee a KO when every gag hits, ranked by KO probability or by how
cheap they are.
"""

from .request import FillOption, FillRequest
from .solver import SolveSession, solve

__all__ = [
    "FillOption",
    "FillRequest",
    "SolveSession",
    "solve",
]
