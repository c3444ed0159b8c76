"""
Console helpers shared by the gag simulator front end.

Everything printed goes through one rich console so captured tables and
direct output share width and color settings. The formatters here turn
solver numbers (KO chances, damage against hp, hint strengths) into short
markup strings.
"""

from __future__ import annotations

from typing import Any, Generic

from rich.console import Console
from rich.rule import Rule
from typing_extensions import TypeVar

_console = Console(markup=True, width=120, force_terminal=True, force_jupyter=False)


def cprint(*args: Any, **kwargs: Any) -> None:
    """Prints rich markup to the shared console."""
    _console.print(*args, **kwargs)


def banner(title: str, style: str = "bold green") -> None:
    """Prints a horizontal rule with ``title`` in the middle."""
    _console.print(Rule(title, style=style))


def ccapture(content: Any) -> str:
    """
    Renders a renderable (table, markup string) to an ANSI string.

    Prompts are built from captured tables, since prompt_toolkit cannot print
    rich renderables itself.
    """
    with _console.capture() as capture:
        _console.print(content, markup=True, end="")
    return capture.get()


_T = TypeVar("_T")


class Singleton(type, Generic[_T]):
    """Metaclass that returns the same instance every time."""

    _instances: dict[Singleton[_T], _T] = {}

    def __call__(cls, *args: Any, **kwargs: Any) -> _T:
        if cls not in cls._instances:
            cls._instances[cls] = super().__call__(*args, **kwargs)
        return cls._instances[cls]


def format_accuracy(accuracy: float) -> str:
    """Formats a KO probability the way the options table shows it."""
    return f"{accuracy * 100:.1f}%"


def _bar(ratio: float, length: int, color: str) -> str:
    filled = max(0, min(length, int(ratio * length)))
    bar = f"[{color}]" + "▮" * filled
    if filled < length:
        bar += "[dim white]" + "▯" * (length - filled) + "[/]"
    return bar + "[/]"


def damage_bar(damage: int, hp: int, length: int = 20) -> str:
    """
    Shows how much of the cog's hp the all-hit damage covers.

    The bar turns green once the damage is lethal; the numbers follow it.
    """
    ratio = damage / hp if hp > 0 else 1.0
    color = "green" if damage >= hp else "red"
    return f"{_bar(ratio, length, color)} {damage}/{hp}"


def hint_bar(strength: float | None, length: int = 10) -> str:
    """Shows a kill hint strength in [0, 1]; no hint renders as an empty cell."""
    if strength is None:
        return ""
    return _bar(strength, length, "orange3")
