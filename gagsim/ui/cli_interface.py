"""
User interface module for the gag simulator.

Provides console-based menus and tables for building a gag selection and
browsing the fill-to-kill options.
"""

from collections.abc import Mapping, Sequence
from typing import Any

from prompt_toolkit import ANSI, PromptSession
from rich.table import Table

from gagsim.combat.damage import CogStatus, calculate_total_damage
from gagsim.core.constants import GagTrack
from gagsim.core.utils import ccapture, damage_bar, format_accuracy, hint_bar
from gagsim.items.gag import GagInfo, GagKey
from gagsim.solver.request import FillOption
from gagsim.storage.favorites import FavoriteCombo

# one session keeps history
session: PromptSession = PromptSession(erase_when_done=True)


def format_gags(gags: Sequence[GagInfo]) -> str:
    """Joins gag names, collapsing repeats into ``2x Name``."""
    counts: dict[GagKey, int] = {}
    first: dict[GagKey, GagInfo] = {}
    for gag in gags:
        counts[gag.key] = counts.get(gag.key, 0) + 1
        first.setdefault(gag.key, gag)
    parts = []
    for key, count in counts.items():
        name = first[key].colored_name
        parts.append(f"{count}x {name}" if count > 1 else name)
    return ", ".join(parts) or "[dim](nothing)[/]"


class SolverInterface:
    """
    Command-line interface of the fill-to-kill solver.

    Menus are Rich tables; answers are read with prompt_toolkit and accept
    numeric shortcuts for list entries and letters for commands.
    """

    def choose_command(self, commands: Mapping[str, str], title: str = "Menu") -> str:
        """
        Asks for one of the lettered commands.

        Args:
            commands (Mapping[str, str]): Command letter to description.
            title (str): The table title.

        Returns:
            str: The chosen letter.

        """
        table = Table(title=title, pad_edge=False)
        table.add_column("Key", style="cyan")
        table.add_column("Command", style="bold")
        for letter, description in commands.items():
            table.add_row(letter, description)
        prompt = "\n" + ccapture(table) + "\nCommand > "
        while True:
            answer = session.prompt(ANSI(prompt)).strip().lower()
            if answer in commands:
                return answer

    def choose_track(self, tracks: Sequence[GagTrack]) -> GagTrack | None:
        """Choose a gag track, or None to go back."""
        table = Table(title="Tracks", pad_edge=False)
        table.add_column("#", style="cyan")
        table.add_column("Track", style="bold")
        for i, track in enumerate(tracks, 1):
            table.add_row(str(i), f"{track.emoji} {track.colored_name}")
        table.add_row()
        table.add_row("q", "Back")
        prompt = "\n" + ccapture(table) + "\nTrack > "
        while True:
            answer = session.prompt(ANSI(prompt))
            index = self.get_number_choice(answer) - 1
            if 0 <= index < len(tracks):
                return tracks[index]
            if answer.strip().lower() == "q":
                return None

    def choose_gag(
        self,
        gags: Sequence[GagInfo],
        hints: Mapping[GagKey, float] | None = None,
    ) -> GagInfo | None:
        """
        Choose a gag from a list, or None to go back.

        Gags that would complete a kill are shown with their hint strength.
        """
        hints = hints or {}
        table = Table(title="Gags", pad_edge=False)
        table.add_column("#", style="cyan")
        table.add_column("Lvl", style="magenta")
        table.add_column("Name", style="bold")
        table.add_column("Acc", style="blue")
        table.add_column("Dmg", style="red")
        table.add_column("Kill hint")
        for i, gag in enumerate(gags, 1):
            strength = hints.get(gag.key)
            table.add_row(
                str(i),
                str(gag.level),
                gag.colored_name,
                f"{gag.accuracy}%",
                str(gag.max_dmg or "-"),
                hint_bar(strength),
            )
        table.add_row()
        table.add_row("q", "Back")
        prompt = "\n" + ccapture(table) + "\nGag (add ! for organic) > "
        while True:
            answer = session.prompt(ANSI(prompt)).strip()
            if answer.lower() == "q":
                return None
            organic = answer.endswith("!")
            index = self.get_number_choice(answer.rstrip("!")) - 1
            if 0 <= index < len(gags):
                return gags[index].as_organic(organic)

    def ask_int(self, question: str, default: int | None = None) -> int | None:
        """Asks for an integer; an empty answer returns ``default``."""
        suffix = f" [{default}]" if default is not None else ""
        while True:
            answer = session.prompt(f"{question}{suffix} > ").strip()
            if not answer:
                return default
            try:
                return int(answer)
            except ValueError:
                continue

    def show_selection(
        self,
        gags: Sequence[GagInfo],
        target_level: int,
        hp: int,
        lured: bool,
    ) -> str:
        """Returns a summary of the current selection and target."""
        total = calculate_total_damage(gags, CogStatus(lured=lured)).total_damage
        table = Table(title="Battle", pad_edge=False, show_header=False)
        table.add_column("Field", style="bold")
        table.add_column("Value")
        table.add_row("Cog", f"level {target_level}{' (lured)' if lured else ''}")
        table.add_row("HP", damage_bar(total, hp))
        table.add_row("Gags", format_gags(gags))
        return ccapture(table)

    def show_options(
        self,
        options: Sequence[FillOption],
        current_count: int,
        favorites: Sequence[FavoriteCombo] = (),
    ) -> str:
        """Returns the fill-to-kill options as a table."""
        if not options:
            return ccapture("[bold yellow]No combination kills this cog.[/]")
        table = Table(title="Kill options", pad_edge=False)
        table.add_column("#", style="cyan")
        table.add_column("Add", style="bold")
        table.add_column("Toons", style="magenta")
        table.add_column("Damage", style="red")
        table.add_column("KO", style="green")
        table.add_column("Over", style="yellow")
        for i, option in enumerate(options, 1):
            table.add_row(
                str(i),
                format_gags(option.added_gags),
                str(current_count + len(option.added_gags)),
                str(option.total_damage),
                format_accuracy(option.accuracy),
                str(option.overkill),
            )
        output = ccapture(table)
        if favorites:
            fav_table = Table(title="★ Favorites", pad_edge=False)
            fav_table.add_column("Add", style="bold")
            fav_table.add_column("Toons", style="magenta")
            fav_table.add_column("Damage", style="red")
            fav_table.add_column("Over", style="yellow")
            for favorite in favorites:
                fav_table.add_row(
                    format_gags(favorite.added_gags),
                    str(favorite.toons),
                    str(favorite.total),
                    str(favorite.over),
                )
            output += "\n" + ccapture(fav_table)
        return output

    @staticmethod
    def get_number_choice(answer: Any) -> int:
        """
        Convert a numeric string input to its integer value.

        Args:
            answer (Any): User input to parse.

        Returns:
            int: The number, or -1 if the input is not a number.

        """
        if isinstance(answer, str) and answer.strip().isdigit():
            return int(answer.strip())
        return -1
