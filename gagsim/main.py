"""
Main entry point of the gag simulator.

Runs an interactive console session: pick a cog, add the gags your toons are
using, and ask the solver which gags would finish the cog off this round.
The options are ranked with the default weighted preset, and combos can be
starred per battle scenario. Pass ``--stats`` to log search statistics.
"""

import logging
import sys
from dataclasses import dataclass, field

from gagsim.combat.accuracy import explain_combo_accuracy
from gagsim.combat.health import cog_health, max_cog_level
from gagsim.core.constants import MAX_COG_LEVEL, GagTrack
from gagsim.core.content import GagRepository
from gagsim.core.defaults import (
    DEFAULT_FAVORITES_PATH,
    DEFAULT_MAX_GENERATED,
    DEFAULT_MAX_TOONS,
    DEFAULT_SORT_MODE,
    DEFAULT_SORT_WEIGHTS,
    DEFAULT_TARGET_LEVEL,
)
from gagsim.core.logging import get_logger, setup_logging
from gagsim.core.utils import banner, cprint, format_accuracy
from gagsim.items.gag import GagInstance, committed, new_instance
from gagsim.solver.hints import kill_hint_strengths
from gagsim.solver.request import FillOption, FillRequest
from gagsim.solver.solver import SolveSession
from gagsim.storage.favorites import (
    FavoriteCombo,
    FavoritesStore,
    favorite_id,
    scenario_signature,
)
from gagsim.ui.cli_interface import SolverInterface

logger = get_logger(__name__)

COMMANDS = {
    "a": "Add a gag",
    "r": "Remove the last gag",
    "c": "Clear the gags",
    "l": "Set the cog level",
    "h": "Set the remaining cog HP",
    "u": "Toggle lured",
    "t": "Set the number of toons",
    "s": "Solve: find the gags that finish the cog",
    "e": "Explain the KO chance of the current gags",
    "f": "Star or unstar a kill option",
    "q": "Quit",
}


@dataclass
class Battle:
    """The scenario being edited."""

    target_level: int = DEFAULT_TARGET_LEVEL
    hp_override: int | None = None
    lured: bool = False
    max_toons: int = DEFAULT_MAX_TOONS
    gags: list[GagInstance] = field(default_factory=list)
    options: list[FillOption] = field(default_factory=list)

    @property
    def hp(self) -> int:
        if self.hp_override is not None:
            return self.hp_override
        return cog_health(self.target_level)

    @property
    def signature(self) -> str:
        return scenario_signature(
            self.target_level, self.hp_override, self.lured, self.max_toons
        )

    def to_request(self) -> FillRequest:
        return FillRequest(
            target_level=self.target_level,
            target_hp_override=self.hp_override,
            is_target_already_lured=self.lured,
            current_gags=committed(self.gags),
            max_toons=self.max_toons,
            sort_mode=DEFAULT_SORT_MODE,
            sort_weights=dict(DEFAULT_SORT_WEIGHTS),
            hide_overkill_additions=True,
            max_generated=DEFAULT_MAX_GENERATED,
        )


def add_gag(ui: SolverInterface, repo: GagRepository, battle: Battle) -> None:
    if len(battle.gags) >= battle.max_toons:
        cprint("Every toon already has a gag.", style="bold yellow")
        return
    tracks = [t for t in repo.track_order() if t != GagTrack.TOONUP]
    track = ui.choose_track(tracks)
    if track is None:
        return
    hints = kill_hint_strengths(
        battle.gags,
        battle.target_level,
        battle.max_toons,
        lured=battle.lured,
        hp_override=battle.hp_override,
    )
    gag = ui.choose_gag(repo.get_track(track).gags, hints)
    if gag is not None:
        battle.gags.append(new_instance(gag))


def toggle_favorite(ui: SolverInterface, battle: Battle, store: FavoritesStore) -> None:
    if not battle.options:
        cprint("Solve first to get kill options.", style="bold yellow")
        return
    index = ui.ask_int("Option number")
    if index is None or not 1 <= index <= len(battle.options):
        return
    option = battle.options[index - 1]
    toons = len(battle.gags) + len(option.added_gags)
    favorites = store.toggle(
        battle.signature,
        FavoriteCombo(
            id=favorite_id(battle.target_level, toons, option.total_damage, option.added_gags),
            added_gags=list(option.added_gags),
            toons=toons,
            total=option.total_damage,
            over=option.overkill,
            max_cog_level=battle.target_level,
        ),
    )
    cprint(f"{len(favorites)} favorite(s) for this scenario.", style="bold green")


def run(ui: SolverInterface, repo: GagRepository, store: FavoritesStore) -> None:
    battle = Battle()
    session = SolveSession()
    while True:
        cprint(ui.show_selection(battle.gags, battle.target_level, battle.hp, battle.lured))
        if battle.gags:
            cprint(f"All hits defeat up to a level {max_cog_level(battle.gags)} cog.")
        command = ui.choose_command(COMMANDS)

        if command == "q":
            return
        if command == "a":
            add_gag(ui, repo, battle)
        elif command == "r" and battle.gags:
            battle.gags.pop()
        elif command == "c":
            battle.gags.clear()
        elif command == "l":
            level = ui.ask_int("Cog level", battle.target_level)
            if level is not None:
                battle.target_level = max(1, min(MAX_COG_LEVEL, level))
        elif command == "h":
            battle.hp_override = ui.ask_int("Remaining HP (empty for full)")
        elif command == "u":
            battle.lured = not battle.lured
        elif command == "t":
            toons = ui.ask_int("Toons", battle.max_toons)
            if toons is not None:
                battle.max_toons = max(1, min(DEFAULT_MAX_TOONS, toons))
        elif command == "s":
            session.submit(battle.to_request())
            battle.options = session.options
            cprint(
                ui.show_options(
                    battle.options,
                    len(battle.gags),
                    store.load(battle.signature),
                )
            )
            if battle.options:
                logger.info(f"Best option KO chance: {format_accuracy(battle.options[0].accuracy)}")
        elif command == "e":
            cprint(
                explain_combo_accuracy(
                    battle.gags,
                    battle.target_level,
                    initial_lured=battle.lured,
                    hp_override=battle.hp_override,
                ),
                markup=False,
            )
        elif command == "f":
            toggle_favorite(ui, battle, store)


def main() -> None:
    setup_logging(logging.INFO, search_stats="--stats" in sys.argv[1:])
    banner("Gag Simulator")
    repo = GagRepository()
    logger.info(f"Catalog loaded: {len(repo.gags)} gags in {len(repo.tracks)} tracks")
    try:
        run(SolverInterface(), repo, FavoritesStore(DEFAULT_FAVORITES_PATH))
    except (KeyboardInterrupt, EOFError):
        cprint("")
    banner("Bye")


if __name__ == "__main__":
    main()
