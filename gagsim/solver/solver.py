"""
Entry point of the fill-to-kill solver.

Given the gags already committed this round, ``solve`` lists the additions
that guarantee a KO when every gag hits, each with its actual KO probability.
"""

import threading
from collections.abc import Mapping
from typing import Any

from gagsim.combat.health import cog_health
from gagsim.core.content import GagRepository
from gagsim.core.error_handling import ERROR_HANDLER, ErrorSeverity
from gagsim.core.logging import get_logger
from gagsim.solver.capacity import build_track_capacity, normalize_toon_restrictions
from gagsim.solver.filters import (
    filter_equivalent_overkill,
    filter_supersets_with_no_displayed_accuracy_gain,
)
from gagsim.solver.pool import compute_candidate_pool
from gagsim.solver.ranking import sort_options
from gagsim.solver.request import FillOption, FillRequest
from gagsim.solver.search import generate_options

logger = get_logger(__name__)


def effective_hp(request: FillRequest) -> int:
    """The hit points to reach: the override if given, else the level's health."""
    if request.target_hp_override is not None:
        return request.target_hp_override
    return cog_health(request.target_level)


def _solve(request: FillRequest | Mapping[str, Any]) -> list[FillOption]:
    if not isinstance(request, FillRequest):
        request = FillRequest.model_validate(request)

    hp = effective_hp(request)
    restrictions = normalize_toon_restrictions(request.toon_restrictions, request.max_toons)
    capacity = build_track_capacity(restrictions, request.enabled_tracks)
    available = request.available_gags
    if available is None:
        available = GagRepository().all_gags()
    candidates = compute_candidate_pool(request, capacity, available)

    options = generate_options(request, candidates, hp, restrictions, capacity)
    if request.hide_overkill_additions:
        options = filter_supersets_with_no_displayed_accuracy_gain(
            filter_equivalent_overkill(options)
        )

    ranked = sort_options(
        options,
        request.resolved_sort_mode,
        request.current_gags,
        request.sort_weights,
        request.gag_conserve_weights,
    )
    return ranked[: request.max_results]


def solve(request: FillRequest | Mapping[str, Any]) -> list[FillOption]:
    """
    Lists the gag additions that KO the target cog.

    Args:
        request (FillRequest | Mapping[str, Any]):
            A request, or its raw form in either the flat or the ``toggles``
            shape.

    Returns:
        list[FillOption]:
            At most ``max_results`` options, best first. Malformed requests
            and internal failures are logged and yield an empty list.

    """
    return ERROR_HANDLER.safe_execute(
        lambda: _solve(request),
        [],
        "Fill-to-kill solve failed",
        ErrorSeverity.HIGH,
    )


class SolveSession:
    """
    Keeps the result of the most recent solve of a caller.

    Every submitted request takes a ticket. A completed solve is stored only
    if no newer request was submitted meanwhile; stale results are discarded,
    not cancelled. Solves may run on other threads.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._latest_ticket = 0
        self._result_ticket = 0
        self.options: list[FillOption] = []

    def submit(self, request: FillRequest | Mapping[str, Any]) -> bool:
        """
        Solves a request, storing its options if it is still the latest.

        Returns:
            bool:
                True if the result was kept.
        """
        with self._lock:
            self._latest_ticket += 1
            ticket = self._latest_ticket

        options = solve(request)

        with self._lock:
            if ticket != self._latest_ticket or ticket < self._result_ticket:
                logger.debug(f"Discarding stale solve #{ticket}")
                return False
            self._result_ticket = ticket
            self.options = options
            return True

    @property
    def pending(self) -> bool:
        """True while the latest submitted request has not completed."""
        with self._lock:
            return self._result_ticket != self._latest_ticket
