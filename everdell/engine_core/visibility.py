"""
Visibility - what one player is allowed to see.

project_state() builds the JSON-ready view for a viewer from the canonical
state. Hidden information (other hands, deck order, face-down river
destinations, secrets, the undo checkpoint and the seed) never leaves the
server in another player's view.
"""

from __future__ import annotations
from typing import Any

from .effect_resolver import resolver_state, waiting_on
from .state import GameState


def project_state(state: GameState, viewer_id: str | None) -> dict[str, Any]:
    """
    Project ``state`` for ``viewer_id``.

    A viewer of None (a spectator) sees only public information.
    """
    view = state.to_dict(include_private=False)

    if viewer_id is not None:
        viewer = state.get_player(viewer_id)
        view["players"] = [
            viewer.to_dict(include_private=True) if p.player_id == viewer_id else p.to_dict(False)
            for p in state.players
        ]

    view["pending_inputs"] = [
        p.to_dict() for p in state.pending_inputs if p.player_id == viewer_id
    ]
    view["num_pending_inputs"] = len(state.pending_inputs)
    view["waiting_on"] = waiting_on(state)
    view["resolver_state"] = resolver_state(state).value
    view["can_undo"] = (
        viewer_id is not None
        and state.undo_snapshot is not None
        and state.undo_player_id == viewer_id
        and not state.is_game_over
    )
    view["scores"] = state.get_scores() if state.is_game_over else None
    return view
