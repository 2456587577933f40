"""
Game catalog.

Usage:
    from wager_engine.games import definition_for
    game = definition_for("dragon-tiger")
    raw = game.resolver.resolve(bet, rng)
"""

from wager_engine.errors import UnknownGame
from wager_engine.games.base import GameDefinition
from wager_engine.games import card_duel, card_side, crash, dice_sum, race_dice, tile_reveal

CATALOG = {
    d.id: d for d in (
        card_duel.DEFINITION,
        dice_sum.DEFINITION,
        card_side.DEFINITION,
        race_dice.DEFINITION,
        tile_reveal.DEFINITION,
        crash.DEFINITION,
    )
}

GAME_IDS = list(CATALOG.keys())


def definition_for(game_id: str) -> GameDefinition:
    """Look up a registered game."""
    game = CATALOG.get(game_id)
    if game is None:
        raise UnknownGame(f"Unknown game: {game_id}. Available: {GAME_IDS}")
    return game
