from wager_engine.games.base import GameDefinition, RawOutcome
from wager_engine.models import BetRequest, RoundOutcome


def settle(game: GameDefinition, bet: BetRequest, raw: RawOutcome, balance: int) -> RoundOutcome:
    """Apply the game's payout rule, never letting a loss take ``balance`` below zero."""
    outcome = game.payout_rule.evaluate(bet.amount, bet.choice, raw)
    if balance + outcome.profit_loss < 0:
        return RoundOutcome(win=outcome.win, profit_loss=-balance)
    return outcome
