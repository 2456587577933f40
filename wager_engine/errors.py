"""Error taxonomy for the round engine.

Every error carries the short ``error`` code and HTTP status the API layer
answers with, so routes never translate them by hand.
"""


class WagerError(Exception):
    status_code = 400
    code = "wager_error"

    def __init__(self, message: str = "", code: str = None):
        super().__init__(message or self.code)
        self.message = message or self.code
        if code:
            self.code = code

    def to_dict(self) -> dict:
        return {"error": self.code, "message": self.message}


class ValidationError(WagerError):
    """Illegal choice, bad amount or an illegal live action. Nothing was mutated."""
    code = "invalid_bet"


class InsufficientFunds(WagerError):
    code = "insufficient_funds"


class RoundInProgress(WagerError):
    """A bet arrived while the previous round had not reached a ready state."""
    status_code = 409
    code = "round_in_progress"


class NoActiveRound(WagerError):
    code = "game_not_found"


class UnknownGame(WagerError):
    status_code = 404
    code = "unknown_game"


class LedgerUnavailable(WagerError):
    """The ledger could not record or confirm a round (transport, timeout or rejection)."""
    status_code = 503
    code = "ledger_unavailable"


class AlreadyClaimed(WagerError):
    code = "already_claimed"
