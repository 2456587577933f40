from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum
from typing import Optional


class RoundState(str, Enum):
    IDLE = "idle"
    BET_PLACED = "bet_placed"
    RESOLVING = "resolving"
    SETTLED = "settled"
    RECONCILING = "reconciling"
    RECONCILED = "reconciled"
    UNSYNCED = "unsynced"

    @property
    def ready(self) -> bool:
        return self in (RoundState.IDLE, RoundState.RECONCILED, RoundState.UNSYNCED)


@dataclass(frozen=True)
class BetRequest:
    game_id: str
    amount: int
    choice: Optional[str]


@dataclass(frozen=True)
class RoundOutcome:
    win: bool
    profit_loss: int


@dataclass(frozen=True)
class WalletBalance:
    optimistic: int
    authoritative: int
    synced: bool

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class RoundResult:
    """What the caller sees once a round reaches a terminal state."""
    round_id: str
    game_id: str
    amount: int
    choice: Optional[str]
    outcome_label: str
    win: bool
    profit_loss: int
    balance: WalletBalance
    state: RoundState
    details: dict = field(default_factory=dict)
    warning: Optional[str] = None

    @property
    def synced(self) -> bool:
        return self.state == RoundState.RECONCILED

    def to_dict(self) -> dict:
        return {
            "round_id":   self.round_id,
            "game":       self.game_id,
            "amount":     self.amount,
            "choice":     self.choice,
            "outcome":    self.outcome_label,
            "won":        self.win,
            "profit":     self.profit_loss,
            "balance":    self.balance.to_dict(),
            "state":      self.state.value,
            "synced":     self.synced,
            "details":    self.details,
            "warning":    self.warning,
        }


@dataclass(frozen=True)
class LedgerRecord:
    round_id: str
    game_id: str
    amount: int
    outcome_label: str
    profit_loss: int
    timestamp: datetime

    def to_dict(self) -> dict:
        d = asdict(self)
        d["timestamp"] = self.timestamp.isoformat()
        return d
