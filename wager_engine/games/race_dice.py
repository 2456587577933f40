from dataclasses import dataclass
from typing import Optional, Tuple

from wager_engine.config import settings
from wager_engine.games.base import FixedOdds, GameDefinition, GameResolver, RawOutcome

FACES = ("1", "2", "3", "4", "5", "6")
RACE = "race"


@dataclass(frozen=True)
class DieGuessOutcome(RawOutcome):
    roll: int

    @property
    def winner(self) -> str:
        return str(self.roll)

    @property
    def label(self) -> str:
        return f"Dice: {self.roll}"


@dataclass(frozen=True)
class RaceOutcome(RawOutcome):
    player_rolls: Tuple[int, ...]
    opponent_rolls: Tuple[int, ...]
    finish: int
    player_won: bool

    @property
    def winner(self) -> Optional[str]:
        return RACE if self.player_won else None

    @property
    def label(self) -> str:
        you, them = sum(self.player_rolls), sum(self.opponent_rolls)
        return f"Race to {self.finish}: you {you} vs opponent {them} in {len(self.player_rolls)} rolls"


class RaceDiceResolver(GameResolver):

    def __init__(self, finish: int):
        self.finish = finish

    def resolve(self, bet, rng):
        if bet.choice == RACE:
            return self._race(rng)
        return DieGuessOutcome(roll=rng.randbelow(6) + 1)

    def _race(self, rng) -> RaceOutcome:
        player, opponent = [], []
        while True:
            # Both tracks move in the same tick; the player's track is checked first.
            player.append(rng.randbelow(6) + 1)
            opponent.append(rng.randbelow(6) + 1)
            if sum(player) >= self.finish:
                won = True
                break
            if sum(opponent) >= self.finish:
                won = False
                break
        return RaceOutcome(
            player_rolls=tuple(player), opponent_rolls=tuple(opponent),
            finish=self.finish, player_won=won,
        )


DEFINITION = GameDefinition(
    id="ludo",
    display_name="Ludo",
    description="Guess the roll of one die, or race an opponent's token to the finish.",
    choices=FACES + (RACE,),
    payout_rule=FixedOdds({**{f: 5 for f in FACES}, RACE: 1}),
    resolver=RaceDiceResolver(settings.RACE_FINISH),
)
