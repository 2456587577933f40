from dataclasses import dataclass

from wager_engine.games.base import FixedOdds, GameDefinition, GameResolver, RawOutcome

LUCKY = 7


@dataclass(frozen=True)
class DiceSumOutcome(RawOutcome):
    die1: int
    die2: int

    @property
    def total(self) -> int:
        return self.die1 + self.die2

    @property
    def winner(self) -> str:
        if self.total == LUCKY:
            return "Lucky"
        return "Up" if self.total > LUCKY else "Down"

    @property
    def label(self) -> str:
        return f"Dice: {self.die1} + {self.die2} = {self.total}"

    def details(self) -> dict:
        return {"die1": self.die1, "die2": self.die2, "sum": self.total}


class DiceSumResolver(GameResolver):

    def resolve(self, bet, rng):
        die1 = rng.randbelow(6) + 1
        die2 = rng.randbelow(6) + 1
        return DiceSumOutcome(die1=die1, die2=die2)


DEFINITION = GameDefinition(
    id="seven-up-down",
    display_name="7 Up Down",
    description="Two dice: bet on a total below 7, above 7, or exactly 7.",
    choices=("Down", "Lucky", "Up"),
    payout_rule=FixedOdds({"Down": 1, "Lucky": 4, "Up": 1}),
    resolver=DiceSumResolver(),
)
