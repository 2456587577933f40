from dataclasses import dataclass

from wager_engine.games.base import FixedOdds, GameDefinition, GameResolver, RawOutcome

SIDES = ("Andar", "Bahar")


@dataclass(frozen=True)
class CardSideOutcome(RawOutcome):
    side: str

    @property
    def winner(self) -> str:
        return self.side

    @property
    def label(self) -> str:
        return f"Result: {self.side}"


class CardSideResolver(GameResolver):

    def resolve(self, bet, rng):
        return CardSideOutcome(side=SIDES[rng.randbelow(2)])


DEFINITION = GameDefinition(
    id="andar-bahar",
    display_name="Andar Bahar",
    description="Guess which side the matching card lands on.",
    choices=SIDES,
    payout_rule=FixedOdds({"Andar": 1, "Bahar": 1}),
    resolver=CardSideResolver(),
)
