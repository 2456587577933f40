from dataclasses import dataclass

from wager_engine.games.base import FixedOdds, GameDefinition, GameResolver, RawOutcome

RANKS = ['2', '3', '4', '5', '6', '7', '8', '9', '10', 'J', 'Q', 'K', 'A']


@dataclass(frozen=True)
class CardDuelOutcome(RawOutcome):
    dragon: str
    tiger: str

    @property
    def winner(self) -> str:
        d, t = RANKS.index(self.dragon), RANKS.index(self.tiger)
        if d == t:
            return "Tie"
        return "Dragon" if d > t else "Tiger"

    @property
    def label(self) -> str:
        return f"Dragon: {self.dragon} | Tiger: {self.tiger}"


class CardDuelResolver(GameResolver):

    def resolve(self, bet, rng):
        dragon = RANKS[rng.randbelow(len(RANKS))]
        tiger  = RANKS[rng.randbelow(len(RANKS))]
        return CardDuelOutcome(dragon=dragon, tiger=tiger)


DEFINITION = GameDefinition(
    id="dragon-tiger",
    display_name="Dragon vs Tiger",
    description="Dragon and Tiger draw one card each; the higher rank wins.",
    choices=("Dragon", "Tiger", "Tie"),
    payout_rule=FixedOdds({"Dragon": 1, "Tiger": 1, "Tie": 8}),
    resolver=CardDuelResolver(),
)
