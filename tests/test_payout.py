import pytest

from wager_engine.games import CATALOG, definition_for
from wager_engine.games.card_duel import CardDuelOutcome
from wager_engine.games.crash import CrashOutcome
from wager_engine.games.dice_sum import DiceSumOutcome
from wager_engine.games.tile_reveal import TileRevealOutcome
from wager_engine.models import BetRequest, RoundOutcome
from wager_engine.rng import SeededSource
from wager_engine.services.payout import settle

BALANCE = 10_000


def pay(game_id, choice, raw, amount=100, balance=BALANCE):
    return settle(definition_for(game_id), BetRequest(game_id, amount, choice), raw, balance)


class TestCardDuel:

    def test_tie_on_equal_ranks_pays_eight(self):
        assert pay("dragon-tiger", "Tie", CardDuelOutcome("Q", "Q")) == RoundOutcome(True, 800)

    def test_tie_on_unequal_ranks_loses(self):
        assert pay("dragon-tiger", "Tie", CardDuelOutcome("2", "A")) == RoundOutcome(False, -100)

    def test_side_bet_loses_on_tie(self):
        assert pay("dragon-tiger", "Dragon", CardDuelOutcome("9", "9")) == RoundOutcome(False, -100)

    def test_side_bet_wins_even_money(self):
        assert pay("dragon-tiger", "Tiger", CardDuelOutcome("3", "J"), amount=250) == RoundOutcome(True, 250)


class TestDiceSum:

    def test_lucky_seven_pays_four(self):
        assert pay("seven-up-down", "Lucky", DiceSumOutcome(3, 4)) == RoundOutcome(True, 400)

    @pytest.mark.parametrize("choice", ["Up", "Down"])
    def test_bands_ignore_seven(self, choice):
        assert pay("seven-up-down", choice, DiceSumOutcome(3, 4)) == RoundOutcome(False, -100)

    def test_lucky_loses_off_seven(self):
        assert pay("seven-up-down", "Lucky", DiceSumOutcome(6, 2)) == RoundOutcome(False, -100)


class TestTileReveal:

    def test_five_safe_tiles(self):
        raw = TileRevealOutcome(mines=(0, 1, 2, 3, 4), revealed=(5, 6, 7, 8, 9), hit_mine=False)
        # 1 + 0.3 × 5 = 2.5
        assert pay("mines", "5", raw, amount=101) == RoundOutcome(True, 252 - 101)

    def test_fractional_multiplier_floors_exactly(self):
        raw = TileRevealOutcome(mines=(0, 1, 2, 3, 4), revealed=(5, 6, 7), hit_mine=False)
        # 10 × 1.9 = 19, no float drift down to 18
        assert pay("mines", "3", raw, amount=10) == RoundOutcome(True, 9)

    def test_mine_forfeits_bet(self):
        raw = TileRevealOutcome(mines=(0, 1, 2, 3, 4), revealed=(9, 3), hit_mine=True)
        assert pay("mines", "5", raw) == RoundOutcome(False, -100)


class TestCrash:

    def test_cash_out_before_crash(self):
        assert pay("crash", "2", CrashOutcome(crash_point=3.0, cashout=2.0)) == RoundOutcome(True, 100)

    def test_cash_out_after_crash(self):
        assert pay("crash", None, CrashOutcome(crash_point=3.0, cashout=3.5)) == RoundOutcome(False, -100)

    def test_no_cash_out(self):
        assert pay("crash", None, CrashOutcome(crash_point=1.4, cashout=None)) == RoundOutcome(False, -100)

    def test_fractional_cash_out_floors(self):
        assert pay("crash", "1.5", CrashOutcome(crash_point=2.0, cashout=1.5), amount=33) == RoundOutcome(True, 16)


class TestClamp:

    def test_loss_beyond_balance_lands_on_zero(self):
        outcome = pay("dragon-tiger", "Dragon", CardDuelOutcome("2", "3"), amount=100, balance=40)
        assert outcome.profit_loss == -40

    @pytest.mark.parametrize("balance", [0, 1, 7, 99, 100, 1000])
    def test_post_round_balance_never_negative(self, balance):
        for amount in (1, 50, 100, 5000):
            outcome = pay("dragon-tiger", "Tie", CardDuelOutcome("2", "3"), amount=amount, balance=balance)
            assert balance + outcome.profit_loss == max(0, balance - amount)


@pytest.mark.parametrize("game_id,choice,raw", [
    ("mines", "3", TileRevealOutcome(mines=(0, 1, 2, 3, 4), revealed=(5, 0), hit_mine=True)),
    ("crash", "1.5", CrashOutcome(crash_point=1.2, cashout=1.5)),
])
def test_full_stake_loss_within_max_multiplier(game_id, choice, raw):
    outcome = pay(game_id, choice, raw)

    assert outcome == RoundOutcome(False, -100)
    assert abs(outcome.profit_loss) <= 100 * definition_for(game_id).max_multiplier(choice)


@pytest.mark.parametrize("game_id", list(CATALOG))
def test_profit_bounded_by_max_multiplier(game_id):
    game = definition_for(game_id)
    rng = SeededSource(2024)
    for choice in game.choices:
        for amount in (1, 7, 100, 999):
            b = BetRequest(game_id, amount, choice)
            for _ in range(50):
                outcome = settle(game, b, game.resolver.resolve(b, rng), BALANCE)
                assert abs(outcome.profit_loss) <= amount * game.max_multiplier(choice)
                assert outcome.win == (outcome.profit_loss >= 0)
