from dataclasses import dataclass
from typing import List, Tuple

from wager_engine.config import settings
from wager_engine.errors import ValidationError
from wager_engine.games.base import GameDefinition, GameResolver, LiveRound, RawOutcome, TileLadder

TILE_CHOICES = ("3", "5", "7", "10")


@dataclass(frozen=True)
class TileRevealOutcome(RawOutcome):
    mines: Tuple[int, ...]
    revealed: Tuple[int, ...]
    hit_mine: bool

    @property
    def tiles_revealed(self) -> int:
        """Safe tiles uncovered before the round ended."""
        return len(self.revealed) - (1 if self.hit_mine else 0)

    @property
    def label(self) -> str:
        if self.hit_mine:
            return f"Mine hit on reveal {len(self.revealed)}"
        return f"{self.tiles_revealed} safe tiles!"

    def details(self) -> dict:
        return {
            "mines":    list(self.mines),
            "revealed": list(self.revealed),
            "hit_mine": self.hit_mine,
            "tiles":    self.tiles_revealed,
        }


class TileRevealResolver(GameResolver):

    def __init__(self, grid: int, mine_count: int, ladder: TileLadder):
        self.grid = grid
        self.mine_count = mine_count
        self.ladder = ladder

    def resolve(self, bet, rng):
        mines = set(rng.sample(self.grid, self.mine_count))
        unrevealed = list(range(self.grid))
        revealed: List[int] = []
        # Picking uniformly among unrevealed cells makes the k-th reveal a mine
        # with probability remaining_mines / remaining_unrevealed.
        for _ in range(int(bet.choice)):
            cell = unrevealed.pop(rng.randbelow(len(unrevealed)))
            revealed.append(cell)
            if cell in mines:
                return TileRevealOutcome(tuple(sorted(mines)), tuple(revealed), hit_mine=True)
        return TileRevealOutcome(tuple(sorted(mines)), tuple(revealed), hit_mine=False)

    def validate_live_choice(self, choice):
        if choice is not None:
            raise ValidationError("Live mines takes no choice", code="invalid_choice")

    def open_live(self, bet, rng):
        return MinesBoard(self.grid, rng.sample(self.grid, self.mine_count), self.ladder)


class MinesBoard(LiveRound):
    """Interactive board: reveal cells one by one, cash out any time after the first safe one."""

    def __init__(self, grid: int, mines: List[int], ladder: TileLadder):
        super().__init__()
        self.grid = grid
        self.mines = tuple(sorted(mines))
        self.ladder = ladder
        self.revealed: List[int] = []

    def _outcome(self, hit_mine: bool) -> TileRevealOutcome:
        return TileRevealOutcome(self.mines, tuple(self.revealed), hit_mine=hit_mine)

    def _check_open(self):
        if self.finished:
            raise ValidationError("Round is already over", code="session_expired")

    async def reveal(self, cell: int) -> dict:
        self._check_open()
        if not (0 <= cell < self.grid):
            raise ValidationError(f"Cell must be within 0..{self.grid - 1}", code="invalid_cell")
        if cell in self.revealed:
            raise ValidationError("Cell already revealed", code="already_revealed")

        self.revealed.append(cell)
        if cell in self.mines:
            self._finish(self._outcome(hit_mine=True))
            return {"safe": False, "game_over": True, "board": list(self.mines)}

        safe = len(self.revealed)
        if safe == self.grid - len(self.mines):
            self._finish(self._outcome(hit_mine=False))
            return {"safe": True, "multiplier": float(self.ladder.multiplier(safe)),
                    "game_over": True, "board": list(self.mines)}
        return {"safe": True, "multiplier": float(self.ladder.multiplier(safe)),
                "game_over": False, "board": None}

    async def cash_out(self) -> TileRevealOutcome:
        self._check_open()
        if not self.revealed:
            raise ValidationError("Reveal at least one tile before cashing out", code="no_cells_revealed")
        self._finish(self._outcome(hit_mine=False))
        return await self.outcome()

    def snapshot(self) -> dict:
        return {
            "game":     "mines",
            "revealed": list(self.revealed),
            "multiplier": float(self.ladder.multiplier(len(self.revealed))),
            "finished": self.finished,
        }


_ladder = TileLadder(settings.MINES_STEP, settings.MINES_GRID - settings.MINES_COUNT)

DEFINITION = GameDefinition(
    id="mines",
    display_name="Mines",
    description=f"{settings.MINES_GRID} tiles hide {settings.MINES_COUNT} mines; "
                f"every safe tile adds {settings.MINES_STEP}x.",
    choices=TILE_CHOICES,
    payout_rule=_ladder,
    resolver=TileRevealResolver(settings.MINES_GRID, settings.MINES_COUNT, _ladder),
    live=True,
)
