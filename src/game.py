"""
core game logic and mechanics
"""
import random
from enum import Enum

from score_store import MemoryScoreStore


SIZE = 4
WIN_VALUE = 2048
SPAWN_FOUR_PROBABILITY = 0.1


class Direction(Enum):
    LEFT = 'left'
    RIGHT = 'right'
    UP = 'up'
    DOWN = 'down'

    @classmethod
    def parse(cls, value):
        """accept a Direction or its name ('left', 'UP', ...)"""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise ValueError(f"Invalid direction: {value!r}. Must be 'left', 'right', 'up', or 'down'")

    @property
    def horizontal(self):
        return self in (Direction.LEFT, Direction.RIGHT)

    @property
    def reversed(self):
        # right/down are presented back to front so every line slides toward index 0
        return self in (Direction.RIGHT, Direction.DOWN)


def slide_and_merge(line):
    """
    slide one line toward index 0 and merge equal neighbours

    a merged tile is not merged again in the same pass,
    so [2, 2, 2, 2] becomes [4, 4, 0, 0] and not [8, 0, 0, 0]

    returns:
        new_line: list of 4 values
        points: sum of the merged tile values
    """
    tiles = [value for value in line if value != 0]

    merged = []
    points = 0
    i = 0
    while i < len(tiles):
        if i + 1 < len(tiles) and tiles[i] == tiles[i + 1]:
            merged_value = tiles[i] * 2
            merged.append(merged_value)
            points += merged_value
            i += 2  # skip the tile that was merged in
        else:
            merged.append(tiles[i])
            i += 1

    merged += [0] * (SIZE - len(merged))
    return merged, points


class Grid:
    """flat store of the 16 cells, index = row * 4 + col"""

    def __init__(self, cells=None):
        if cells is None:
            cells = [0] * (SIZE * SIZE)
        cells = list(cells)
        if len(cells) != SIZE * SIZE:
            raise ValueError(f"grid needs {SIZE * SIZE} cells, got {len(cells)}")
        self.cells = cells

    def __getitem__(self, index):
        return self.cells[index]

    def __setitem__(self, index, value):
        self.cells[index] = value

    def __eq__(self, other):
        if isinstance(other, Grid):
            return self.cells == other.cells
        return NotImplemented

    def __repr__(self):
        return f"Grid({self.cells!r})"

    def copy(self):
        return Grid(self.cells)

    def clear(self):
        self.cells = [0] * (SIZE * SIZE)

    def get_row(self, row):
        return self.cells[row * SIZE:(row + 1) * SIZE]

    def set_row(self, row, values):
        self.cells[row * SIZE:(row + 1) * SIZE] = list(values)

    def get_column(self, col):
        return self.cells[col::SIZE]

    def set_column(self, col, values):
        self.cells[col::SIZE] = list(values)

    def get_line(self, direction, index):
        """row or column `index` as seen when sliding in `direction`"""
        line = self.get_row(index) if direction.horizontal else self.get_column(index)
        if direction.reversed:
            line.reverse()
        return line

    def set_line(self, direction, index, values):
        """write back a line given in the working orientation of `direction`"""
        values = list(values)
        if direction.reversed:
            values.reverse()
        if direction.horizontal:
            self.set_row(index, values)
        else:
            self.set_column(index, values)

    def empty_cells(self):
        return [i for i, value in enumerate(self.cells) if value == 0]

    def rows(self):
        return [self.get_row(row) for row in range(SIZE)]

    def has_adjacent_pair(self):
        """true if any cell equals its right or down neighbour"""
        for i in range(SIZE):
            for j in range(SIZE):
                value = self.cells[i * SIZE + j]
                if value == 0:
                    continue
                if j < SIZE - 1 and value == self.cells[i * SIZE + j + 1]:
                    return True
                if i < SIZE - 1 and value == self.cells[(i + 1) * SIZE + j]:
                    return True
        return False


def resolve_move(grid, direction):
    """
    apply a move to a copy of the grid

    returns:
        new_grid: the resolved grid (the input is left untouched)
        points: points earned from merging
        moved: if any line changed
    """
    new_grid = grid.copy()
    points = 0
    moved = False

    for index in range(SIZE):
        line = grid.get_line(direction, index)
        new_line, line_points = slide_and_merge(line)
        if new_line != line:
            moved = True
            new_grid.set_line(direction, index, new_line)
        points += line_points

    return new_grid, points, moved


def render_board(cells, score=None):
    """board as text, one row per line"""
    lines = []
    if score is not None:
        lines.append(f"Score: {score}")
    lines.append("-" * 25)
    for row in range(SIZE):
        text = "|"
        for cell in cells[row * SIZE:(row + 1) * SIZE]:
            text += "    |" if cell == 0 else f"{cell:4}|"
        lines.append(text)
    lines.append("-" * 25)
    return "\n".join(lines)


class MoveResult:
    """outcome of one move request"""

    def __init__(self, moved=False, points=0, spawned=None, won=False, over=False):
        self.moved = moved
        self.points = points
        self.spawned = spawned
        self.won = won
        self.over = over

    def __bool__(self):
        return self.moved

    def __repr__(self):
        return (f"MoveResult(moved={self.moved}, points={self.points}, "
                f"spawned={self.spawned}, won={self.won}, over={self.over})")


class Game2048:
    def __init__(self, rng=None, seed=None, store=None):
        """
        initialize 4x4 2048 game

        args:
            rng: random.Random used for every spawn (created from `seed` if missing)
            seed: seed for a new random source
            store: best score store with load() and save(score)
        """
        self.rng = rng or random.Random(seed)
        self.store = store if store is not None else MemoryScoreStore()
        self.best_score = self.store.load()
        self.reset()

    @classmethod
    def from_grid(cls, cells, score=0, rng=None, seed=None, store=None):
        """build a game on an existing grid (no starting tiles)"""
        game = cls(rng=rng, seed=seed, store=store)
        game._grid = Grid(cells)
        game.score = score
        return game

    def reset(self):
        """reset the game"""
        self._grid = Grid()
        self.score = 0
        self.game_won = False
        self.game_over = False
        self.history = []

        # add two starting tiles
        self.add_random_tile()
        self.add_random_tile()

    @property
    def grid(self):
        return list(self._grid.cells)

    @property
    def board(self):
        return self._grid.rows()

    @property
    def history_depth(self):
        return len(self.history)

    @property
    def max_tile(self):
        return max(self._grid.cells)

    def add_random_tile(self):
        """add a random tile (2 or 4) to an empty space, returns its index"""
        empty_cells = self._grid.empty_cells()
        if not empty_cells:
            return None

        index = self.rng.choice(empty_cells)
        # 90% chance for 2 and 10% chance for 4
        self._grid[index] = 4 if self.rng.random() < SPAWN_FOUR_PROBABILITY else 2
        return index

    def preview(self, direction):
        """
        resolved grid and points for a move, without changing the game

        the result is the afterstate: the board after the slide but before a tile spawns.
        once the game is won or over nothing can move
        """
        if self.game_over or self.game_won:
            return self.grid, 0, False
        new_grid, points, moved = resolve_move(self._grid, Direction.parse(direction))
        return new_grid.cells, points, moved

    def move(self, direction):
        """
        make a move in the specified direction

        rejected moves (nothing slides, or the game already ended) change nothing
        """
        direction = Direction.parse(direction)
        if self.game_over or self.game_won:
            return MoveResult(won=self.game_won, over=self.game_over)

        new_grid, points, moved = resolve_move(self._grid, direction)
        if not moved:
            return MoveResult(won=self.game_won, over=self.game_over)

        self.history.append((self._grid.copy(), self.score))
        self._grid = new_grid
        self.score += points
        spawned = self.add_random_tile()

        result = MoveResult(moved=True, points=points, spawned=spawned)
        self._check_game_state()
        result.won = self.game_won
        result.over = self.game_over
        return result

    def _check_game_state(self):
        if WIN_VALUE in self._grid.cells:
            self.game_won = True

        if self.is_game_over():
            self.game_over = True
            if self.score > self.best_score:
                self.best_score = self.score
                # in-memory state is final before the store is touched
                self.store.save(self.best_score)

    def can_move(self):
        """check if any direction would still change the board"""
        return bool(self._grid.empty_cells()) or self._grid.has_adjacent_pair()

    def is_game_over(self):
        """check if game is over (no more moves possible)"""
        return not self.can_move()

    def undo(self):
        """step back to the board before the last accepted move"""
        if not self.history:
            return False

        self._grid, self.score = self.history.pop()
        self.game_won = False
        self.game_over = False
        return True

    def print_board(self):
        """print the board to console"""
        print(render_board(self._grid.cells, self.score))
        if self.game_over:
            print("GAME OVER!")
        elif self.game_won:
            print("YOU WIN!")
        print()
