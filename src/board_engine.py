# board_engine.py
# Board state transitions for the sliding-tile game: line transforms, spawning,
# terminal-state detection, and the stateful BoardEngine that ties them together.

import logging
import random
from enum import Enum
from typing import Callable, List, Optional, Tuple, Union

from engine_config import DEFAULT_CONFIG, EngineConfig, is_tile_value

logger = logging.getLogger(__name__)

Board = List[List[int]]
Cell = Tuple[int, int]
ScoreObserver = Callable[[int], None]
GameOverObserver = Callable[[], None]


class Direction(Enum):
    """Represents the possible move directions."""
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    @classmethod
    def coerce(cls, value: Union["Direction", str]) -> "Direction":
        """
        Accepts a Direction or its string value ("up", "down", "left", "right").
        Raises:
            ValueError: If the value is not one of the four directions.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value)
            except ValueError:
                pass
        raise ValueError(f"Invalid direction: {value!r}")


class GameStatus(Enum):
    """Derived progress state of a board."""
    PLAYABLE = 1
    OVER = 2


# --- Board Helper Functions ---

def get_board_size(board: Board) -> int:
    """
    Gets the size (N) of an N x N board.
    Raises:
        ValueError: If the board is not square or empty.
    """
    if not board or not all(len(row) == len(board) for row in board):
        raise ValueError("Board must be a non-empty square matrix.")
    return len(board)


def validate_board(board: Board, size: Optional[int] = None) -> None:
    """
    Checks that a board is square, optionally of the given size, and holds only
    empty cells or tile values.
    Raises:
        ValueError: On the first violation found.
    """
    n = get_board_size(board)
    if size is not None and n != size:
        raise ValueError(f"Expected a {size}x{size} board, received {n}x{n}.")
    for r, row in enumerate(board):
        for c, value in enumerate(row):
            if isinstance(value, bool) or not isinstance(value, int) or (value != 0 and not is_tile_value(value)):
                raise ValueError(f"Cell ({r}, {c}) holds {value!r}; expected 0 or a power of two >= 2.")


def get_empty_cells(board: Board) -> List[Cell]:
    """Row-major (row, col) coordinates of the empty cells."""
    n = get_board_size(board)
    return [(r, c) for r in range(n) for c in range(n) if board[r][c] == 0]


def copy_board(board: Board) -> Board:
    return [list(row) for row in board]


# --- Line Manipulation (Core Move Logic Helpers) ---

def compress_line(line: List[int]) -> List[int]:
    """Packs the non-zero tiles towards index 0, keeping their order."""
    packed = [v for v in line if v != 0]
    return packed + [0] * (len(line) - len(packed))


def merge_line(line: List[int]) -> Tuple[List[int], int]:
    """
    Merges equal neighbours of a compressed line in one left-to-right pass.
    A merged pair is skipped over, so a tile created by a merge cannot merge
    again in the same move: [2, 2, 2, 2] gives [4, 0, 4, 0], not [8, 0, 0, 0].
    Args:
        line (List[int]): A line already packed towards index 0.
    Returns:
        Tuple[List[int], int]: The merged line (zeros left in place of absorbed
                               tiles) and the sum of the tiles created.
    """
    merged = list(line)
    score_gained = 0
    i = 0
    while i < len(merged) - 1:
        if merged[i] != 0 and merged[i] == merged[i + 1]:
            merged[i] *= 2
            merged[i + 1] = 0
            score_gained += merged[i]
            i += 2
        else:
            i += 1
    return merged, score_gained


def process_line(line: List[int]) -> Tuple[List[int], int, bool]:
    """
    Applies compress, merge, then compress again to a single line, moving left.
    Returns:
        Tuple[List[int], int, bool]: The processed line, score increase, and if the line changed.
    """
    merged, score_gained = merge_line(compress_line(line))
    final_line = compress_line(merged)
    return final_line, score_gained, final_line != list(line)


# --- Board Transformations ---

def transpose_board(board: Board) -> Board:
    """New board with rows and columns swapped."""
    return [list(column) for column in zip(*board)]


def reverse_rows(board: Board) -> Board:
    """New board with every row reversed."""
    return [row[::-1] for row in board]


_ORIENT = {
    Direction.LEFT: copy_board,
    Direction.RIGHT: reverse_rows,
    Direction.UP: transpose_board,
    Direction.DOWN: lambda b: reverse_rows(transpose_board(b)),
}

_RESTORE = {
    Direction.LEFT: lambda b: b,
    Direction.RIGHT: reverse_rows,
    Direction.UP: transpose_board,
    Direction.DOWN: lambda b: transpose_board(reverse_rows(b)),
}


# --- Core Game Move Processing ---

def slide_board(board: Board, direction: Union[Direction, str]) -> Tuple[Board, int, bool]:
    """
    Slides every row or column of a board in the given direction.
    The board is oriented so that each line moves towards index 0, processed
    line by line, and turned back. The input board is never modified.
    Args:
        board (Board): The current game board.
        direction (Direction | str): The direction to move.
    Returns:
        Tuple[Board, int, bool]:
            - The board after the slide (a copy of the input when nothing moved).
            - The score gained from merges.
            - Whether any line changed.
    Raises:
        ValueError: If an invalid direction is specified.
    """
    direction = Direction.coerce(direction)
    get_board_size(board)

    oriented = _ORIENT[direction](board)
    processed: Board = []
    score_gained = 0
    changed = False
    for line in oriented:
        new_line, line_score, line_changed = process_line(line)
        processed.append(new_line)
        if line_changed:
            changed = True
            score_gained += line_score

    if not changed:
        return copy_board(board), 0, False
    return _RESTORE[direction](processed), score_gained, True


def available_directions(board: Board) -> List[Direction]:
    """Directions in which a slide would change the board."""
    return [d for d in Direction if slide_board(board, d)[2]]


# --- Spawning ---

def spawn_tile(board: Board, rng, config: EngineConfig = DEFAULT_CONFIG) -> Tuple[Board, Optional[Cell]]:
    """
    Places one new tile in a uniformly chosen empty cell of a copy of the board.
    Args:
        board (Board): The current game board.
        rng: Random source offering choice(seq) and random().
        config (EngineConfig): Supplies the tile value distribution.
    Returns:
        Tuple[Board, Optional[Cell]]: The new board and the cell that was filled,
                                      or an unchanged copy and None if the board is full.
    """
    new_board = copy_board(board)
    empty_cells = get_empty_cells(board)
    if not empty_cells:
        return new_board, None

    row, col = rng.choice(empty_cells)
    new_board[row][col] = config.choose_tile_value(rng.random())
    return new_board, (row, col)


# --- Game State Checks ---

def is_game_over(board: Board) -> bool:
    """True iff the board is full and no two horizontally or vertically adjacent cells are equal."""
    n = get_board_size(board)
    for r in range(n):
        for c in range(n):
            value = board[r][c]
            if value == 0:
                return False
            if c < n - 1 and value == board[r][c + 1]:
                return False
            if r < n - 1 and value == board[r + 1][c]:
                return False
    return True


def game_status(board: Board) -> GameStatus:
    return GameStatus.OVER if is_game_over(board) else GameStatus.PLAYABLE


# --- Stateful Engine ---

class BoardEngine:
    """
    Owns one game's board and score.

    The presentation layer calls new_game() and apply_move() and reads the
    grid and score back. Observers registered for score changes and game over
    are called synchronously at the end of an effective move, after the new
    state has been committed.
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        rng=None,
        on_score_change: Optional[ScoreObserver] = None,
        on_game_over: Optional[GameOverObserver] = None,
    ) -> None:
        self.config = config or DEFAULT_CONFIG
        self.rng = rng if rng is not None else random.Random()
        self._score_observers: List[ScoreObserver] = []
        self._game_over_observers: List[GameOverObserver] = []
        self.subscribe(on_score_change, on_game_over)
        self._board: Board = []
        self._score = 0
        self._game_over_notified = False
        self.new_game()

    def subscribe(
        self,
        on_score_change: Optional[ScoreObserver] = None,
        on_game_over: Optional[GameOverObserver] = None,
    ) -> None:
        if on_score_change is not None:
            self._score_observers.append(on_score_change)
        if on_game_over is not None:
            self._game_over_observers.append(on_game_over)

    # --- Read accessors ---

    @property
    def grid(self) -> Board:
        return copy_board(self._board)

    @property
    def score(self) -> int:
        return self._score

    @property
    def size(self) -> int:
        return self.config.size

    @property
    def status(self) -> GameStatus:
        return game_status(self._board)

    @property
    def is_over(self) -> bool:
        return self.status is GameStatus.OVER

    # --- Operations ---

    def new_game(self) -> None:
        """Empties the board, resets the score and seeds two tiles. Notifies no one."""
        board: Board = [[0] * self.size for _ in range(self.size)]
        board, _ = spawn_tile(board, self.rng, self.config)
        board, _ = spawn_tile(board, self.rng, self.config)
        self._board = board
        self._score = 0
        self._game_over_notified = False
        logger.debug("New %dx%d game seeded: %s", self.size, self.size, board)

    def load_state(self, grid: Board, score: int = 0) -> None:
        """
        Replaces the current board and score, e.g. to replay a known position.
        Raises:
            ValueError: If the grid is malformed or the score is negative.
        """
        validate_board(grid, self.size)
        if not isinstance(score, int) or score < 0:
            raise ValueError("Score must be a non-negative integer.")
        self._board = copy_board(grid)
        self._score = score
        self._game_over_notified = False

    def apply_move(self, direction: Union[Direction, str]) -> bool:
        """
        Attempts a move. An ineffective move leaves everything untouched.
        Args:
            direction (Direction | str): One of up, down, left, right.
        Returns:
            bool: True if the board changed (and a tile was spawned).
        Raises:
            ValueError: If an invalid direction is specified.
        """
        direction = Direction.coerce(direction)
        slid, score_gained, changed = slide_board(self._board, direction)
        if not changed:
            logger.debug("Move %s had no effect", direction.value)
            return False

        self._board, spawned = spawn_tile(slid, self.rng, self.config)
        self._score += score_gained
        logger.debug("Move %s gained %d, spawned at %s", direction.value, score_gained, spawned)

        now_over = is_game_over(self._board)
        notify_over = now_over and not self._game_over_notified
        if notify_over:
            self._game_over_notified = True
            logger.info("Game over with score %d", self._score)

        if score_gained > 0:
            for observer in list(self._score_observers):
                observer(self._score)
        if notify_over:
            for observer in list(self._game_over_observers):
                observer()
        return True
