# cli_driver.py
# Terminal front end for the board engine. Run it to play the game on the CLI.

import logging
import os
from typing import List

from board_engine import BoardEngine, Direction, GameStatus, available_directions

KEY_TO_DIRECTION = {'W': Direction.UP, 'A': Direction.LEFT, 'S': Direction.DOWN, 'D': Direction.RIGHT}


def configure_logging() -> None:
    level_name = os.environ.get("SLIDE2048_LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main():
    configure_logging()
    engine = BoardEngine(on_score_change=lambda score: print(f"Score is now {score}."))
    engine.subscribe(on_game_over=lambda: print(f"No more moves possible. Final score: {engine.score}."))
    display_board_state(engine.grid, engine.score, engine.status)

    while engine.status == GameStatus.PLAYABLE:
        move_input = input("Enter move (W/A/S/D for Up/Left/Down/Right, N for new game, Q to quit): ").strip().upper()

        if move_input == 'Q':
            print("Quitting game.")
            break

        if move_input == 'N':
            engine.new_game()
            display_board_state(engine.grid, engine.score, engine.status)
            continue

        chosen_direction = KEY_TO_DIRECTION.get(move_input)
        if chosen_direction is None:
            print("Invalid input. Use W, A, S, D, N or Q.")
            continue

        if not engine.apply_move(chosen_direction):
            options = ", ".join(d.value for d in available_directions(engine.grid))
            print(f"Move did not change the board. Try: {options}.")
            continue

        display_board_state(engine.grid, engine.score, engine.status)

    print("\n--- Final Board State ---")
    display_board_state(engine.grid, engine.score, engine.status)


def display_board_state(board: List[List[int]], score: int, status: GameStatus):
    """Prints the board, score, and game status to the console."""
    print(f"\nScore: {score}")
    print("GAME OVER!" if status == GameStatus.OVER else f"Status: {status.name}")
    for row in board:
        print("\t".join(str(v) if v else "." for v in row))
    print("-" * (len(board) * 6))


if __name__ == "__main__":
    main()
