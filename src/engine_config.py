# engine_config.py
# Named configuration for the board engine: board dimension and the tile spawn distribution.

from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

BOARD_SIZE = 4
TILE_VALUES: Tuple[int, ...] = (2, 4)
TILE_PROBABILITIES: Tuple[float, ...] = (0.9, 0.1)


def is_tile_value(value: int) -> bool:
    """True for a power of two that is at least 2."""
    return value >= 2 and (value & (value - 1)) == 0


class EngineConfig(BaseModel):
    """Settings shared by every game played on one engine."""
    model_config = ConfigDict(frozen=True)

    size: int = Field(
        default=BOARD_SIZE,
        gt=1, # Board size must be at least 2x2
        description="Size of the N x N game board (e.g., 4 for a 4x4 board)."
    )
    tile_values: Tuple[int, ...] = Field(
        default=TILE_VALUES,
        min_length=1,
        description="Values a freshly spawned tile can take."
    )
    tile_probabilities: Tuple[float, ...] = Field(
        default=TILE_PROBABILITIES,
        min_length=1,
        description="Probability of each entry in tile_values, in the same order."
    )

    @field_validator("tile_values")
    @classmethod
    def _check_tile_values(cls, values: Tuple[int, ...]) -> Tuple[int, ...]:
        for value in values:
            if not is_tile_value(value):
                raise ValueError(f"Tile value {value} is not a power of two >= 2.")
        return values

    @field_validator("tile_probabilities")
    @classmethod
    def _check_probabilities(cls, probabilities: Tuple[float, ...]) -> Tuple[float, ...]:
        if any(p < 0 or p > 1 for p in probabilities):
            raise ValueError("Tile probabilities must lie in [0, 1].")
        if abs(sum(probabilities) - 1.0) > 1e-9:
            raise ValueError("Tile probabilities must sum to 1.")
        return probabilities

    @model_validator(mode="after")
    def _check_lengths_match(self) -> "EngineConfig":
        if len(self.tile_values) != len(self.tile_probabilities):
            raise ValueError("tile_values and tile_probabilities must have the same length.")
        return self

    def choose_tile_value(self, roll: float) -> int:
        """
        Maps a uniform roll in [0, 1) onto a tile value.
        Args:
            roll (float): Output of the engine's random source.
        Returns:
            int: The first tile value whose cumulative probability exceeds the roll.
        """
        cumulative = 0.0
        for value, probability in zip(self.tile_values, self.tile_probabilities):
            cumulative += probability
            if roll < cumulative:
                return value
        # Float rounding can leave the cumulative total a hair under 1.0
        return self.tile_values[-1]


DEFAULT_CONFIG = EngineConfig()
