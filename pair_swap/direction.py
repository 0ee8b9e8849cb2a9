"""
Swap direction state machine.

Exactly one field is the input (editable) side; the other shows the derived
quote. Toggling flips the direction and exchanges the two field contents so
the user does not lose what they typed.
"""

from enum import Enum
from typing import Tuple

from .constants import ZERO_AMOUNT


class Side(str, Enum):
    """One of the two swap fields."""

    NATIVE = "native"
    TOKEN = "token"


class Direction(str, Enum):
    """Which side is being sold."""

    NATIVE_TO_TOKEN = "native_to_token"
    TOKEN_TO_NATIVE = "token_to_native"

    @property
    def input_side(self) -> Side:
        return Side.NATIVE if self is Direction.NATIVE_TO_TOKEN else Side.TOKEN

    @property
    def output_side(self) -> Side:
        return Side.TOKEN if self is Direction.NATIVE_TO_TOKEN else Side.NATIVE

    def flipped(self) -> "Direction":
        if self is Direction.NATIVE_TO_TOKEN:
            return Direction.TOKEN_TO_NATIVE
        return Direction.NATIVE_TO_TOKEN

    @classmethod
    def from_side(cls, side: "Side") -> "Direction":
        """Direction that sells the given side."""
        if Side(side) is Side.NATIVE:
            return cls.NATIVE_TO_TOKEN
        return cls.TOKEN_TO_NATIVE


class SwapDirectionController:
    """
    Tracks the active side and the contents of both fields.

    The controller is the only writer of the field values: the active side
    is written through set_input(), the derived side through set_derived().
    """

    def __init__(
        self,
        direction: Direction = Direction.NATIVE_TO_TOKEN,
        native_value: str = ZERO_AMOUNT,
        token_value: str = ZERO_AMOUNT,
    ):
        self._direction = Direction(direction)
        self._values = {Side.NATIVE: native_value, Side.TOKEN: token_value}

    @property
    def direction(self) -> Direction:
        return self._direction

    @property
    def active_side(self) -> Side:
        return self._direction.input_side

    @property
    def derived_side(self) -> Side:
        return self._direction.output_side

    @property
    def native_value(self) -> str:
        return self._values[Side.NATIVE]

    @property
    def token_value(self) -> str:
        return self._values[Side.TOKEN]

    @property
    def input_value(self) -> str:
        return self._values[self.active_side]

    @property
    def derived_value(self) -> str:
        return self._values[self.derived_side]

    def value_of(self, side: Side) -> str:
        return self._values[Side(side)]

    def is_editable(self, side: Side) -> bool:
        """Only the active side accepts keystrokes."""
        return Side(side) is self.active_side

    def set_input(self, value: str) -> None:
        self._values[self.active_side] = value

    def set_derived(self, value: str) -> None:
        self._values[self.derived_side] = value

    def toggle(self) -> Direction:
        """
        Flip the direction and exchange the field contents.

        The native and token values trade places, so the amount the user
        typed stays in the active field (now denominated in the other asset)
        and the old quote sits in the derived field until it is recomputed.
        """
        self._values[Side.NATIVE], self._values[Side.TOKEN] = (
            self._values[Side.TOKEN],
            self._values[Side.NATIVE],
        )
        self._direction = self._direction.flipped()
        return self._direction

    def reset_values(self) -> None:
        """Zero both fields (after a completed swap); direction is kept."""
        self._values[Side.NATIVE] = ZERO_AMOUNT
        self._values[Side.TOKEN] = ZERO_AMOUNT

    def snapshot(self) -> Tuple[Direction, str, str]:
        return self._direction, self.native_value, self.token_value
