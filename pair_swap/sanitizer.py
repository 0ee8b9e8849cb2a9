"""
Normalization of raw amount-field edits.

The sanitizer receives the full current field value after every edit (not a
diff) and returns the canonical value the field should hold. Invalid
characters are dropped silently; the user simply sees the field not change.
"""

import re
from dataclasses import dataclass
from typing import Optional

from .constants import MAX_INPUT_DECIMALS, ZERO_AMOUNT
from .exceptions import ValidationError
from .units import is_positive_amount, truncate_decimals

_NON_AMOUNT_CHARS = re.compile(r"[^0-9.]")

# Key codes (DOM keyCode values) accepted by an amount field
KEY_BACKSPACE = 8
KEY_TAB = 9
KEY_ENTER = 13
KEY_ESCAPE = 27
KEY_END = 35
KEY_RIGHT = 39
KEY_DELETE = 46
KEY_DIGIT_0 = 48
KEY_DIGIT_9 = 57
KEY_A = 65
KEY_C = 67
KEY_V = 86
KEY_X = 88
KEY_NUMPAD_0 = 96
KEY_NUMPAD_9 = 105
KEY_NUMPAD_DECIMAL = 110
KEY_PERIOD = 190

EDITING_KEYS = frozenset(
    {
        KEY_BACKSPACE,
        KEY_TAB,
        KEY_ESCAPE,
        KEY_ENTER,
        KEY_DELETE,
        KEY_NUMPAD_DECIMAL,
        KEY_PERIOD,
    }
)
NAVIGATION_KEYS = frozenset(range(KEY_END, KEY_RIGHT + 1))  # end, home, left, up, right
# select-all, copy, paste, cut
ACCELERATOR_KEYS = frozenset({KEY_A, KEY_C, KEY_V, KEY_X})


@dataclass(frozen=True)
class KeyPress:
    """A key-down event on an amount field."""

    key_code: int
    ctrl: bool = False
    shift: bool = False


class AmountInputSanitizer:
    """
    Validates and normalizes amount field edits.

    Attributes:
        max_decimals: Fractional digits allowed while typing (UX cap applied
            regardless of the token's own decimals)
    """

    def __init__(self, max_decimals: int = MAX_INPUT_DECIMALS):
        if max_decimals < 0:
            raise ValueError(f"max_decimals must be >= 0: {max_decimals}")
        self.max_decimals = max_decimals

    def sanitize(self, raw: Optional[str]) -> str:
        """
        Canonical value for the field after an edit.

        - every character other than a digit or "." is removed
        - only the first "." is kept; digits after later dots are appended
        - a lone "." is returned as-is (the user is about to type a fraction)
        - the fraction is cut to max_decimals digits, never rounded; trailing
          zeros are kept so "1.50" can still be typed
        """
        if not raw:
            return ""

        value = _NON_AMOUNT_CHARS.sub("", raw)

        integer_part, separator, rest = value.partition(".")
        if separator:
            value = f"{integer_part}.{rest.replace('.', '')}"

        if value == ".":
            return value

        return truncate_decimals(value, self.max_decimals)

    def finalize_max(self, max_value: Optional[str]) -> str:
        """
        Seed a field from a "use maximum" action.

        The balance is passed through untouched unless it carries more than
        max_decimals fractional digits, in which case it is truncated.
        """
        if not max_value:
            return ZERO_AMOUNT
        return truncate_decimals(max_value, self.max_decimals)

    def validate(self, raw: Optional[str]) -> str:
        """
        Strict check for an amount that was not typed key by key.

        Unlike sanitize(), nothing is silently dropped: the value must be a
        well-formed positive decimal. Excess fractional digits are cut to
        max_decimals.

        Raises:
            ValidationError: If the value is malformed or not positive once cut
        """
        value = truncate_decimals((raw or "").strip(), self.max_decimals)
        if not is_positive_amount(value):
            raise ValidationError(f"Invalid amount: {raw!r}", details={"value": raw})
        return value

    @staticmethod
    def accepts_key(key: KeyPress) -> bool:
        """
        Whether a key-down event may reach the field.

        Allowed: editing keys, the two decimal-point keys, home/end/arrows,
        Ctrl+A/C/V/X, the digit row without shift, and the numeric keypad.
        """
        if key.key_code in EDITING_KEYS or key.key_code in NAVIGATION_KEYS:
            return True
        if key.ctrl and key.key_code in ACCELERATOR_KEYS:
            return True
        if not key.shift and KEY_DIGIT_0 <= key.key_code <= KEY_DIGIT_9:
            return True
        return KEY_NUMPAD_0 <= key.key_code <= KEY_NUMPAD_9
