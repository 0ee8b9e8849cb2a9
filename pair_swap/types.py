"""
Core data types shared by the swap session and its collaborators.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Balance:
    """
    A balance read from chain.

    Attributes:
        raw: Exact amount in base units
        display: Collaborator-formatted decimal string (may be rounded)
    """

    raw: int
    display: str


@dataclass(frozen=True)
class ReservePair:
    """
    Pool reserves for one quote, ordered by the swap direction.

    Attributes:
        input_reserve: Reserve of the asset being sold (None if unknown)
        output_reserve: Reserve of the asset being bought (None if unknown)
    """

    input_reserve: Optional[int]
    output_reserve: Optional[int]

    @property
    def is_known(self) -> bool:
        """Both reserves loaded and the input side can absorb a trade."""
        return (
            self.input_reserve is not None
            and self.output_reserve is not None
            and self.input_reserve > 0
        )
