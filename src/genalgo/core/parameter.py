"""
Encoded Parameter for the genalgo engine.

A parameter describes one bounded decision variable and how it is packed into
a fixed-width bit string. Encoding is lossy: a value is quantized onto the
2^N - 1 equal steps between the lower and upper bound, so a round trip is
exact only up to ``quantization_step``.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Union
import math

import numpy as np

from src.genalgo.exceptions import InvalidBounds


Number = Union[int, float]


@dataclass(frozen=True)
class Parameter:
    """
    One decision variable with its bounds and bit width.

    Attributes:
        lower: Lower bound (inclusive)
        upper: Upper bound (inclusive), strictly greater than ``lower``
        bits: Encoding width in bits
        initial: Optional initial value used to seed the first chromosome
        integer: Decode to the nearest integer instead of a float
    """

    lower: Number
    upper: Number
    bits: int = 16
    initial: Optional[Number] = None
    integer: bool = False

    def __post_init__(self):
        """Validate bounds and width."""
        if self.bits < 1:
            raise InvalidBounds(f"Encoding width must be at least 1 bit, got {self.bits}")
        if self.lower >= self.upper:
            raise InvalidBounds(
                f"Lower bound ({self.lower}) cannot be equal or greater than "
                f"upper bound ({self.upper})"
            )
        if self.integer and math.ceil(self.lower) > math.floor(self.upper):
            raise InvalidBounds(
                f"No integer lies within [{self.lower}, {self.upper}]"
            )

    @classmethod
    def from_data(cls, data: Sequence[Number], bits: int = 16, integer: bool = False) -> "Parameter":
        """
        Build a parameter from a ``(lower, upper[, initial])`` sequence.

        Raises:
            InvalidBounds: if fewer than two values are supplied or the bounds are inverted
        """
        if len(data) < 2:
            raise InvalidBounds(
                "Parameter data must contain at least 2 elements, the lower bound and the upper bound"
            )
        initial = data[2] if len(data) > 2 else None
        return cls(lower=data[0], upper=data[1], bits=bits, initial=initial, integer=integer)

    @property
    def max_value(self) -> int:
        """Largest unsigned integer representable on ``bits`` bits."""
        return (1 << self.bits) - 1

    @property
    def span(self) -> float:
        """Width of the bounded interval."""
        return self.upper - self.lower

    @property
    def quantization_step(self) -> float:
        """Distance between two consecutive decodable values."""
        return self.span / self.max_value

    def encode(self, value: Optional[Number] = None, rng: Optional[np.random.Generator] = None) -> str:
        """
        Encode a value as an MSB-first bit string of ``bits`` characters.

        Without a value, a uniformly random bit string is drawn from ``rng``.
        Values are expected within bounds; anything outside is clamped onto
        the nearest end of the encoding range.
        """
        if value is None:
            if rng is None:
                raise ValueError("A random generator is required to encode a random gene")
            draws = rng.integers(0, 2, size=self.bits)
            return "".join("1" if bit else "0" for bit in draws)

        scaled = (value - self.lower) / self.span * self.max_value
        # round half up, then absorb float overshoot at the bounds
        code = int(math.floor(scaled + 0.5))
        code = min(max(code, 0), self.max_value)
        return format(code, "b").zfill(self.bits)

    def decode(self, bits: str) -> Number:
        """Decode a bit string back to a value within ``[lower, upper]``."""
        if len(bits) != self.bits:
            raise ValueError(f"Expected {self.bits} bits, got {len(bits)}")
        value = self.lower + (int(bits, 2) / self.max_value) * self.span
        if self.integer:
            # nearest integer that still lies within bounds
            rounded = int(math.floor(value + 0.5))
            return min(max(rounded, math.ceil(self.lower)), math.floor(self.upper))
        return value

    def clamp(self, value: Number) -> Number:
        """Clamp a value into ``[lower, upper]``."""
        return min(max(value, self.lower), self.upper)


def build_parameters(
    bounds: Sequence[Sequence[Number]],
    bits: Union[int, Sequence[int]] = 16,
    integer: bool = False
) -> List[Parameter]:
    """
    Build parameters from a list of ``(lower, upper[, initial])`` tuples.

    Args:
        bounds: One bound tuple per decision variable
        bits: Shared width, or one width per parameter
        integer: Whether all parameters decode to integers

    Returns:
        List of parameters in the given order
    """
    if isinstance(bits, int):
        widths = [bits] * len(bounds)
    else:
        widths = list(bits)
        if len(widths) != len(bounds):
            raise InvalidBounds(
                f"Got {len(widths)} encoding widths for {len(bounds)} parameters"
            )

    return [
        Parameter.from_data(data, bits=width, integer=integer)
        for data, width in zip(bounds, widths)
    ]
