"""
Exceptions raised by the genalgo engine.

InvalidBounds is fatal and surfaces at problem setup. SelectionIndexOverflow
and EncodeDecodeMismatch describe recoverable conditions: the former is
clamped by the selection operators, the latter is logged and counted by the
population unless strict enforcement is configured.
"""

from typing import Optional


class GenalgoError(Exception):
    """Base class for all genalgo errors."""


class InvalidBounds(GenalgoError, ValueError):
    """Raised when a parameter is built from unusable bounds or width."""


class SelectionIndexOverflow(GenalgoError, IndexError):
    """
    Raised when a cumulative-weight walk runs past the end of the population.

    This happens when the drawn target sits exactly on (or, through rounding,
    just beyond) the total weight. Selection operators catch it and fall back
    to ``last_index``.
    """

    def __init__(self, last_index: int, target: Optional[float] = None):
        self.last_index = last_index
        self.target = target
        super().__init__(
            f"Selection index out of range (target={target}), clamping to {last_index}"
        )


class EncodeDecodeMismatch(GenalgoError, ValueError):
    """Raised (or reported) when a forced gene does not decode to its forced value."""

    def __init__(self, gene: int, desired: float, decoded: float):
        self.gene = gene
        self.desired = desired
        self.decoded = decoded
        super().__init__(
            f"Invalid decode/encode for gene {gene}: desired value {desired}, decoded value {decoded}"
        )
