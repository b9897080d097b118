"""
Base classes for genetic operators.

Every stochastic operator owns (or shares) an explicit numpy random
generator, handed over at construction. Sharing one generator between all
operators of a run makes the run reproducible from a single seed.
"""

from abc import ABC, abstractmethod
from typing import Optional, Union, TYPE_CHECKING
import logging

import logfire
import numpy as np

from src.genalgo.exceptions import SelectionIndexOverflow

if TYPE_CHECKING:
    from src.genalgo.core.chromosome import Chromosome
    from src.genalgo.core.population import Population


logger = logging.getLogger("genalgo.operators")

RandomSource = Union[np.random.Generator, int, None]


def make_rng(rng: RandomSource = None) -> np.random.Generator:
    """Return ``rng`` itself if it is a generator, else a new one seeded with it."""
    if isinstance(rng, np.random.Generator):
        return rng
    return np.random.default_rng(rng)


class GeneticOperator(ABC):
    """Base class for genetic operators."""

    def __init__(self, rng: RandomSource = None):
        """
        Args:
            rng: Random generator, or a seed to build one from
        """
        self.rng = make_rng(rng)

    def reset(self) -> None:
        """Clear per-run state. Called by the engine at run start."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class SelectionOperator(GeneticOperator):
    """
    Fills the mating pool of a scored population.

    Implementations append exactly ``population.matsize`` chromosomes through
    ``population.select``, sampling with replacement.
    """

    @abstractmethod
    def __call__(self, population: "Population") -> None:
        pass

    def spin(self, weights: np.ndarray, target: float, population: "Population") -> int:
        """
        Index of the first entry whose running weight sum exceeds ``target``.

        A walk running past the end is clamped to the last index and
        reported.
        """
        try:
            return cumulative_index(weights, target)
        except SelectionIndexOverflow as exc:
            population.selection_overflows += 1
            logger.warning(str(exc))
            logfire.warning("Selection index overflow", operator=self.__class__.__name__, target=target)
            return exc.last_index

    @staticmethod
    def check(population: "Population") -> None:
        if len(population) == 0:
            raise ValueError("Cannot select from an empty population")


class CrossoverOperator(GeneticOperator):
    """Writes two offspring from two parents drawn out of the mating pool."""

    @abstractmethod
    def __call__(self, population: "Population", chr1: "Chromosome", chr2: "Chromosome") -> None:
        pass

    def draw_parents(self, population: "Population"):
        """Two independent uniform draws over the mating pool (may coincide)."""
        size = len(population.mating_pool)
        if size == 0:
            raise ValueError("Cannot recombine from an empty mating pool")
        idx1 = int(self.rng.integers(0, size))
        idx2 = int(self.rng.integers(0, size))
        return population.mating(idx1), population.mating(idx2)

    @staticmethod
    def transmit_sigma(parent1: "Chromosome", parent2: "Chromosome", *offspring: "Chromosome") -> None:
        """Give every offspring gene the mean of its parents' step sizes."""
        for i in range(parent1.nbgene):
            sigma = 0.5 * (parent1.get_sigma(i) + parent2.get_sigma(i))
            for child in offspring:
                child.sigma_update(i, sigma)


class MutationOperator(GeneticOperator):
    """Perturbs the genes of one chromosome in place."""

    def __init__(self, mutrate: float, rng: RandomSource = None):
        """
        Args:
            mutrate: Per-gene (per-bit for SPM) mutation probability
            rng: Random generator, or a seed to build one from
        """
        super().__init__(rng)
        if not 0.0 <= mutrate <= 1.0:
            raise ValueError(f"Mutation rate must lie in [0, 1], got {mutrate}")
        self.mutrate = mutrate

    @abstractmethod
    def __call__(self, chromosome: "Chromosome") -> None:
        pass

    def hit(self) -> bool:
        """Draw one mutation event."""
        return self.rng.random() <= self.mutrate

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(mutrate={self.mutrate})"


class AdaptationOperator(ABC):
    """Adjusts population fitness to account for constraints."""

    @abstractmethod
    def __call__(self, population: "Population") -> None:
        pass


def cumulative_index(weights: np.ndarray, target: float) -> int:
    """
    First index whose cumulative weight is strictly greater than ``target``.

    Raises:
        SelectionIndexOverflow: when no cumulative weight exceeds ``target``
    """
    cumulative = np.cumsum(weights)
    index = int(np.searchsorted(cumulative, target, side="right"))
    if index >= len(cumulative):
        raise SelectionIndexOverflow(len(cumulative) - 1, float(target))
    return index
