"""
Selection operators.

Each operator fills the mating pool of a scored population with
``population.matsize`` independent draws (with replacement). None of them
removes chromosomes from the current generation.
"""

from typing import Optional
import math

import numpy as np

from src.genalgo.core.population import Population
from src.genalgo.operators.base import SelectionOperator, RandomSource


class RouletteWheelSelection(SelectionOperator):
    """Proportional roulette wheel selection (RWS)."""

    def __call__(self, population: Population) -> None:
        self.check(population)

        # adjusting all fitness to positive values
        population.adjust_fitness()
        weights = population.fitness
        fitsum = float(weights.sum())

        for _ in range(population.matsize):
            if fitsum > 0.0:
                index = self.spin(weights, self.rng.uniform(0.0, fitsum), population)
            else:
                index = 0
            population.select(index)


class StochasticUniversalSampling(SelectionOperator):
    """
    Stochastic universal sampling (SUS).

    One random offset, then ``matsize`` evenly spaced pointers over the
    cumulative fitness.
    """

    def __call__(self, population: Population) -> None:
        self.check(population)

        population.adjust_fitness()
        weights = population.fitness
        fitsum = float(weights.sum())
        matsize = population.matsize

        if fitsum <= 0.0:
            for _ in range(matsize):
                population.select(0)
            return

        dist = fitsum / matsize
        ptr = self.rng.uniform(0.0, dist)

        for _ in range(matsize):
            population.select(self.spin(weights, ptr, population))
            ptr += dist


class RankSelection(SelectionOperator):
    """
    Classic linear rank-based selection (RNK).

    Chromosomes ranked best first get weights ``P, P-1, ..., 1``. The weight
    table is built once per run.
    """

    def __init__(self, rng: RandomSource = None):
        super().__init__(rng)
        self._ranks: Optional[np.ndarray] = None

    def reset(self) -> None:
        self._ranks = None

    @property
    def weights(self) -> Optional[np.ndarray]:
        """Cached rank weights, best rank first (None before the first call)."""
        return self._ranks

    def rank_weights(self, popsize: int) -> np.ndarray:
        return np.arange(popsize, 0, -1, dtype=float)

    def __call__(self, population: Population) -> None:
        self.check(population)

        popsize = len(population)
        if self._ranks is None or len(self._ranks) != popsize:
            self._ranks = self.rank_weights(popsize)
        ranksum = float(self._ranks.sum())

        order = population.ranked_indices()
        for _ in range(population.matsize):
            rank = self.spin(self._ranks, self.rng.uniform(0.0, ranksum), population)
            population.select(order[rank])


class SelectivePressureRankSelection(RankSelection):
    """
    Linear rank-based selection with selective pressure (RSP).

    Rank ``i`` (0 = best) weighs ``2 - SP + 2 (SP - 1) (P - i) / P``. With
    ``SP = 1`` every chromosome weighs the same.
    """

    def __init__(self, selective_pressure: Optional[float] = None, rng: RandomSource = None):
        """
        Args:
            selective_pressure: Overrides the population's SP when given
            rng: Random generator, or a seed to build one from
        """
        super().__init__(rng)
        self.selective_pressure = selective_pressure
        self._pressure: Optional[float] = None

    def reset(self) -> None:
        super().reset()
        self._pressure = None

    def __call__(self, population: Population) -> None:
        pressure = self.selective_pressure if self.selective_pressure is not None else population.SP
        if pressure != self._pressure:
            self._ranks = None
            self._pressure = pressure
        super().__call__(population)

    def rank_weights(self, popsize: int) -> np.ndarray:
        sp = self._pressure
        i = np.arange(popsize, dtype=float)
        return 2.0 - sp + 2.0 * (sp - 1.0) * (popsize - i) / popsize


class TournamentSelection(SelectionOperator):
    """Tournament selection (TNT): best of ``tntsize`` uniform draws."""

    def __init__(self, tournament_size: Optional[int] = None, rng: RandomSource = None):
        super().__init__(rng)
        self.tournament_size = tournament_size

    def __call__(self, population: Population) -> None:
        self.check(population)

        popsize = len(population)
        tntsize = self.tournament_size or population.tntsize

        for _ in range(population.matsize):
            # selecting randomly a first element
            best_idx = int(self.rng.integers(0, popsize))
            best_fit = population[best_idx].fitness

            for _ in range(1, tntsize):
                idx = int(self.rng.integers(0, popsize))
                fit = population[idx].fitness
                if fit > best_fit:
                    best_fit = fit
                    best_idx = idx

            population.select(best_idx)


class TransformRankingSelection(SelectionOperator):
    """
    Transform ranking selection (TRS).

    Each call replaces the population's fitness with
    ``ceil((P - P exp(-c z)) / (1 - exp(-c)))`` where ``z`` are uniform draws
    sorted descending and handed out best chromosome first, then spins a
    roulette over the new values. ``c`` grows by ``step`` on every call, so
    the pressure increases generation after generation.

    Original fitness values are lost after this operator runs.
    """

    def __init__(self, initial_c: float = 0.2, step: float = 0.1, rng: RandomSource = None):
        super().__init__(rng)
        self.initial_c = initial_c
        self.step = step
        self.c = initial_c

    def reset(self) -> None:
        self.c = self.initial_c

    def __call__(self, population: Population) -> None:
        self.check(population)

        popsize = len(population)
        c = self.c

        draws = np.sort(self.rng.random(popsize))[::-1]
        for index, z in zip(population.ranked_indices(), draws):
            population[index].fitness = float(
                math.ceil((popsize - popsize * math.exp(-c * z)) / (1.0 - math.exp(-c)))
            )

        # updating c for next generation
        self.c = c + self.step

        weights = population.fitness
        fitsum = float(weights.sum())

        for _ in range(population.matsize):
            if fitsum > 0.0:
                index = self.spin(weights, self.rng.uniform(0.0, fitsum), population)
            else:
                index = 0
            population.select(index)
