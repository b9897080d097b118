"""
Population Management for the Genetic Algorithm.

This module manages one generation of chromosomes together with the mating
pool built from it and the buffer of offspring that will replace it. It owns
fitness normalization, constraint-penalty adaptation and the re-assertion of
forced (fixed) gene values.
"""

from typing import List, Optional, Dict, Any, Sequence, Callable, Iterator, Tuple
from dataclasses import dataclass, field
import logging
import statistics

import logfire
import numpy as np

from src.genalgo.core.chromosome import Chromosome
from src.genalgo.core.parameter import Parameter, Number, build_parameters
from src.genalgo.exceptions import EncodeDecodeMismatch


logger = logging.getLogger("genalgo.population")


@dataclass
class ForcedValues:
    """
    Mask pinning selected genes to fixed decoded values.

    Attributes:
        flags: One flag per gene, True when the gene is forced
        values: One value per gene, read only where the flag is set
    """

    flags: List[bool]
    values: List[Number]

    def __post_init__(self):
        """Validate mask shape."""
        if len(self.flags) != len(self.values):
            raise ValueError(
                f"Forced value mask has {len(self.flags)} flags but {len(self.values)} values"
            )

    @classmethod
    def from_mapping(cls, forced: Dict[int, Number], nbgene: int) -> "ForcedValues":
        """Build a mask from ``{gene_index: value}``."""
        flags = [False] * nbgene
        values: List[Number] = [0] * nbgene
        for index, value in forced.items():
            if not 0 <= index < nbgene:
                raise IndexError(f"Forced gene {index} out of range for {nbgene} genes")
            flags[index] = True
            values[index] = value
        return cls(flags=flags, values=values)

    def items(self) -> Iterator[Tuple[int, Number]]:
        """Yield ``(gene_index, value)`` for every forced gene."""
        for index, (flag, value) in enumerate(zip(self.flags, self.values)):
            if flag:
                yield index, value


class Population:
    """
    Manages one generation of chromosomes in the genetic algorithm.

    Handles initialization, evaluation, fitness adjustment, mating pool
    construction and generation replacement.
    """

    def __init__(
        self,
        parameters: Sequence[Parameter],
        popsize: int,
        matsize: Optional[int] = None,
        tournament_size: int = 10,
        selective_pressure: float = 1.5,
        recombination: Optional[float] = None,
        generation: int = 1,
        strict_forced_values: bool = False
    ):
        """
        Initialize an empty population.

        Args:
            parameters: Encoded parameters shared by every chromosome
            popsize: Number of chromosomes per generation
            matsize: Mating pool size (defaults to popsize)
            tournament_size: Contestants per tournament (TNT)
            selective_pressure: Pressure coefficient for RSP
            recombination: Fixed arithmetic crossover ratio (None for random)
            generation: Initial generation counter
            strict_forced_values: Raise on forced-value mismatches instead of logging
        """
        if popsize < 1:
            raise ValueError(f"Population size must be positive, got {popsize}")

        self.parameters: List[Parameter] = list(parameters)
        self.popsize = popsize
        self.matsize = matsize or popsize
        self.tntsize = tournament_size
        self.SP = selective_pressure
        self.recombination = recombination
        self.generation = generation
        self.strict_forced_values = strict_forced_values

        self.chromosomes: List[Chromosome] = []
        self.mating_pool: List[Chromosome] = []
        self.new_generation: List[Chromosome] = []

        self.encoding_mismatches = 0
        self.selection_overflows = 0
        self.statistics: Dict[str, Any] = {}

    @classmethod
    def from_bounds(
        cls,
        bounds: Sequence[Sequence[Number]],
        bits: int,
        popsize: int,
        matsize: Optional[int] = None,
        integer: bool = False,
        **kwargs
    ) -> "Population":
        """Create a population from ``(lower, upper[, initial])`` tuples."""
        return cls(build_parameters(bounds, bits, integer=integer), popsize, matsize, **kwargs)

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self.chromosomes)

    def __iter__(self) -> Iterator[Chromosome]:
        return iter(self.chromosomes)

    def __getitem__(self, index: int) -> Chromosome:
        """Chromosome of the current generation."""
        return self.chromosomes[index]

    @property
    def nogen(self) -> int:
        return self.generation

    @property
    def fitness(self) -> np.ndarray:
        """Current-generation fitness values in population order."""
        return np.array([c.fitness for c in self.chromosomes], dtype=float)

    def new_chromosome(self) -> Chromosome:
        """
        Blank chromosome for the next generation.

        It carries the breeding generation until ``advance`` stamps it, so
        generation-driven mutation sees the current generation count.
        """
        return Chromosome(self.parameters, recombination=self.recombination, generation=self.generation)

    # ------------------------------------------------------------------
    # Initialization and evaluation
    # ------------------------------------------------------------------

    def initialize(self, rng: np.random.Generator) -> None:
        """
        Fill the current generation.

        When every parameter carries an initial value the first chromosome
        is built from those values; all others are random.
        """
        self.chromosomes = []
        self.mating_pool = []
        self.new_generation = []

        seeded = all(p.initial is not None for p in self.parameters)
        for i in range(self.popsize):
            chromosome = Chromosome(self.parameters, recombination=self.recombination, generation=self.generation)
            if i == 0 and seeded:
                chromosome.initialize()
            else:
                chromosome.create(rng)
            self.chromosomes.append(chromosome)

    def evaluate(self, objective: Callable[[List[Number]], Sequence[float]]) -> None:
        """Evaluate every chromosome of the current generation."""
        for chromosome in self.chromosomes:
            chromosome.evaluate(objective)

    # ------------------------------------------------------------------
    # Fitness helpers
    # ------------------------------------------------------------------

    def adjust_fitness(self) -> None:
        """Shift all fitness values so that none is negative."""
        worst = min(c.fitness for c in self.chromosomes)
        if worst < 0.0:
            offset = abs(worst)
            for chromosome in self.chromosomes:
                chromosome.fitness += offset

    def get_sum_fitness(self) -> float:
        return float(sum(c.fitness for c in self.chromosomes))

    def get_worst_total(self) -> float:
        """Lowest objective total in the current generation."""
        return min(c.total for c in self.chromosomes)

    def has_constraints(self) -> bool:
        return any(c.constraints for c in self.chromosomes)

    def adapt_constraints(self) -> int:
        """
        Penalize chromosomes violating any constraint.

        A violator's fitness becomes ``worst_total - sum(constraints)``, which
        places it below the worst total and orders violators by how much
        they violate.

        Returns:
            Number of penalized chromosomes
        """
        worst_total = self.get_worst_total()
        penalized = 0

        for chromosome in self.chromosomes:
            constraints = chromosome.constraints
            if any(value >= 0.0 for value in constraints):
                chromosome.fitness = worst_total - sum(constraints)
                penalized += 1

        return penalized

    def ranked_indices(self) -> List[int]:
        """Indices of the current generation by fitness, best first (stable)."""
        return sorted(range(len(self.chromosomes)), key=lambda i: -self.chromosomes[i].fitness)

    def best(self) -> Chromosome:
        """Chromosome with the highest fitness (first one on ties)."""
        return max(self.chromosomes, key=lambda c: c.fitness)

    def get_elite(self, size: int) -> List[Chromosome]:
        """Copies of the ``size`` best chromosomes for the next generation."""
        return [self.chromosomes[index].clone() for index in self.ranked_indices()[:size]]

    # ------------------------------------------------------------------
    # Mating pool
    # ------------------------------------------------------------------

    def select(self, index: int) -> None:
        """Add the current-generation chromosome at ``index`` to the mating pool."""
        if not 0 <= index < len(self.chromosomes):
            raise IndexError(f"Selection index {index} out of range for population of {len(self.chromosomes)}")
        self.mating_pool.append(self.chromosomes[index])

    def mating(self, index: int) -> Chromosome:
        """Chromosome at ``index`` in the mating pool."""
        return self.mating_pool[index]

    def clear_mating_pool(self) -> None:
        self.mating_pool = []

    # ------------------------------------------------------------------
    # Generation replacement
    # ------------------------------------------------------------------

    def enforce_forced_values(self, forced: ForcedValues) -> List[EncodeDecodeMismatch]:
        """
        Re-initialize forced genes across the next-generation buffer.

        Every forced gene is re-encoded from its value and decoded back; a
        difference means the encoding width cannot represent the value.

        Returns:
            Mismatches found (also logged and counted)

        Raises:
            EncodeDecodeMismatch: on the first mismatch when strict enforcement is on
        """
        mismatches: List[EncodeDecodeMismatch] = []

        for chromosome in self.new_generation:
            for gene, value in forced.items():
                chromosome.init_gene(gene, value)
                decoded = chromosome.get_value(gene)
                if decoded != value:
                    mismatch = EncodeDecodeMismatch(gene, value, decoded)
                    if self.strict_forced_values:
                        raise mismatch
                    mismatches.append(mismatch)

        if mismatches:
            self.encoding_mismatches += len(mismatches)
            first = mismatches[0]
            logger.warning(
                f"{len(mismatches)} forced genes failed to round-trip "
                f"(first: gene {first.gene}, desired {first.desired}, decoded {first.decoded})"
            )
            logfire.warning(
                "Forced value encode/decode mismatch",
                count=len(mismatches),
                gene=first.gene,
                desired=first.desired,
                decoded=first.decoded
            )

        return mismatches

    def advance(self) -> None:
        """Replace the current generation with the next-generation buffer."""
        if len(self.new_generation) != self.popsize:
            raise ValueError(
                f"Next generation holds {len(self.new_generation)} chromosomes, expected {self.popsize}"
            )

        self.generation += 1
        for chromosome in self.new_generation:
            chromosome.generation = self.generation

        self.chromosomes = self.new_generation
        self.new_generation = []
        self.mating_pool = []

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def calculate_statistics(self) -> Dict[str, Any]:
        """Calculate population statistics."""
        if not self.chromosomes:
            return {}

        fitnesses = [c.fitness for c in self.chromosomes]
        totals = [c.total for c in self.chromosomes]

        stats = {
            "generation": self.generation,
            "population_size": len(self.chromosomes),
            "best_fitness": max(fitnesses),
            "worst_fitness": min(fitnesses),
            "avg_fitness": statistics.mean(fitnesses),
            "fitness_std": statistics.stdev(fitnesses) if len(fitnesses) > 1 else 0,
            "best_total": max(totals),
            "feasible_count": sum(1 for c in self.chromosomes if c.is_feasible())
        }

        self.statistics = stats
        return stats
