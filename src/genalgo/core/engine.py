"""
Genetic Algorithm Engine for the genalgo package.

This module implements the driving loop that orchestrates evaluation,
constraint adaptation, elitism, selection, crossover, mutation and the
re-assertion of forced gene values, one generation at a time.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Dict, Any, Callable, Sequence, Union
import logging

import logfire
import numpy as np

from src.genalgo.core.chromosome import Chromosome
from src.genalgo.core.config import GAConfig
from src.genalgo.core.parameter import Parameter, Number, build_parameters
from src.genalgo.core.population import Population, ForcedValues
from src.genalgo.operators import (
    make_selection,
    make_crossover,
    make_mutation,
    make_adaptation
)


Objective = Callable[[List[Number]], Sequence[float]]


@dataclass
class EvolutionResult:
    """Outcome of one run."""

    best: Chromosome
    generations: int
    converged: bool = False
    history: List[Dict[str, Any]] = field(default_factory=list)
    encoding_mismatches: int = 0
    selection_overflows: int = 0
    evaluations: int = 0

    @property
    def params(self) -> List[Number]:
        return self.best.get_param()

    @property
    def fitness(self) -> float:
        return self.best.fitness

    @property
    def total(self) -> float:
        return self.best.total

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary representation."""
        return {
            "best": self.best.to_dict(),
            "generations": self.generations,
            "converged": self.converged,
            "history": self.history,
            "encoding_mismatches": self.encoding_mismatches,
            "selection_overflows": self.selection_overflows,
            "evaluations": self.evaluations
        }


class GeneticAlgorithm:
    """
    Main engine for running genetic algorithm optimization.

    One ``numpy`` generator, seeded from ``config.random_seed``, feeds the
    population and every operator, so two runs with the same seed and
    configuration produce identical generations.
    """

    def __init__(
        self,
        objective: Objective,
        parameters: Sequence[Union[Parameter, Sequence[Number]]],
        config: Optional[GAConfig] = None,
        forced: Optional[Union[ForcedValues, Dict[int, Number]]] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the genetic algorithm engine.

        Args:
            objective: Maps decoded parameters to ``[total, *constraints]``
            parameters: Parameters, or ``(lower, upper[, initial])`` tuples
                encoded on ``config.evolution.bits`` bits
            config: Engine configuration
            forced: Genes pinned to fixed values, as a mask or ``{gene: value}``
            logger: Optional logger instance
        """
        self.config = config or GAConfig()
        self.config.validate_consistency()
        self.objective = objective
        self.logger = logger or self._setup_logger()

        if all(isinstance(p, Parameter) for p in parameters):
            self.parameters: List[Parameter] = list(parameters)
        else:
            self.parameters = build_parameters(parameters, self.config.evolution.bits)

        if isinstance(forced, dict):
            forced = ForcedValues.from_mapping(forced, len(self.parameters))
        elif forced is not None and len(forced.flags) != len(self.parameters):
            raise ValueError(
                f"Forced value mask covers {len(forced.flags)} genes, expected {len(self.parameters)}"
            )
        self.forced = forced

        self.rng = np.random.default_rng(self.config.random_seed)

        operators = self.config.operators
        evolution = self.config.evolution
        self.selection = make_selection(operators.selection, self.rng, operators)
        self.crossover = make_crossover(operators.crossover, self.rng)
        self.mutation = make_mutation(self.config.mutation, evolution.mutation_rate, self.rng)
        self.adaptation = make_adaptation(operators.adaptation)

        # State tracking
        self.population: Optional[Population] = None
        self.best: Optional[Chromosome] = None
        self.history: List[Dict[str, Any]] = []
        self.total_evaluations = 0
        self.start_time: Optional[datetime] = None

    def _setup_logger(self) -> logging.Logger:
        """Setup default logger."""
        logger = logging.getLogger("genalgo.engine")
        logger.setLevel(getattr(logging, self.config.logging.log_level))

        if not logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            logger.addHandler(handler)

        return logger

    def _create_population(self) -> Population:
        evolution = self.config.evolution
        return Population(
            self.parameters,
            popsize=evolution.population_size,
            matsize=evolution.matsize,
            tournament_size=evolution.tournament_size,
            selective_pressure=evolution.selective_pressure,
            recombination=evolution.recombination_ratio,
            generation=1,
            strict_forced_values=self.config.strict_forced_values
        )

    def run(self) -> EvolutionResult:
        """
        Run the genetic algorithm evolution process.

        Returns:
            Best chromosome found and run statistics
        """
        evolution = self.config.evolution

        with logfire.span("GA Evolution",
                         population_size=evolution.population_size,
                         generations=evolution.generations):

            self.start_time = datetime.now()
            self.best = None
            self.history = []
            self.total_evaluations = 0

            self.selection.reset()
            self.crossover.reset()
            self.mutation.reset()

            self.population = self._create_population()
            self.population.initialize(self.rng)
            self.logger.info(
                f"Starting evolution with population size {evolution.population_size}, "
                f"{len(self.parameters)} parameters, {self.config.operators.selection.value} selection"
            )

            converged = False
            generations_run = 0
            previous_total: Optional[float] = None

            for index in range(evolution.generations):
                generation = self.population.generation
                last = index == evolution.generations - 1

                with logfire.span("Generation", generation=generation):
                    self._evaluate_population()

                    if self.adaptation is not None and self.population.has_constraints():
                        self.adaptation(self.population)

                    current = self.population.best()
                    self._update_best(current)
                    stats = self.population.calculate_statistics()
                    self.history.append(stats)
                    generations_run += 1

                    if self.config.logging.enable_logging and (
                        index % self.config.logging.log_interval == 0 or last
                    ):
                        self._log_progress(stats)

                    if evolution.tolerance > 0.0 and previous_total is not None:
                        if current.total - previous_total < evolution.tolerance:
                            self.logger.info(
                                f"Converged at generation {generation}: best total improved by "
                                f"less than {evolution.tolerance}"
                            )
                            converged = True
                            break
                    previous_total = current.total

                    if not last:
                        self._create_next_generation()

            elapsed_time = datetime.now() - self.start_time
            self.logger.info(f"Evolution completed in {elapsed_time}")
            if self.population.encoding_mismatches:
                self.logger.warning(
                    f"{self.population.encoding_mismatches} forced gene values could not be "
                    f"represented exactly"
                )

            return EvolutionResult(
                best=self.best,
                generations=generations_run,
                converged=converged,
                history=self.history,
                encoding_mismatches=self.population.encoding_mismatches,
                selection_overflows=self.population.selection_overflows,
                evaluations=self.total_evaluations
            )

    def _evaluate_population(self) -> None:
        """Evaluate every chromosome of the current generation."""
        with logfire.span("Evaluate Population", size=len(self.population)):
            self.population.evaluate(self.objective)
            self.total_evaluations += len(self.population)

    def _update_best(self, candidate: Chromosome) -> None:
        """
        Keep the best chromosome seen so far.

        Feasible chromosomes beat infeasible ones; otherwise the higher total
        wins and ties keep the earlier one.
        """
        if self.best is None:
            self.best = candidate.clone()
            return

        key = (candidate.is_feasible(), candidate.total)
        if key > (self.best.is_feasible(), self.best.total):
            self.best = candidate.clone()

    def _create_next_generation(self) -> None:
        """Breed the next generation and make it current."""
        population = self.population
        evolution = self.config.evolution

        with logfire.span("Create Next Generation", generation=population.generation):
            # Elites are copied before selection, which may rewrite fitness
            elite = population.get_elite(evolution.elite_size)

            population.clear_mating_pool()
            self.selection(population)

            population.new_generation = list(elite)
            while len(population.new_generation) < population.popsize:
                chr1 = population.new_chromosome()
                chr2 = population.new_chromosome()

                if self.rng.random() < evolution.crossover_rate:
                    self.crossover(population, chr1, chr2)
                else:
                    parent1, parent2 = self.crossover.draw_parents(population)
                    for child, parent in ((chr1, parent1), (chr2, parent2)):
                        child.set_bits(parent.bits)
                        for i in range(child.nbgene):
                            child.sigma_update(i, parent.get_sigma(i))

                self.mutation(chr1)
                self.mutation(chr2)

                population.new_generation.append(chr1)
                if len(population.new_generation) < population.popsize:
                    population.new_generation.append(chr2)

            if self.forced is not None:
                population.enforce_forced_values(self.forced)

            population.advance()

    def _log_progress(self, stats: Dict[str, Any]) -> None:
        """Log evolution progress."""
        precision = self.config.logging.precision
        params = ", ".join(f"{v:.{precision}f}" for v in self.best.get_param())

        self.logger.info(
            f"Generation {stats['generation']}: "
            f"Best: {stats['best_fitness']:.{precision}f}, "
            f"Avg: {stats['avg_fitness']:.{precision}f}, "
            f"Feasible: {stats['feasible_count']}/{stats['population_size']}, "
            f"Params: [{params}]"
        )

        if self.config.logging.metrics_export:
            metrics = {
                "evolution_generation": stats["generation"],
                **{k: v for k, v in stats.items() if k != "generation"}
            }
            logfire.info("Evolution Progress", **metrics)
