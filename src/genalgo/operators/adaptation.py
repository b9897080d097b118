"""Constraint adaptation operators."""

import logging

import logfire

from src.genalgo.core.population import Population
from src.genalgo.operators.base import AdaptationOperator


logger = logging.getLogger("genalgo.operators")


class DynamicConstraintAdaptation(AdaptationOperator):
    """
    DAC: push every violating chromosome below the worst total.

    A violator's fitness becomes ``worst_total - sum(constraints)``, so the
    more a chromosome violates, the lower it ranks.
    """

    def __init__(self):
        self.last_penalized = 0

    def __call__(self, population: Population) -> None:
        with logfire.span("Adapt Constraints", generation=population.generation):
            self.last_penalized = population.adapt_constraints()

        if self.last_penalized:
            logger.debug(
                f"Generation {population.generation}: "
                f"{self.last_penalized}/{len(population)} chromosomes violate constraints"
            )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
