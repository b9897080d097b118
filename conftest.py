"""
PyTest configuration and fixtures for the genalgo engine.

This module provides shared test fixtures: seeded random generators, common
parameter sets, scored populations and an offline logfire configuration.
"""

import os
import sys
from typing import List

import numpy as np
import pytest
import logfire

# Add project root to Python path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from src.genalgo.core.config import GAConfig, create_test_config
from src.genalgo.core.parameter import Parameter, build_parameters
from src.genalgo.core.population import Population
from src.genalgo.fitness import Sphere


# Never ship test spans anywhere
logfire.configure(send_to_logfire=False, console=False)


@pytest.fixture
def rng() -> np.random.Generator:
    """Seeded random generator."""
    return np.random.default_rng(12345)


@pytest.fixture
def two_parameters() -> List[Parameter]:
    """Two 16-bit parameters on [-2, 2]."""
    return build_parameters([(-2.0, 2.0), (-2.0, 2.0)], bits=16)


@pytest.fixture
def ten_bit_parameter() -> Parameter:
    """One 8-bit parameter on [0, 10] with initial value 5."""
    return Parameter(lower=0, upper=10, bits=8, initial=5)


@pytest.fixture
def population(two_parameters, rng) -> Population:
    """Initialized, unevaluated population of 10 chromosomes."""
    pop = Population(two_parameters, popsize=10, tournament_size=3)
    pop.initialize(rng)
    return pop


@pytest.fixture
def scored_population(population) -> Population:
    """Population of 10 chromosomes evaluated on the negated sphere."""
    population.evaluate(Sphere())
    return population


@pytest.fixture
def ga_test_config() -> GAConfig:
    """Small seeded configuration for engine tests."""
    return create_test_config()


def set_fitness(population: Population, values) -> None:
    """Overwrite fitness (and totals) of the first ``len(values)`` chromosomes."""
    for chromosome, value in zip(population.chromosomes, values):
        chromosome.fitness = float(value)
        chromosome.total = float(value)


@pytest.fixture
def fitness_setter():
    """Helper writing fitness values onto a population."""
    return set_fitness
