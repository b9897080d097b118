"""
Genalgo objective functions.

This module provides the objective function contract and a few benchmark
problems used for demonstrations and tests.
"""

from src.genalgo.fitness.base import (
    ObjectiveFunction,
    FunctionObjective
)

from src.genalgo.fitness.benchmarks import (
    Sphere,
    Rosenbrock,
    ConstrainedRosenbrock
)

__all__ = [
    # Base classes
    "ObjectiveFunction",
    "FunctionObjective",
    # Benchmarks
    "Sphere",
    "Rosenbrock",
    "ConstrainedRosenbrock",
]
